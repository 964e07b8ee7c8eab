import asyncio
import re
from typing import Dict, List, Optional, Sequence, Tuple
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError

from resolution.config import CNS_DEFAULTS, SourceInput
from resolution.exceptions import ResolutionError, ResolutionErrorCode
from resolution.services.base_service import NamingService
from resolution.services.cns.contract_registry import CNSContractRegistry
from resolution.types import (
    NamingServiceName,
    ResolutionMeta,
    ResolutionResponse,
    is_null_address,
)
from resolution.utils import standard_keys
from resolution.utils.namehash import keccak_childhash, keccak_namehash
from resolution.utils.twitter import is_valid_twitter_signature


class CNSService(NamingService):
    """
    Resolves .crypto domains through the Crypto Name Service registry.
    Domains are ERC-721 tokens whose token id is the namehash; records live on
    the resolver contract the token points to.
    """

    name = NamingServiceName.CNS
    SUPPORTED_DOMAIN = re.compile(r"^[^.\s][^\s]*\.crypto$")

    def __init__(self, source: SourceInput = True, debug: bool = False):
        super().__init__(debug)
        self._configure(source, CNS_DEFAULTS)
        self._contracts = CNSContractRegistry(self.registry_address)
        if self.enabled:
            self._contracts.initialize(
                AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.url))
            )

    def is_supported_domain(self, domain: str) -> bool:
        return domain == "crypto" or bool(self.SUPPORTED_DOMAIN.match(domain))

    def namehash(self, domain: str) -> str:
        self.ensure_supported_domain(domain)
        return keccak_namehash(domain)

    def childhash(self, parent: str, label: str) -> str:
        return keccak_childhash(parent, label)

    async def owner(self, domain: str) -> Optional[str]:
        node = self._prepare(domain)
        owner = await self._get_owner(node)
        return None if is_null_address(owner) else owner

    async def resolver(self, domain: str) -> str:
        node = self._prepare(domain)
        owner, resolver = await self._get_resolution_info(node)
        return self._ensure_configured(domain, owner, resolver)

    async def address(self, domain: str, currency_ticker: str) -> str:
        return await self.record(domain, standard_keys.crypto_address_key(currency_ticker))

    async def record(self, domain: str, key: str) -> str:
        node = self._prepare(domain)
        resolver = await self.resolver(domain)
        value = await self._get_record(resolver, key, node)
        return self._ensure_record_presence(domain, key, value)

    async def all_records(self, domain: str) -> Dict[str, str]:
        """Standard currency and metadata records that hold a value"""
        node = self._prepare(domain)
        resolver = await self.resolver(domain)
        return await self._get_standard_records(resolver, node)

    async def resolve(self, domain: str) -> ResolutionResponse:
        node = self._prepare(domain)
        owner, resolver = await self._get_resolution_info(node)
        if is_null_address(owner):
            return ResolutionResponse.unclaimed(self.service_type, node)

        records: Dict[str, str] = {}
        if is_null_address(resolver):
            resolver = None
        else:
            records = await self._get_standard_records(resolver, node)

        addresses = {}
        for key, value in records.items():
            ticker = standard_keys.ticker_from_key(key)
            if ticker:
                addresses[ticker] = value

        return ResolutionResponse(
            addresses=addresses,
            records=records,
            meta=ResolutionMeta(
                owner=owner,
                resolver=resolver,
                type=self.service_type,
                ttl=0,
                namehash=node,
            ),
        )

    async def twitter(self, domain: str) -> str:
        """
        Twitter handle of the domain, verified against its owner.

        Raises:
            ResolutionError: UnregisteredDomain, RecordNotFound or
                InvalidTwitterVerification
        """
        node = self._prepare(domain)
        owner, resolver = await self._get_resolution_info(node)
        resolver = self._ensure_configured(domain, owner, resolver)
        validation_signature, twitter_handle = await self._get_records(
            resolver,
            [
                standard_keys.VALIDATION_TWITTER_USERNAME,
                standard_keys.TWITTER_USERNAME,
            ],
            node,
        )
        self._ensure_record_presence(
            domain, "twitter validation username", validation_signature
        )
        self._ensure_record_presence(domain, "twitter handle", twitter_handle)
        if not is_valid_twitter_signature(
            token_id=node,
            owner=owner,
            twitter_handle=twitter_handle,
            validation_signature=validation_signature,
        ):
            raise ResolutionError(
                ResolutionErrorCode.InvalidTwitterVerification, domain=domain
            )
        return twitter_handle

    async def _get_owner(self, node: str) -> Optional[str]:
        registry = self._contracts.get_contract("registry")
        try:
            return await self._call_method(registry, "ownerOf", [int(node, 16)])
        except ContractLogicError:
            # ownerOf reverts for tokens that were never minted
            return None

    async def _get_resolver(self, node: str) -> Optional[str]:
        registry = self._contracts.get_contract("registry")
        try:
            return await self._call_method(registry, "resolverOf", [int(node, 16)])
        except ContractLogicError:
            return None

    async def _get_resolution_info(
        self, node: str
    ) -> Tuple[Optional[str], Optional[str]]:
        owner, resolver = await asyncio.gather(
            self._get_owner(node), self._get_resolver(node)
        )
        return owner, resolver

    async def _get_record(self, resolver: str, key: str, node: str) -> str:
        contract = self._contracts.get_contract("resolver", resolver)
        return await self._call_method(contract, "get", [key, int(node, 16)])

    async def _get_records(
        self, resolver: str, keys: Sequence[str], node: str
    ) -> List[str]:
        contract = self._contracts.get_contract("resolver", resolver)
        return await self._call_method(contract, "getMany", [list(keys), int(node, 16)])

    async def _get_standard_records(self, resolver: str, node: str) -> Dict[str, str]:
        keys = [
            standard_keys.crypto_address_key(ticker)
            for ticker in standard_keys.RESOLVED_TICKERS
        ]
        keys.extend(standard_keys.METADATA_KEYS)
        values = await self._get_records(resolver, keys, node)
        return {key: value for key, value in zip(keys, values) if value}
