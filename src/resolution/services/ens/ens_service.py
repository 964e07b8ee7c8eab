import asyncio
import re
from typing import Optional, Tuple
from web3 import AsyncWeb3

from resolution.config import ENS_DEFAULTS, SourceInput
from resolution.exceptions import ResolutionError, ResolutionErrorCode
from resolution.services.base_service import NamingService
from resolution.services.ens.contract_registry import ENSContractRegistry
from resolution.types import (
    NamingServiceName,
    ResolutionMeta,
    ResolutionResponse,
    is_null_address,
)
from resolution.utils.coins import ETH_COIN_TYPE, coin_type_for, encode_address
from resolution.utils.namehash import keccak_childhash, keccak_namehash, node_bytes


class ENSService(NamingService):
    """
    Resolves .eth, .luxe, .xyz and .kred domains through the Ethereum Name
    Service registry and the resolver contract each domain points to.
    """

    name = NamingServiceName.ENS
    SUPPORTED_DOMAIN = re.compile(r"^[^.\s][^\s]*\.(eth|luxe|xyz|kred|test)$")

    def __init__(self, source: SourceInput = True, debug: bool = False):
        """
        Args:
            source: True for mainnet defaults, False to disable, an RPC url or
                a mapping with url, network (name or id) and registry
            debug: Enable debug logging if True

        Raises:
            ConfigurationError: If network or url cannot be determined
        """
        super().__init__(debug)
        self._configure(source, ENS_DEFAULTS)
        self._contracts = ENSContractRegistry(self.registry_address)
        if self.enabled:
            self._contracts.initialize(
                AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.url))
            )

    def is_supported_domain(self, domain: str) -> bool:
        return bool(self.SUPPORTED_DOMAIN.match(domain))

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
        owner, resolver = await asyncio.gather(
            self._get_owner(node), self._get_resolver(node)
        )
        return self._ensure_configured(domain, owner, resolver)

    async def address(self, domain: str, currency_ticker: str) -> str:
        """
        Resolve the domain to an address of the given currency.

        Args:
            domain: Domain name such as "brad.eth"
            currency_ticker: Currency ticker such as "ETH" or "BTC"

        Returns:
            str: Address encoded the way the currency's wallets display it

        Raises:
            ResolutionError: UnsupportedCurrency, UnregisteredDomain,
                UnspecifiedResolver or UnspecifiedCurrency
        """
        node = self._prepare(domain)
        coin_type = coin_type_for(currency_ticker)
        resolver = await self.resolver(domain)
        address = await self._fetch_address(resolver, node, coin_type)
        if not address:
            raise ResolutionError(
                ResolutionErrorCode.UnspecifiedCurrency,
                domain=domain,
                currency_ticker=currency_ticker,
            )
        return address

    async def record(self, domain: str, key: str) -> str:
        node = self._prepare(domain)
        resolver = await self.resolver(domain)
        value = await self._fetch_text(resolver, node, key)
        return self._ensure_record_presence(domain, key, value)

    async def resolve(self, domain: str) -> ResolutionResponse:
        node = self._prepare(domain)
        owner, ttl, resolver = await self._get_resolution_info(node)
        if is_null_address(owner):
            return ResolutionResponse.unclaimed(self.service_type, node)

        addresses = {}
        if not is_null_address(resolver):
            eth_address = await self._fetch_address(resolver, node, ETH_COIN_TYPE)
            if eth_address:
                addresses["ETH"] = eth_address
        else:
            resolver = None

        return ResolutionResponse(
            addresses=addresses,
            meta=ResolutionMeta(
                owner=owner,
                resolver=resolver,
                type=self.service_type,
                ttl=int(ttl or 0),
                namehash=node,
            ),
        )

    async def reverse(self, address: str, currency_ticker: str = "ETH") -> Optional[str]:
        """
        Find the domain an address points back to.

        Args:
            address: Ethereum address, with or without 0x
            currency_ticker: Only ETH is supported

        Returns:
            Optional[str]: Domain name, None if no reverse record is set
        """
        if currency_ticker.upper() != "ETH":
            raise ResolutionError(
                ResolutionErrorCode.UnsupportedCurrency, currency_ticker=currency_ticker
            )
        self.ensure_supported_network()
        if address.startswith("0x"):
            address = address[2:]
        node = keccak_namehash(f"{address.lower()}.addr.reverse")
        resolver = await self._get_resolver(node)
        if is_null_address(resolver):
            return None
        return await self._resolver_call_to_name(resolver, node) or None

    async def _get_owner(self, node: str) -> str:
        registry = self._contracts.get_contract("registry")
        return await self._call_method(registry, "owner", [node_bytes(node)])

    async def _get_resolver(self, node: str) -> str:
        registry = self._contracts.get_contract("registry")
        return await self._call_method(registry, "resolver", [node_bytes(node)])

    async def _get_resolution_info(self, node: str) -> Tuple[str, int, str]:
        registry = self._contracts.get_contract("registry")
        node_arg = [node_bytes(node)]
        owner, ttl, resolver = await asyncio.gather(
            self._call_method(registry, "owner", node_arg),
            self._call_method(registry, "ttl", node_arg),
            self._call_method(registry, "resolver", node_arg),
        )
        return owner, ttl, resolver

    async def _fetch_address(
        self, resolver: str, node: str, coin_type: int
    ) -> Optional[str]:
        contract = self._contracts.get_contract("resolver", resolver)
        if coin_type == ETH_COIN_TYPE:
            address = await self._call_method(
                contract, "addr(bytes32)", [node_bytes(node)]
            )
            return None if is_null_address(address) else address

        data = await self._call_method(
            contract, "addr(bytes32,uint256)", [node_bytes(node), coin_type]
        )
        if not data:
            return None
        return encode_address(coin_type, bytes(data))

    async def _fetch_text(self, resolver: str, node: str, key: str) -> str:
        contract = self._contracts.get_contract("resolver", resolver)
        return await self._call_method(contract, "text", [node_bytes(node), key])

    async def _resolver_call_to_name(self, resolver: str, node: str) -> str:
        contract = self._contracts.get_contract("resolver", resolver)
        return await self._call_method(contract, "name", [node_bytes(node)])
