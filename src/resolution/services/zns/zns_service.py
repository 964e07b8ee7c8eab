import re
from typing import Any, Dict, Optional, Tuple

from resolution.config import ZNS_DEFAULTS, SourceInput
from resolution.contracts.zilliqa_provider import ZilliqaProvider
from resolution.services.base_service import NamingService
from resolution.types import (
    NamingServiceName,
    ResolutionMeta,
    ResolutionResponse,
    is_null_address,
)
from resolution.utils import standard_keys
from resolution.utils.coins import to_bech32_address
from resolution.utils.namehash import sha256_childhash, sha256_namehash


class ZNSService(NamingService):
    """
    Resolves .zil domains through the Zilliqa Name Service.

    The registry maps a namehash to [owner, resolver]; the resolver holds a
    flat map of records such as crypto.ETH.address.
    """

    name = NamingServiceName.ZNS
    SUPPORTED_DOMAIN = re.compile(r"^[^.\s][^\s]*\.zil$")

    def __init__(self, source: SourceInput = True, debug: bool = False):
        super().__init__(debug)
        self._configure(source, ZNS_DEFAULTS)
        self._provider = ZilliqaProvider(self.url) if self.enabled else None

    def is_supported_domain(self, domain: str) -> bool:
        return domain == "zil" or bool(self.SUPPORTED_DOMAIN.match(domain))

    def namehash(self, domain: str) -> str:
        self.ensure_supported_domain(domain)
        return sha256_namehash(domain)

    def childhash(self, parent: str, label: str) -> str:
        return sha256_childhash(parent, label)

    async def owner(self, domain: str) -> Optional[str]:
        """Owner of the domain in bech32 form (zil1...), None if unclaimed"""
        node = self._prepare(domain)
        owner, _ = await self._get_record_addresses(node)
        if is_null_address(owner):
            return None
        return to_bech32_address(owner)

    async def resolver(self, domain: str) -> str:
        node = self._prepare(domain)
        owner, resolver = await self._get_record_addresses(node)
        return self._ensure_configured(domain, owner, resolver)

    async def address(self, domain: str, currency_ticker: str) -> str:
        return await self.record(domain, standard_keys.crypto_address_key(currency_ticker))

    async def record(self, domain: str, key: str) -> str:
        records = await self.all_records(domain)
        return self._ensure_record_presence(domain, key, records.get(key))

    async def all_records(self, domain: str) -> Dict[str, str]:
        resolver = await self.resolver(domain)
        return await self._get_resolver_records(resolver)

    async def resolve(self, domain: str) -> ResolutionResponse:
        node = self._prepare(domain)
        owner, resolver = await self._get_record_addresses(node)
        if is_null_address(owner):
            return ResolutionResponse.unclaimed(self.service_type, node)

        records: Dict[str, str] = {}
        if is_null_address(resolver):
            resolver = None
        else:
            records = await self._get_resolver_records(resolver)

        addresses = {}
        for key, value in records.items():
            ticker = standard_keys.ticker_from_key(key)
            if ticker and value:
                addresses[ticker] = value

        try:
            ttl = int(records.get("ttl") or 0)
        except ValueError:
            ttl = 0

        return ResolutionResponse(
            addresses=addresses,
            records=records,
            meta=ResolutionMeta(
                owner=owner,
                resolver=resolver,
                type=self.service_type,
                ttl=ttl,
                namehash=node,
            ),
        )

    async def _get_record_addresses(
        self, node: str
    ) -> Tuple[Optional[str], Optional[str]]:
        """Owner and resolver stored in the registry for a namehash"""
        self._debug_log("Reading registry record", node)
        with self._transport_guard():
            state = await self._provider.fetch_sub_state(
                self.registry_address, "records", [node]
            )
        entry: Dict[str, Any] = (state.get("records") or {}).get(node) or {}
        arguments = entry.get("arguments") or []
        if len(arguments) < 2:
            return None, None
        return arguments[0], arguments[1]

    async def _get_resolver_records(self, resolver: str) -> Dict[str, str]:
        self._debug_log("Reading resolver records", resolver)
        with self._transport_guard():
            state = await self._provider.fetch_sub_state(resolver, "records")
        records = state.get("records") or {}
        return {key: value for key, value in records.items() if isinstance(value, str)}
