import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from resolution.config import SourceInput
from resolution.exceptions import ResolutionError, ResolutionErrorCode
from resolution.services import (
    CNSService,
    ENSService,
    NamingService,
    ServiceRegistry,
    UdapiService,
    ZNSService,
)
from resolution.types import NamingServiceName, ResolutionResponse
from resolution.utils.namehash import keccak_childhash, sha256_childhash

BlockchainInput = Union[bool, Mapping[str, SourceInput]]


class Resolution:
    """
    Entry point for resolving blockchain domains.
    Picks the naming service by domain suffix and forwards the call to it.
    """

    def __init__(
        self,
        blockchain: BlockchainInput = True,
        api: Optional[Mapping[str, Any]] = None,
        debug: bool = False,
    ):
        """
        Initialize the naming services.

        Args:
            blockchain: True to read ENS, ZNS and CNS contracts with default
                sources, a mapping with "ens", "zns" and "cns" sources, or
                False to resolve everything through the resolution API
            api: Optional API settings, {"url": ...}
            debug: Enable debug logging if True

        Raises:
            ConfigurationError: If a source is configured inconsistently
        """
        self._debug = debug
        self._logger = None
        if debug:
            self._logger = logging.getLogger(__name__)

        self.ens: Optional[ENSService] = None
        self.zns: Optional[ZNSService] = None
        self.cns: Optional[CNSService] = None
        self.api: Optional[UdapiService] = None

        if blockchain is False:
            self.api = UdapiService(url=(api or {}).get("url"), debug=debug)
            services: List[NamingService] = [self.api]
        else:
            sources: Mapping[str, SourceInput] = (
                blockchain if isinstance(blockchain, Mapping) else {}
            )
            self.ens = ENSService(sources.get("ens", True), debug=debug)
            self.zns = ZNSService(sources.get("zns", True), debug=debug)
            self.cns = CNSService(sources.get("cns", True), debug=debug)
            services = [self.ens, self.zns, self.cns]

        self._service_registry = ServiceRegistry(services)

    def _debug_log(self, message: str, data: Any = None) -> None:
        if self._debug and self._logger:
            if data is not None:
                self._logger.debug(f"{message}: {data}")
            else:
                self._logger.debug(message)

    def _service(self, domain: str) -> NamingService:
        service = self._service_registry.find_or_raise(domain)
        self._debug_log(f"Routing {domain}", service.name.value)
        return service

    def get_services(self) -> List[NamingService]:
        """Get all configured naming services in dispatch order"""
        return list(self._service_registry.list_services().values())

    def is_supported_domain(self, domain: str) -> bool:
        return self._service_registry.find(domain) is not None

    def service_name(self, domain: str) -> NamingServiceName:
        """Naming service that resolves the domain"""
        service = self._service(domain)
        if isinstance(service, UdapiService):
            return service.service_name(domain)
        return service.name

    def namehash(self, domain: str) -> str:
        """
        Produce the namehash of a domain.

        Args:
            domain: Domain name such as "brad.crypto"

        Returns:
            str: 0x prefixed hex hash, keccak based for ENS and CNS,
                sha256 based for ZNS
        """
        return self._service(domain).namehash(domain)

    def childhash(
        self,
        parent_hash: str,
        label: str,
        service_name: NamingServiceName = NamingServiceName.ENS,
    ) -> str:
        """
        Hash of a subdomain computed from its parent's namehash.

        Args:
            parent_hash: Namehash of the parent domain, 0x optional
            label: Leftmost label of the subdomain
            service_name: Hashing family, ENS and CNS share keccak, ZNS
                uses sha256

        Returns:
            str: Same value namehash() gives for "<label>.<parent>"
        """
        if service_name == NamingServiceName.ZNS:
            return sha256_childhash(parent_hash, label)
        if service_name == NamingServiceName.UDAPI:
            raise ResolutionError(
                ResolutionErrorCode.UnsupportedMethod,
                domain=label,
                method_name="childhash",
            )
        return keccak_childhash(parent_hash, label)

    async def resolve(self, domain: str) -> ResolutionResponse:
        """Resolve a domain into its addresses, records and ownership metadata"""
        return await self._service(domain).resolve(domain)

    async def address(self, domain: str, currency_ticker: str) -> str:
        """
        Resolve a domain into an address of a specific currency.

        Args:
            domain: Domain name to be resolved
            currency_ticker: Currency ticker such as "ETH", "BTC" or "ZIL"

        Returns:
            str: Address of the domain for the currency

        Raises:
            ResolutionError: If the domain cannot be resolved to an address
        """
        return await self._service(domain).address(domain, currency_ticker)

    async def addr(self, domain: str, currency_ticker: str) -> str:
        return await self.address(domain, currency_ticker)

    async def owner(self, domain: str) -> Optional[str]:
        return await self._service(domain).owner(domain)

    async def resolver(self, domain: str) -> str:
        return await self._service(domain).resolver(domain)

    async def record(self, domain: str, key: str) -> str:
        return await self._service(domain).record(domain, key)

    async def all_records(self, domain: str) -> Dict[str, str]:
        return await self._service(domain).all_records(domain)

    async def ipfs_hash(self, domain: str) -> str:
        return await self._service(domain).ipfs_hash(domain)

    async def http_url(self, domain: str) -> str:
        return await self._service(domain).http_url(domain)

    async def email(self, domain: str) -> str:
        return await self._service(domain).email(domain)

    async def chat_id(self, domain: str) -> str:
        return await self._service(domain).chat_id(domain)

    async def chat_pk(self, domain: str) -> str:
        return await self._service(domain).chat_pk(domain)

    async def twitter(self, domain: str) -> str:
        return await self._service(domain).twitter(domain)

    async def reverse(self, address: str, currency_ticker: str = "ETH") -> Optional[str]:
        """
        Find the ENS domain an address is reverse-registered to.

        Raises:
            ResolutionError: UnsupportedMethod when ENS is not configured
        """
        if not self.ens or not self.ens.enabled:
            raise ResolutionError(
                ResolutionErrorCode.UnsupportedMethod,
                domain=address,
                method_name="reverse",
            )
        return await self.ens.reverse(address, currency_ticker)
