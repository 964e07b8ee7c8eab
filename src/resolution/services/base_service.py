import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence
import aiohttp

from resolution.config import NetworkDefaults, SourceInput, normalize_source
from resolution.contracts.base_contract_config import Contract
from resolution.exceptions import ResolutionError, ResolutionErrorCode
from resolution.types import NamingServiceName, ResolutionResponse, is_null_address
from resolution.utils import standard_keys

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError)
TRANSPORT_ERROR_PATTERN = re.compile(
    r"Invalid JSON RPC response|request rate exceeded|Too Many Requests"
)


class NamingService(ABC):
    """Base class for all naming service backends"""

    name: NamingServiceName

    def __init__(self, debug: bool = False):
        self._debug = debug
        self._logger = None
        if debug:
            self._logger = logging.getLogger(__name__)

        self.enabled = True
        self.url: Optional[str] = None
        self.network: Optional[str] = None
        self.registry_address: Optional[str] = None

    @property
    def service_type(self) -> str:
        """Lower-case tag reported in resolution metadata"""
        return self.name.value.lower()

    def _configure(self, source: SourceInput, defaults: NetworkDefaults) -> None:
        definition = normalize_source(source, defaults)
        self.enabled = definition.enabled
        self.url = definition.url
        self.network = definition.network
        self.registry_address = definition.registry
        self._debug_log("Configured source", definition)

    def _debug_log(self, message: str, data: Any = None) -> None:
        if self._debug and self._logger:
            if data is not None:
                self._logger.debug(f"[{self.name.value}] {message}: {data}")
            else:
                self._logger.debug(f"[{self.name.value}] {message}")

    @abstractmethod
    def is_supported_domain(self, domain: str) -> bool:
        """Check the domain suffix and basic syntax"""
        pass

    def is_supported_network(self) -> bool:
        return self.registry_address is not None

    @abstractmethod
    def namehash(self, domain: str) -> str:
        pass

    def childhash(self, parent: str, label: str) -> str:
        self._unsupported("childhash", parent)

    @abstractmethod
    async def resolve(self, domain: str) -> ResolutionResponse:
        pass

    @abstractmethod
    async def owner(self, domain: str) -> Optional[str]:
        pass

    async def resolver(self, domain: str) -> str:
        self._unsupported("resolver", domain)

    @abstractmethod
    async def address(self, domain: str, currency_ticker: str) -> str:
        pass

    @abstractmethod
    async def record(self, domain: str, key: str) -> str:
        pass

    async def all_records(self, domain: str) -> Dict[str, str]:
        self._unsupported("all_records", domain)

    async def reverse(self, address: str, currency_ticker: str) -> Optional[str]:
        self._unsupported("reverse", address)

    async def twitter(self, domain: str) -> str:
        self._unsupported("twitter", domain)

    async def ipfs_hash(self, domain: str) -> str:
        return await self.record(domain, standard_keys.IPFS_HTML)

    async def http_url(self, domain: str) -> str:
        return await self.record(domain, standard_keys.IPFS_REDIRECT_DOMAIN)

    async def email(self, domain: str) -> str:
        return await self.record(domain, standard_keys.WHOIS_EMAIL)

    async def chat_id(self, domain: str) -> str:
        return await self.record(domain, standard_keys.GUNDB_USERNAME)

    async def chat_pk(self, domain: str) -> str:
        return await self.record(domain, standard_keys.GUNDB_PUBLIC_KEY)

    def ensure_supported_domain(self, domain: str) -> None:
        if not self.is_supported_domain(domain):
            raise ResolutionError(ResolutionErrorCode.UnsupportedDomain, domain=domain)

    def ensure_supported_network(self) -> None:
        if not self.is_supported_network():
            raise ResolutionError(
                ResolutionErrorCode.UnsupportedNetwork,
                network=self.network,
                method=self.name.value,
            )

    def _prepare(self, domain: str) -> str:
        """Run the support checks and return the namehash of the domain"""
        node = self.namehash(domain)
        self.ensure_supported_network()
        return node

    def _ensure_configured(
        self, domain: str, owner: Optional[str], resolver: Optional[str]
    ) -> str:
        if is_null_address(resolver):
            if is_null_address(owner):
                raise ResolutionError(
                    ResolutionErrorCode.UnregisteredDomain, domain=domain
                )
            raise ResolutionError(ResolutionErrorCode.UnspecifiedResolver, domain=domain)
        return resolver

    def _ensure_record_presence(
        self, domain: str, record_name: str, value: Optional[str]
    ) -> str:
        if not value:
            raise ResolutionError(
                ResolutionErrorCode.RecordNotFound,
                domain=domain,
                record_name=record_name,
            )
        return value

    def _unsupported(self, method_name: str, domain: str) -> None:
        raise ResolutionError(
            ResolutionErrorCode.UnsupportedMethod,
            domain=domain,
            method_name=method_name,
        )

    @contextmanager
    def _transport_guard(self) -> Iterator[None]:
        """Report transport failures of the enclosed calls as NamingServiceDown"""
        try:
            yield
        except ResolutionError:
            raise
        except TRANSPORT_ERRORS as error:
            raise ResolutionError(
                ResolutionErrorCode.NamingServiceDown, method=self.name.value
            ) from error
        except Exception as error:
            if TRANSPORT_ERROR_PATTERN.search(str(error)):
                raise ResolutionError(
                    ResolutionErrorCode.NamingServiceDown, method=self.name.value
                ) from error
            raise

    async def _call_method(
        self, contract: Contract, method: str, args: Sequence[Any] = ()
    ) -> Any:
        self._debug_log(f"Calling {method} on {contract.address}", list(args))
        with self._transport_guard():
            return await contract.fetch_method(method, args)
