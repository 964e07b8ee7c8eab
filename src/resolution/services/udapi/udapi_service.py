from typing import Any, Dict, List, Optional
import aiohttp
from pydantic import ValidationError

from resolution import __version__
from resolution.config import ud_api_url
from resolution.exceptions import ResolutionError, ResolutionErrorCode
from resolution.services.base_service import NamingService
from resolution.services.cns import CNSService
from resolution.services.ens import ENSService
from resolution.services.zns import ZNSService
from resolution.types import NamingServiceName, ResolutionResponse, is_null_address
from resolution.utils import standard_keys
from resolution.utils.coins import to_bech32_address
from resolution.utils.twitter import is_valid_twitter_signature

# Where older API responses keep the standard records
LEGACY_SECTIONS = {
    standard_keys.IPFS_HTML: ("ipfs", "html"),
    standard_keys.IPFS_REDIRECT_DOMAIN: ("ipfs", "redirect_domain"),
    standard_keys.WHOIS_EMAIL: ("whois", "email"),
    standard_keys.GUNDB_USERNAME: ("gundb", "username"),
    standard_keys.GUNDB_PUBLIC_KEY: ("gundb", "public_key"),
}


class UdapiService(NamingService):
    """Resolves any supported domain through the centralized resolution API"""

    name = NamingServiceName.UDAPI

    def __init__(self, url: Optional[str] = None, debug: bool = False):
        super().__init__(debug)
        self.url = url or ud_api_url()
        self.network = "mainnet"
        self._headers = {
            "X-user-agent": f"aiohttp/{aiohttp.__version__} Resolution/{__version__}"
        }
        # Used for hashing and suffix checks only, they never go on the wire
        self._hashers: List[NamingService] = [
            ZNSService(),
            ENSService(),
            CNSService(),
        ]

    def is_supported_domain(self, domain: str) -> bool:
        return self._find_service(domain) is not None

    def is_supported_network(self) -> bool:
        return True

    def namehash(self, domain: str) -> str:
        return self._find_service_or_raise(domain).namehash(domain)

    def service_name(self, domain: str) -> NamingServiceName:
        return self._find_service_or_raise(domain).name

    async def owner(self, domain: str) -> Optional[str]:
        owner = (await self.resolve(domain)).meta.owner
        if is_null_address(owner):
            return None
        if self.service_name(domain) == NamingServiceName.ZNS and not owner.startswith("zil1"):
            return to_bech32_address(owner)
        return owner

    async def address(self, domain: str, currency_ticker: str) -> str:
        data = await self.resolve(domain)
        if is_null_address(data.meta.owner):
            raise ResolutionError(ResolutionErrorCode.UnregisteredDomain, domain=domain)
        address = data.addresses.get(currency_ticker.upper())
        return self._ensure_record_presence(domain, currency_ticker, address)

    async def record(self, domain: str, key: str) -> str:
        data = await self.resolve(domain)
        value = data.records.get(key)
        if not value and key in LEGACY_SECTIONS:
            section_name, field = LEGACY_SECTIONS[key]
            section = getattr(data, section_name) or {}
            value = section.get(field)
        return self._ensure_record_presence(domain, key, value)

    async def all_records(self, domain: str) -> Dict[str, str]:
        return (await self.resolve(domain)).records

    async def twitter(self, domain: str) -> str:
        if self.service_name(domain) != NamingServiceName.CNS:
            self._unsupported("twitter", domain)
        data = await self.resolve(domain)
        owner = data.meta.owner
        if is_null_address(owner):
            raise ResolutionError(ResolutionErrorCode.UnregisteredDomain, domain=domain)
        validation_signature = self._ensure_record_presence(
            domain,
            "twitter validation username",
            data.records.get(standard_keys.VALIDATION_TWITTER_USERNAME),
        )
        twitter_handle = self._ensure_record_presence(
            domain, "twitter handle", data.records.get(standard_keys.TWITTER_USERNAME)
        )
        if not is_valid_twitter_signature(
            token_id=data.meta.namehash or self.namehash(domain),
            owner=owner,
            twitter_handle=twitter_handle,
            validation_signature=validation_signature,
        ):
            raise ResolutionError(
                ResolutionErrorCode.InvalidTwitterVerification, domain=domain
            )
        return twitter_handle

    async def resolve(self, domain: str) -> ResolutionResponse:
        """
        Fetch the full resolution of a domain from the API.

        Raises:
            ResolutionError: UnsupportedDomain before any request,
                NamingServiceDown if the API cannot be reached or answers
                with a malformed body
        """
        self._find_service_or_raise(domain)
        with self._transport_guard():
            payload = await self._fetch(domain)
        try:
            return ResolutionResponse.model_validate(payload)
        except ValidationError as error:
            raise ResolutionError(
                ResolutionErrorCode.NamingServiceDown, method=self.name.value
            ) from error

    async def _fetch(self, domain: str) -> Dict[str, Any]:
        url = f"{self.url}/{domain}"
        self._debug_log("GET", url)
        async with aiohttp.ClientSession() as session:
            async with session.get(url, headers=self._headers) as response:
                response.raise_for_status()
                return await response.json()

    def _find_service(self, domain: str) -> Optional[NamingService]:
        for service in self._hashers:
            if service.is_supported_domain(domain):
                return service
        return None

    def _find_service_or_raise(self, domain: str) -> NamingService:
        service = self._find_service(domain)
        if not service:
            raise ResolutionError(ResolutionErrorCode.UnsupportedDomain, domain=domain)
        return service
