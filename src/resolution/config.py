"""Network defaults and source normalization for the naming services."""

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from resolution.exceptions import ConfigurationError
from resolution.types import SourceDefinition

SourceInput = Union[bool, str, Dict[str, Any], SourceDefinition, None]

DEFAULT_UD_API_URL = "https://unstoppabledomains.com/api/v1"


@dataclass(frozen=True)
class NetworkDefaults:
    """Read-only lookup tables for a naming service"""

    ids: Mapping[int, str]
    urls: Mapping[str, str]
    registries: Mapping[str, str]
    url_env: str

    def network_name(self, network: Union[str, int, None]) -> Optional[str]:
        if isinstance(network, int):
            return self.ids.get(network)
        return network

    def default_url(self, network: str) -> Optional[str]:
        if network == "mainnet" and os.getenv(self.url_env):
            return os.getenv(self.url_env)
        return self.urls.get(network)

    def network_from_url(self, url: str) -> Optional[str]:
        for network, network_url in self.urls.items():
            if url == network_url:
                return network
        for network in self.urls:
            if network in url:
                return network
        return None


ENS_DEFAULTS = NetworkDefaults(
    ids=MappingProxyType(
        {
            1: "mainnet",
            3: "ropsten",
            4: "rinkeby",
            5: "goerli",
            42: "kovan",
            11155111: "sepolia",
        }
    ),
    urls=MappingProxyType(
        {
            "mainnet": "https://mainnet.infura.io",
            "ropsten": "https://ropsten.infura.io",
            "rinkeby": "https://rinkeby.infura.io",
            "goerli": "https://goerli.infura.io",
            "kovan": "https://kovan.infura.io",
            "sepolia": "https://sepolia.infura.io",
        }
    ),
    registries=MappingProxyType(
        {
            "mainnet": "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e",
            "ropsten": "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e",
            "goerli": "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e",
            "sepolia": "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e",
        }
    ),
    url_env="ENS_RPC_URL",
)

CNS_DEFAULTS = NetworkDefaults(
    ids=MappingProxyType({1: "mainnet"}),
    urls=MappingProxyType({"mainnet": "https://mainnet.infura.io"}),
    registries=MappingProxyType(
        {"mainnet": "0xD1E5b0FF1287aA9f9A268759062E4Ab08b9Dacbe"}
    ),
    url_env="CNS_RPC_URL",
)

ZNS_DEFAULTS = NetworkDefaults(
    ids=MappingProxyType({1: "mainnet", 333: "testnet"}),
    urls=MappingProxyType(
        {
            "mainnet": "https://api.zilliqa.com",
            "testnet": "https://dev-api.zilliqa.com",
        }
    ),
    registries=MappingProxyType(
        {"mainnet": "zil1jcgu2wlx6xejqk9jw3aaankw6lsjzeunx2j0jz"}
    ),
    url_env="ZNS_RPC_URL",
)


def ud_api_url() -> str:
    return os.getenv("UD_API_URL") or DEFAULT_UD_API_URL


def normalize_source(source: SourceInput, defaults: NetworkDefaults) -> SourceDefinition:
    """
    Turn a user supplied source into a complete SourceDefinition.

    Args:
        source: True/None for defaults, False to disable, a url string, a
            mapping with url/network/registry keys or a SourceDefinition
        defaults: Network tables of the naming service

    Returns:
        SourceDefinition: Source with network, url and registry filled in

    Raises:
        ConfigurationError: If network or url cannot be determined
    """
    if source is False:
        return SourceDefinition(enabled=False)

    if source is None or source is True:
        url = defaults.default_url("mainnet")
        definition = SourceDefinition(url=url, network="mainnet")
    elif isinstance(source, str):
        definition = SourceDefinition(
            url=source, network=defaults.network_from_url(source) or "mainnet"
        )
    else:
        if isinstance(source, SourceDefinition):
            definition = SourceDefinition(
                url=source.url,
                network=source.network,
                registry=source.registry,
                enabled=source.enabled,
            )
        else:
            definition = SourceDefinition(
                url=source.get("url"),
                network=source.get("network"),
                registry=source.get("registry"),
            )
        if isinstance(definition.network, int):
            definition.network = defaults.network_name(definition.network)
        if definition.registry:
            definition.network = definition.network or "mainnet"
            definition.url = definition.url or defaults.default_url(
                definition.network
            )
        if definition.network and not definition.url:
            definition.url = defaults.default_url(definition.network)
        if definition.url and not definition.network:
            definition.network = defaults.network_from_url(definition.url)

    if not definition.network:
        raise ConfigurationError("Unspecified network in naming service configuration")
    if not definition.url:
        raise ConfigurationError("Unspecified url in naming service configuration")

    definition.registry = definition.registry or defaults.registries.get(
        definition.network
    )
    return definition
