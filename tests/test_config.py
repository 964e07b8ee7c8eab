import pytest

from resolution import ConfigurationError, Resolution, SourceDefinition
from resolution.config import CNS_DEFAULTS, ENS_DEFAULTS, ZNS_DEFAULTS, normalize_source


def test_true_uses_mainnet_defaults():
    source = normalize_source(True, ENS_DEFAULTS)
    assert source.network == "mainnet"
    assert source.url == "https://mainnet.infura.io"
    assert source.registry == ENS_DEFAULTS.registries["mainnet"]


def test_false_disables_the_service():
    assert normalize_source(False, ENS_DEFAULTS).enabled is False


def test_url_string_infers_network():
    source = normalize_source("https://api.zilliqa.com", ZNS_DEFAULTS)
    assert source.network == "mainnet"
    assert source.registry == "zil1jcgu2wlx6xejqk9jw3aaankw6lsjzeunx2j0jz"


def test_network_name_gives_default_url():
    source = normalize_source({"network": "ropsten"}, ENS_DEFAULTS)
    assert source.url == "https://ropsten.infura.io"


def test_numeric_network_is_mapped_to_name():
    source = normalize_source({"network": 5}, ENS_DEFAULTS)
    assert source.network == "goerli"
    assert source.url == "https://goerli.infura.io"


def test_registry_implies_mainnet():
    registry = "0xD1E5b0FF1287aA9f9A268759062E4Ab08b9Dacbe"
    source = normalize_source({"registry": registry}, CNS_DEFAULTS)
    assert source.network == "mainnet"
    assert source.url == "https://mainnet.infura.io"
    assert source.registry == registry


def test_unknown_network_without_url_is_rejected():
    with pytest.raises(ConfigurationError):
        normalize_source({"network": "nonexistent"}, ENS_DEFAULTS)


def test_network_without_registry_is_unsupported():
    source = normalize_source({"network": "kovan"}, ENS_DEFAULTS)
    assert source.registry is None


def test_source_definition_is_accepted():
    source = normalize_source(
        SourceDefinition(url="https://rinkeby.infura.io"), ENS_DEFAULTS
    )
    assert source.network == "rinkeby"


def test_env_overrides_mainnet_url(monkeypatch):
    monkeypatch.setenv("ENS_RPC_URL", "https://eth.example.org/rpc")
    assert normalize_source(True, ENS_DEFAULTS).url == "https://eth.example.org/rpc"


def test_resolution_wires_sources():
    resolution = Resolution(blockchain={"ens": {"network": "mainnet"}, "zns": False})
    assert resolution.ens.url == "https://mainnet.infura.io"
    assert resolution.ens.network == "mainnet"
    assert resolution.zns.enabled is False
    assert resolution.is_supported_domain("hello.zil") is False
    assert resolution.is_supported_domain("hello.crypto") is True
