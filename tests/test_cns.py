from contextlib import ExitStack, contextmanager
from unittest.mock import AsyncMock, patch

import pytest
from web3.exceptions import ContractLogicError

from resolution import Resolution, ResolutionError, ResolutionErrorCode
from resolution.contracts.base_contract_config import Contract

from conftest import NULL_ADDRESS, OWNER, RESOLVER

BCH_ADDRESS = "qzx048ez005q4yhphqu2pylpfc3hy88zzu4lu6q9j8"
IPFS_HASH = "QmVJ26hBrwwNAPVmLavEFXDUunNDXeFSeMPmHuPxKe6dJv"


@pytest.fixture
def resolution():
    return Resolution(
        blockchain={
            "cns": {
                "url": "https://mainnet.infura.io",
                "registry": "0xD1E5b0FF1287aA9f9A268759062E4Ab08b9Dacbe",
            }
        }
    )


@contextmanager
def mocked_reader(cns, owner=OWNER, resolver=RESOLVER, **methods):
    """Replace the contract reads of a CNS service with canned values"""
    with ExitStack() as stack:
        mocks = {
            "_get_resolution_info": stack.enter_context(
                patch.object(
                    cns, "_get_resolution_info", AsyncMock(return_value=(owner, resolver))
                )
            )
        }
        for name, value in methods.items():
            mocks[name] = stack.enter_context(
                patch.object(cns, name, AsyncMock(return_value=value))
            )
        yield mocks


def test_default_source(resolution):
    assert resolution.cns.network == "mainnet"
    assert resolution.cns.url == "https://mainnet.infura.io"


@pytest.mark.asyncio
async def test_bch_address(resolution):
    with mocked_reader(resolution.cns, _get_record=BCH_ADDRESS) as mocks:
        address = await resolution.addr("brad.crypto", "BCH")

    assert address == BCH_ADDRESS
    resolver, key, node = mocks["_get_record"].await_args.args
    assert resolver == RESOLVER
    assert key == "crypto.BCH.address"
    assert node == resolution.namehash("brad.crypto")


@pytest.mark.asyncio
async def test_record_by_key(resolution):
    with mocked_reader(resolution.cns, _get_record=IPFS_HASH):
        assert await resolution.record("brad.crypto", "ipfs.html.value") == IPFS_HASH


@pytest.mark.asyncio
async def test_metadata_shortcuts(resolution):
    with mocked_reader(resolution.cns, _get_record="paul@unstoppabledomains.com") as mocks:
        assert await resolution.email("brad.crypto") == "paul@unstoppabledomains.com"
    assert mocks["_get_record"].await_args.args[1] == "whois.email.value"

    with mocked_reader(resolution.cns, _get_record="pqeBHabDQdCHhbdivgNEc74QO") as mocks:
        assert await resolution.chat_pk("brad.crypto") == "pqeBHabDQdCHhbdivgNEc74QO"
    assert mocks["_get_record"].await_args.args[1] == "gundb.public_key.value"


@pytest.mark.asyncio
async def test_empty_record_is_not_found(resolution):
    with mocked_reader(resolution.cns, _get_record=""):
        with pytest.raises(ResolutionError) as error:
            await resolution.record("brad.crypto", "No.such.record")
    assert error.value.code == ResolutionErrorCode.RecordNotFound


@pytest.mark.asyncio
async def test_resolver_address(resolution):
    with mocked_reader(resolution.cns):
        assert await resolution.resolver("brad.crypto") == RESOLVER


@pytest.mark.asyncio
async def test_unregistered_domain(resolution):
    with mocked_reader(resolution.cns, owner=None, resolver=None):
        with pytest.raises(ResolutionError) as error:
            await resolution.resolver("unknown-unknown-938388383.crypto")
    assert error.value.code == ResolutionErrorCode.UnregisteredDomain


@pytest.mark.asyncio
async def test_owner_without_resolver(resolution):
    with mocked_reader(resolution.cns, resolver=None):
        with pytest.raises(ResolutionError) as error:
            await resolution.chat_id("brad.crypto")
    assert error.value.code == ResolutionErrorCode.UnspecifiedResolver


@pytest.mark.asyncio
async def test_resolve_collects_standard_records(resolution):
    async def get_many(resolver, keys, node):
        values = {"crypto.ETH.address": OWNER, "ipfs.html.value": IPFS_HASH}
        return [values.get(key, "") for key in keys]

    with mocked_reader(resolution.cns, _get_records=None) as mocks:
        mocks["_get_records"].side_effect = get_many
        result = await resolution.resolve("brad.crypto")

    assert result.addresses == {"ETH": OWNER}
    assert result.records == {"crypto.ETH.address": OWNER, "ipfs.html.value": IPFS_HASH}
    assert result.meta.type == "cns"
    assert result.meta.resolver == RESOLVER
    assert result.meta.ttl == 0


@pytest.mark.asyncio
async def test_resolve_unregistered_domain_never_throws(resolution):
    with mocked_reader(resolution.cns, owner=NULL_ADDRESS, resolver=NULL_ADDRESS):
        result = await resolution.resolve("unregistered.crypto")
    assert result.meta.owner is None
    assert result.addresses == {}


@pytest.mark.asyncio
async def test_reverted_owner_lookup_means_unregistered(resolution):
    with patch.object(
        Contract, "fetch_method", AsyncMock(side_effect=ContractLogicError("execution reverted"))
    ):
        assert await resolution.owner("unregistered.crypto") is None
        with pytest.raises(ResolutionError) as error:
            await resolution.record("unregistered.crypto", "crypto.ETH.address")
    assert error.value.code == ResolutionErrorCode.UnregisteredDomain


@pytest.mark.asyncio
async def test_twitter_handle_is_verified(resolution):
    cns = resolution.cns
    with mocked_reader(cns, _get_records=["0xsignature", "derainberk"]), patch(
        "resolution.services.cns.cns_service.is_valid_twitter_signature",
        return_value=True,
    ) as validator:
        assert await resolution.twitter("brad.crypto") == "derainberk"

    kwargs = validator.call_args.kwargs
    assert kwargs["owner"] == OWNER
    assert kwargs["token_id"] == resolution.namehash("brad.crypto")


@pytest.mark.asyncio
async def test_twitter_with_bad_signature(resolution):
    with mocked_reader(resolution.cns, _get_records=["0xsignature", "derainberk"]), patch(
        "resolution.services.cns.cns_service.is_valid_twitter_signature",
        return_value=False,
    ):
        with pytest.raises(ResolutionError) as error:
            await resolution.twitter("brad.crypto")
    assert error.value.code == ResolutionErrorCode.InvalidTwitterVerification


@pytest.mark.asyncio
async def test_twitter_without_validation_record(resolution):
    with mocked_reader(resolution.cns, _get_records=["", "derainberk"]):
        with pytest.raises(ResolutionError) as error:
            await resolution.twitter("brad.crypto")
    assert error.value.code == ResolutionErrorCode.RecordNotFound
