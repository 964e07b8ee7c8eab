import json
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from resolution import Resolution, ResolutionError, ResolutionErrorCode
from resolution.utils.coins import from_bech32_address

from conftest import FakeResponse, fake_http

ZIL_OWNER = "0x267ca17e8b3bbf49c52a4c3b473cdebcbaf9025e"
ZIL_RESOLVER = "0x02621c64a57e1424adfe89bdb1ea3b4a4e3b3e6c"
ETH_ADDRESS = "0xaa91734f90795e80751c96e682a321bb3c1a4186"
NULL_ADDRESS = "0x0000000000000000000000000000000000000000"


@pytest.fixture
def resolution():
    return Resolution(blockchain={"zns": "https://api.zilliqa.com"})


def sub_state(owner=ZIL_OWNER, resolver=ZIL_RESOLVER, records=None):
    """Fake GetSmartContractSubState answering registry and resolver reads"""
    records = records or {}

    async def fetch(contract_address, field, keys=None):
        if keys:
            if owner is None:
                return {}
            return {
                "records": {
                    keys[0]: {"constructor": "Record", "arguments": [owner, resolver]}
                }
            }
        return {"records": records}

    return AsyncMock(side_effect=fetch)


@pytest.mark.asyncio
async def test_resolve_zil_domain(resolution):
    records = {"crypto.ETH.address": ETH_ADDRESS, "crypto.BTC.address": "", "ttl": "0"}
    fetch = sub_state(records=records)
    with patch.object(resolution.zns._provider, "fetch_sub_state", fetch):
        result = await resolution.resolve("cofounding.zil")

    assert result.addresses == {"ETH": ETH_ADDRESS}
    assert result.meta.owner == ZIL_OWNER
    assert result.meta.type == "zns"
    assert result.meta.ttl == 0

    assert fetch.await_args_list[0].args == (
        resolution.zns.registry_address,
        "records",
        [resolution.namehash("cofounding.zil")],
    )
    assert fetch.await_args_list[1].args == (ZIL_RESOLVER, "records")


@pytest.mark.asyncio
async def test_resolve_unclaimed_domain(resolution):
    with patch.object(resolution.zns._provider, "fetch_sub_state", sub_state(owner=None)):
        result = await resolution.resolve("test.zil")
    assert result.addresses == {}
    assert result.meta.owner is None


@pytest.mark.asyncio
async def test_address(resolution):
    fetch = sub_state(records={"crypto.ETH.address": ETH_ADDRESS})
    with patch.object(resolution.zns._provider, "fetch_sub_state", fetch):
        assert await resolution.address("cofounding.zil", "eth") == ETH_ADDRESS
        with pytest.raises(ResolutionError) as error:
            await resolution.address("cofounding.zil", "BTC")
    assert error.value.code == ResolutionErrorCode.RecordNotFound


@pytest.mark.asyncio
async def test_owner_is_bech32(resolution):
    with patch.object(resolution.zns._provider, "fetch_sub_state", sub_state()):
        owner = await resolution.owner("cofounding.zil")
    assert owner.startswith("zil1")
    assert from_bech32_address(owner) == ZIL_OWNER


@pytest.mark.asyncio
async def test_owner_without_resolver(resolution):
    fetch = sub_state(resolver=NULL_ADDRESS)
    with patch.object(resolution.zns._provider, "fetch_sub_state", fetch):
        with pytest.raises(ResolutionError) as error:
            await resolution.record("cofounding.zil", "ipfs.html.value")
    assert error.value.code == ResolutionErrorCode.UnspecifiedResolver


@pytest.mark.asyncio
async def test_all_records(resolution):
    records = {"crypto.ETH.address": ETH_ADDRESS, "ipfs.html.value": "QmHash"}
    with patch.object(resolution.zns._provider, "fetch_sub_state", sub_state(records=records)):
        assert await resolution.all_records("cofounding.zil") == records
        assert await resolution.ipfs_hash("cofounding.zil") == "QmHash"


@pytest.mark.asyncio
async def test_provider_failure_is_service_down(resolution):
    fetch = AsyncMock(side_effect=aiohttp.ClientConnectionError("connection refused"))
    with patch.object(resolution.zns._provider, "fetch_sub_state", fetch):
        with pytest.raises(ResolutionError) as error:
            await resolution.resolve("cofounding.zil")
    assert error.value.code == ResolutionErrorCode.NamingServiceDown


@pytest.mark.asyncio
async def test_twitter_is_unsupported(resolution):
    with pytest.raises(ResolutionError) as error:
        await resolution.twitter("cofounding.zil")
    assert error.value.code == ResolutionErrorCode.UnsupportedMethod


@pytest.mark.asyncio
async def test_testnet_has_no_registry():
    resolution = Resolution(blockchain={"zns": {"network": 333}})
    with pytest.raises(ResolutionError) as error:
        await resolution.resolve("cofounding.zil")
    assert error.value.code == ResolutionErrorCode.UnsupportedNetwork


def rpc_result(result):
    return FakeResponse({"id": "1", "jsonrpc": "2.0", "result": result})


@pytest.mark.asyncio
async def test_sub_state_request_uses_hex_registry_address(resolution):
    node = resolution.namehash("cofounding.zil")
    registry_state = {
        "records": {node: {"constructor": "Record", "arguments": [ZIL_OWNER, ZIL_RESOLVER]}}
    }
    resolver_state = {"records": {"crypto.ETH.address": ETH_ADDRESS}}
    with fake_http(rpc_result(registry_state), rpc_result(resolver_state)) as session:
        assert await resolution.address("cofounding.zil", "ETH") == ETH_ADDRESS

    registry_request, resolver_request = session.requests
    assert registry_request["method"] == "POST"
    assert registry_request["url"] == "https://api.zilliqa.com"
    body = registry_request["json"]
    assert body["method"] == "GetSmartContractSubState"
    assert body["params"] == [
        from_bech32_address(resolution.zns.registry_address)[2:],
        "records",
        [node],
    ]
    assert resolver_request["json"]["params"] == [ZIL_RESOLVER[2:], "records", []]


@pytest.mark.asyncio
async def test_null_result_is_unclaimed(resolution):
    with fake_http(rpc_result(None)):
        result = await resolution.resolve("cofounding.zil")
    assert result.meta.owner is None
    assert result.meta.type == "zns"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(
            {
                "id": "1",
                "jsonrpc": "2.0",
                "error": {"code": -32000, "message": "Too many requests, rate limited"},
            }
        ),
        FakeResponse({"message": "gateway timeout"}),
        FakeResponse(["not", "json-rpc"]),
        FakeResponse(None, status=502),
        FakeResponse(json.JSONDecodeError("Expecting value", "<html>", 0)),
    ],
)
async def test_node_failures_are_service_down(resolution, response):
    with fake_http(response):
        with pytest.raises(ResolutionError) as error:
            await resolution.resolve("cofounding.zil")
    assert error.value.code == ResolutionErrorCode.NamingServiceDown


@pytest.mark.asyncio
async def test_node_error_is_not_reported_as_unregistered(resolution):
    error_reply = FakeResponse(
        {"id": "1", "jsonrpc": "2.0", "error": {"code": -32600, "message": "Address not contract"}}
    )
    with fake_http(error_reply):
        with pytest.raises(ResolutionError) as error:
            await resolution.address("cofounding.zil", "ETH")
    assert error.value.code == ResolutionErrorCode.NamingServiceDown
