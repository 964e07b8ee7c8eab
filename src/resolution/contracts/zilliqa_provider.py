from typing import Any, Dict, List, Optional
import aiohttp

from resolution.utils.coins import from_bech32_address


class ZilliqaProvider:
    """Reads smart contract state through the Zilliqa JSON-RPC API"""

    def __init__(self, url: str):
        self.url = url

    async def fetch_sub_state(
        self, contract_address: str, field: str, keys: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Read part of a contract's state with GetSmartContractSubState.

        Args:
            contract_address: Contract address, hex (0x optional) or bech32
            field: Name of the contract field to read
            keys: Map keys to narrow the read to, all entries if empty

        Returns:
            Dict[str, Any]: The "result" member of the response, empty if the
                contract holds nothing under the requested keys
        """
        if contract_address.startswith("zil1"):
            contract_address = from_bech32_address(contract_address)
        body = {
            "id": "1",
            "jsonrpc": "2.0",
            "method": "GetSmartContractSubState",
            "params": [
                contract_address.replace("0x", "").lower(),
                field,
                keys or [],
            ],
        }

        async with aiohttp.ClientSession() as session:
            async with session.post(self.url, json=body) as response:
                response.raise_for_status()
                payload = await response.json(content_type=None)

        if not isinstance(payload, dict) or "jsonrpc" not in payload:
            raise ValueError(f"Invalid JSON RPC response: {payload}")
        if payload.get("error"):
            raise ValueError(f"Invalid JSON RPC response: {payload['error']}")
        return payload.get("result") or {}
