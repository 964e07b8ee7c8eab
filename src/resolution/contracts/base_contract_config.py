import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from web3 import AsyncWeb3

ABI_DIR = Path(__file__).parent / "contract_abis"


def load_abi(name: str) -> List[Dict[str, Any]]:
    """Load an ABI shipped in contract_abis/"""
    with open(ABI_DIR / f"{name}.json") as f:
        return json.load(f)


@dataclass
class ContractConfig:
    """Configuration for a smart contract"""

    address: Optional[str]
    abi: List[Dict[str, Any]]


class Contract:
    """Read-only handle on a deployed contract"""

    def __init__(self, web3: AsyncWeb3, address: str, abi: List[Dict[str, Any]]):
        self.address = AsyncWeb3.to_checksum_address(address)
        self._contract = web3.eth.contract(address=self.address, abi=abi)

    async def fetch_method(self, method: str, args: Sequence[Any] = ()) -> Any:
        """
        Call a view method and return its decoded result.

        Args:
            method: Function name, or full signature such as
                "addr(bytes32,uint256)" for overloaded functions
            args: Positional call arguments

        Returns:
            Any: Decoded return value
        """
        if "(" in method:
            function = self._contract.get_function_by_signature(method)
        else:
            function = self._contract.functions[method]
        return await function(*args).call()


class ContractRegistry:
    """Registry of the contracts a naming service reads from"""

    def __init__(self, configs: Optional[Dict[str, ContractConfig]] = None):
        self._configs: Dict[str, ContractConfig] = configs or {}
        self._instances: Dict[str, Contract] = {}
        self._web3: Optional[AsyncWeb3] = None

    def initialize(self, web3: AsyncWeb3) -> None:
        """Initialize the registry with Web3 instance"""
        self._web3 = web3

    def get_contract(self, name: str, address: Optional[str] = None) -> Contract:
        """
        Get a contract instance.

        The configured contract is created once and reused. Passing an
        address builds a fresh instance for that address on every call.
        """
        if name not in self._configs:
            raise KeyError(f"Contract configuration not found: {name}")
        if not self._web3:
            raise RuntimeError("Registry not initialized with Web3 instance")

        config = self._configs[name]
        address = address or config.address
        if not address:
            raise ValueError(f"No address configured for contract: {name}")
        if address != config.address:
            # Per-domain addresses such as resolvers are not kept around
            return Contract(self._web3, address, config.abi)
        if name not in self._instances:
            self._instances[name] = Contract(self._web3, address, config.abi)
        return self._instances[name]
