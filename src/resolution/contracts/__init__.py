from resolution.contracts.base_contract_config import (
    Contract,
    ContractConfig,
    ContractRegistry,
    load_abi,
)
from resolution.contracts.zilliqa_provider import ZilliqaProvider

__all__ = [
    "Contract",
    "ContractConfig",
    "ContractRegistry",
    "ZilliqaProvider",
    "load_abi",
]
