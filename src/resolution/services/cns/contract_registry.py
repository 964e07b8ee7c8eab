from typing import Optional
from resolution.contracts.base_contract_config import (
    ContractConfig,
    ContractRegistry,
    load_abi,
)

CNSRegistry = load_abi("cns_registry")
CNSResolver = load_abi("cns_resolver")


class CNSContractRegistry(ContractRegistry):
    def __init__(self, registry_address: Optional[str]):
        super().__init__(
            {
                "registry": ContractConfig(address=registry_address, abi=CNSRegistry),
                "resolver": ContractConfig(address=None, abi=CNSResolver),
            }
        )
