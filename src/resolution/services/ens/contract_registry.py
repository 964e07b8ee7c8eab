from typing import Optional
from resolution.contracts.base_contract_config import (
    ContractConfig,
    ContractRegistry,
    load_abi,
)

ENSRegistry = load_abi("ens_registry")
ENSResolver = load_abi("ens_resolver")


class ENSContractRegistry(ContractRegistry):
    def __init__(self, registry_address: Optional[str]):
        super().__init__(
            {
                "registry": ContractConfig(address=registry_address, abi=ENSRegistry),
                # Resolver address is read from the registry per domain
                "resolver": ContractConfig(address=None, abi=ENSResolver),
            }
        )
