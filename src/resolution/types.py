from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field, field_validator

NULL_ADDRESS = "0x0000000000000000000000000000000000000000"
NULL_ADDRESS_EXTENDED = "0x" + "0" * 64


class NamingServiceName(str, Enum):
    """Backends a domain can be resolved with"""

    ENS = "ENS"
    CNS = "CNS"
    ZNS = "ZNS"
    UDAPI = "UDAPI"


@dataclass
class SourceDefinition:
    """Connection settings of a single naming service"""

    url: Optional[str] = None
    network: Optional[Union[str, int]] = None
    registry: Optional[str] = None
    enabled: bool = True


class ResolutionMeta(BaseModel):
    owner: Optional[str] = None
    resolver: Optional[str] = None
    type: str = ""
    ttl: int = 0
    namehash: Optional[str] = None

    @field_validator("ttl", mode="before")
    @classmethod
    def _ttl_or_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class ResolutionResponse(BaseModel):
    """Uniform result of resolving a domain, whichever backend answered"""

    addresses: Dict[str, str] = Field(default_factory=dict)
    records: Dict[str, str] = Field(default_factory=dict)
    meta: ResolutionMeta = Field(default_factory=ResolutionMeta)
    ipfs: Optional[Dict[str, Any]] = None
    whois: Optional[Dict[str, Any]] = None
    gundb: Optional[Dict[str, Any]] = None

    @field_validator("addresses", "records", mode="before")
    @classmethod
    def _drop_empty_values(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: item for key, item in value.items() if item}
        return value or {}

    @classmethod
    def unclaimed(
        cls, service_type: str, namehash: Optional[str] = None
    ) -> "ResolutionResponse":
        """Response for a domain nobody owns"""
        return cls(meta=ResolutionMeta(type=service_type, namehash=namehash))


def is_null_address(address: Optional[str]) -> bool:
    """True for missing, empty and all-zero addresses"""
    if not address:
        return True
    value = address.lower()
    if value.startswith("0x"):
        value = value[2:]
    return value == "" or set(value) == {"0"}
