from resolution.services.base_service import NamingService
from resolution.services.service_registry import ServiceRegistry
from resolution.services.ens import ENSService
from resolution.services.zns import ZNSService
from resolution.services.cns import CNSService
from resolution.services.udapi import UdapiService

__all__ = [
    "NamingService",
    "ServiceRegistry",
    "ENSService",
    "ZNSService",
    "CNSService",
    "UdapiService",
]
