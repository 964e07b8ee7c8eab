from resolution.services.zns.zns_service import ZNSService

__all__ = ["ZNSService"]
