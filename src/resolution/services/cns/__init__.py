from resolution.services.cns.cns_service import CNSService

__all__ = ["CNSService"]
