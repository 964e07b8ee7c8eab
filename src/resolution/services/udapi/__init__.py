from resolution.services.udapi.udapi_service import UdapiService

__all__ = ["UdapiService"]
