from typing import Dict, List, Optional
from resolution.exceptions import ResolutionError, ResolutionErrorCode
from resolution.services.base_service import NamingService
from resolution.types import NamingServiceName


class ServiceRegistry:
    """Ordered naming services and suffix based routing between them"""

    def __init__(self, services: Optional[List[NamingService]] = None):
        self._services: List[NamingService] = []
        for service in services or []:
            self.register(service)

    def register(self, service: NamingService) -> None:
        """Append a service, lookups try services in registration order"""
        if any(existing.name == service.name for existing in self._services):
            raise ValueError(f"Naming service '{service.name.value}' already registered")
        self._services.append(service)

    def find(self, domain: str) -> Optional[NamingService]:
        """First enabled service whose suffix check accepts the domain"""
        for service in self._services:
            if service.enabled and service.is_supported_domain(domain):
                return service
        return None

    def find_or_raise(self, domain: str) -> NamingService:
        service = self.find(domain)
        if not service:
            raise ResolutionError(ResolutionErrorCode.UnsupportedDomain, domain=domain)
        return service

    def list_services(self) -> Dict[NamingServiceName, NamingService]:
        """Return all registered services"""
        return {service.name: service for service in self._services}
