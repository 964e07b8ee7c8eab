from resolution.services.ens.ens_service import ENSService

__all__ = ["ENSService"]
