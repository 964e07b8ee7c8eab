__version__ = "1.0.0"

from resolution.exceptions import (
    ConfigurationError,
    ResolutionError,
    ResolutionErrorCode,
)
from resolution.resolution import Resolution
from resolution.types import (
    NamingServiceName,
    ResolutionMeta,
    ResolutionResponse,
    SourceDefinition,
)

__all__ = [
    "Resolution",
    "ResolutionError",
    "ResolutionErrorCode",
    "ConfigurationError",
    "NamingServiceName",
    "ResolutionMeta",
    "ResolutionResponse",
    "SourceDefinition",
]
