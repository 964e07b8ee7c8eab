from enum import Enum
from typing import Any, Dict, Optional


class ResolutionErrorCode(str, Enum):
    """Reasons a resolution call can fail"""

    UnsupportedDomain = "UnsupportedDomain"
    UnsupportedNetwork = "UnsupportedNetwork"
    UnregisteredDomain = "UnregisteredDomain"
    UnspecifiedResolver = "UnspecifiedResolver"
    UnspecifiedCurrency = "UnspecifiedCurrency"
    UnsupportedCurrency = "UnsupportedCurrency"
    RecordNotFound = "RecordNotFound"
    UnsupportedMethod = "UnsupportedMethod"
    NamingServiceDown = "NamingServiceDown"
    InvalidTwitterVerification = "InvalidTwitterVerification"


MESSAGE_TEMPLATES: Dict[ResolutionErrorCode, str] = {
    ResolutionErrorCode.UnsupportedDomain: "Domain {domain} is not supported",
    ResolutionErrorCode.UnsupportedNetwork: "Network {network} is not supported by {method}",
    ResolutionErrorCode.UnregisteredDomain: "Domain {domain} is not registered",
    ResolutionErrorCode.UnspecifiedResolver: "Domain {domain} is not configured",
    ResolutionErrorCode.UnspecifiedCurrency: "Domain {domain} has no {currency_ticker} attached to it",
    ResolutionErrorCode.UnsupportedCurrency: "{currency_ticker} is not supported",
    ResolutionErrorCode.RecordNotFound: "No {record_name} record found for {domain}",
    ResolutionErrorCode.UnsupportedMethod: "Method {method_name} is not supported for {domain}",
    ResolutionErrorCode.NamingServiceDown: "{method} naming service is down at the moment",
    ResolutionErrorCode.InvalidTwitterVerification: "Domain {domain} has invalid Twitter signature verification",
}


class ResolutionError(Exception):
    """Raised when a domain cannot be resolved.

    Carries a ``ResolutionErrorCode`` plus the details used to render the
    message (domain, method, currency_ticker, record_name, ...).
    """

    def __init__(self, code: ResolutionErrorCode, **details: Any):
        self.code = code
        self.details = details
        self.domain: Optional[str] = details.get("domain")
        super().__init__(self._render_message())

    def _render_message(self) -> str:
        template = MESSAGE_TEMPLATES[self.code]
        values = {
            "domain": None,
            "method": None,
            "method_name": None,
            "network": None,
            "currency_ticker": None,
            "record_name": None,
        }
        values.update(self.details)
        return template.format(**values)


class ConfigurationError(Exception):
    """Raised when a naming service source is configured inconsistently."""

    pass
