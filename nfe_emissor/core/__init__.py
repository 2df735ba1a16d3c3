from .config import Settings, get_settings
from .exceptions import (
    NFeError,
    ConfigurationError,
    CredentialError,
    IntegrityError,
    InputError,
    IssuerValidationError,
    CertificateTimeoutError
)

__all__ = [
    "Settings",
    "get_settings",
    "NFeError",
    "ConfigurationError",
    "CredentialError",
    "IntegrityError",
    "InputError",
    "IssuerValidationError",
    "CertificateTimeoutError"
]
