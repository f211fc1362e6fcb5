"""catrust — resolve and inject a custom CA bundle into an agent DaemonSet."""

from catrust.errors import ApplyTimeError, CaTrustError, ConfigurationError
from catrust.pacts.types import (
    CaCertsConfig, MountDirective, ResolvedSpec, SingleKeyMode, WholeSecretMode,
)
from catrust.core.resolve import resolve

__all__ = [
    "ApplyTimeError", "CaTrustError", "ConfigurationError",
    "CaCertsConfig", "MountDirective", "ResolvedSpec",
    "SingleKeyMode", "WholeSecretMode", "resolve",
]
