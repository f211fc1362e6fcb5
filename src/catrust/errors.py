"""Error taxonomy."""


class CaTrustError(Exception):
    """Base class for all catrust errors."""


class ConfigurationError(CaTrustError, ValueError):
    """Structurally invalid input, raised before any spec is produced."""


class ApplyTimeError(CaTrustError):
    """A referenced secret, key, or container is missing when the spec is applied."""
