"""Public data types — the contracts between values, resolver and apply."""

from dataclasses import dataclass

from catrust.errors import ConfigurationError


def check_file_name(name: str, what: str) -> None:
    """Raise ConfigurationError unless name is usable as a single path component."""
    if not name:
        raise ConfigurationError(f"{what} must not be empty")
    if "/" in name or name in (".", ".."):
        raise ConfigurationError(f"{what} must be a plain file name, got '{name}'")


@dataclass(frozen=True)
class SingleKeyMode:
    """Expose exactly one secret key as one named file."""
    secret_key: str
    file_name: str


@dataclass(frozen=True)
class WholeSecretMode:
    """Expose every key of the secret as a file named after the key."""


@dataclass(frozen=True)
class CaCertsConfig:
    """The caCerts block of a values document.

    secret_key=None (or "") selects whole-secret mode; file_name is then
    advisory only and never used to compute a destination.
    """
    enabled: bool = False
    secret_name: str = ""
    secret_key: str | None = None
    mount_path: str = ""
    file_name: str = ""

    @property
    def mode(self) -> SingleKeyMode | WholeSecretMode:
        """Return the provisioning mode as a tagged variant."""
        if self.secret_key:
            return SingleKeyMode(secret_key=self.secret_key, file_name=self.file_name)
        return WholeSecretMode()

    def validate(self) -> None:
        """Raise ConfigurationError if an enabled config is structurally invalid.

        A disabled config is always valid, whatever its other fields hold.
        """
        if not self.enabled:
            return
        if not self.secret_name:
            raise ConfigurationError("missing required secret reference")
        if not self.mount_path:
            raise ConfigurationError(
                "mount path required when certificate provisioning is enabled")
        if not self.mount_path.startswith("/"):
            raise ConfigurationError(
                f"mount path must be absolute, got '{self.mount_path}'")
        mode = self.mode
        if isinstance(mode, SingleKeyMode):
            if not mode.file_name:
                raise ConfigurationError(
                    f"file name required when mounting single key '{mode.secret_key}'")
            check_file_name(mode.file_name, "file name")


@dataclass(frozen=True)
class MountDirective:
    """Bind one secret key to one file path inside the container."""
    source_key: str
    destination_path: str


@dataclass(frozen=True)
class ResolvedSpec:
    """Mounts and env vars derived from a CaCertsConfig. Empty when disabled."""
    mounts: tuple[MountDirective, ...] = ()
    env: tuple[tuple[str, str], ...] = ()

    @property
    def env_vars(self) -> dict[str, str]:
        """Env vars as a fresh dict, in declaration order."""
        return dict(self.env)

    @property
    def is_empty(self) -> bool:
        return not self.mounts and not self.env

    def to_dict(self) -> dict:
        """Plain-dict form, for YAML output."""
        return {
            "mounts": [{"sourceKey": m.source_key, "destinationPath": m.destination_path}
                       for m in self.mounts],
            "envVars": self.env_vars,
        }
