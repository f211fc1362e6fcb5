"""Trust provisioning resolver — CaCertsConfig → ResolvedSpec."""

from collections.abc import Iterable

from catrust.pacts.types import (
    CaCertsConfig, MountDirective, ResolvedSpec, SingleKeyMode, WholeSecretMode,
    check_file_name,
)
from catrust.core.constants import CA_BUNDLE_ENV_VARS


def join_mount_path(mount_path: str, name: str) -> str:
    """Join a mount directory and a file name, without doubling the slash."""
    base = mount_path.rstrip("/")
    return f"{base}/{name}"


def _resolve_single_key(config: CaCertsConfig, mode: SingleKeyMode) -> ResolvedSpec:
    destination = join_mount_path(config.mount_path, mode.file_name)
    return ResolvedSpec(
        mounts=(MountDirective(source_key=mode.secret_key, destination_path=destination),),
        env=tuple((name, destination) for name in CA_BUNDLE_ENV_VARS),
    )


def _resolve_whole_secret(config: CaCertsConfig, secret_keys: Iterable[str]) -> ResolvedSpec:
    # No single canonical file exists in this mode, so env vars stay unset
    keys = sorted(set(secret_keys))
    for key in keys:
        check_file_name(key, f"key of Secret '{config.secret_name}'")
    mounts = tuple(
        MountDirective(source_key=key, destination_path=join_mount_path(config.mount_path, key))
        for key in keys
    )
    return ResolvedSpec(mounts=mounts)


def resolve(config: CaCertsConfig, secret_keys: Iterable[str] | None = None) -> ResolvedSpec:
    """Compute the mounts and env vars for a CA config.

    secret_keys is the key listing of the referenced secret, as a collection of
    key names (never a bare string); it is only read in whole-secret mode.
    Raises ConfigurationError on invalid enabled configs or unusable key names.
    """
    if isinstance(secret_keys, str):
        raise TypeError("secret_keys must be a collection of key names, not a str")
    if not config.enabled:
        return ResolvedSpec()
    config.validate()
    mode = config.mode
    if isinstance(mode, SingleKeyMode):
        return _resolve_single_key(config, mode)
    if isinstance(mode, WholeSecretMode):
        return _resolve_whole_secret(config, secret_keys or ())
    raise TypeError(f"unknown provisioning mode: {mode!r}")
