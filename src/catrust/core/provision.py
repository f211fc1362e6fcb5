"""Provisioning flow — validate, look up keys, resolve, apply."""

from dataclasses import dataclass, field

from catrust.errors import ApplyTimeError
from catrust.pacts.types import CaCertsConfig, ResolvedSpec, SingleKeyMode
from catrust.core.apply import apply_to_manifests
from catrust.core.resolve import resolve
from catrust.core.secrets import SecretStore


@dataclass
class ProvisionResult:
    """Output of a provisioning run."""
    spec: ResolvedSpec
    manifests: dict
    warnings: list = field(default_factory=list)


def provision(config: CaCertsConfig, manifests: dict[str, list[dict]], store: SecretStore,
              workloads: list[str] | None = None,
              container: str | None = None) -> ProvisionResult:
    """Resolve a CA config against a secret store and patch the DaemonSets.

    Errors propagate unchanged and the caller's manifests are never modified,
    so whatever was applied before stays in effect.
    """
    if not config.enabled:
        return ProvisionResult(spec=ResolvedSpec(), manifests=dict(manifests))
    config.validate()

    mode = config.mode
    if isinstance(mode, SingleKeyMode):
        # Fail now rather than when the kubelet mounts a missing key
        if mode.secret_key not in store.lookup_keys(config.secret_name):
            raise ApplyTimeError(
                f"key '{mode.secret_key}' not found in Secret '{config.secret_name}'")
        spec = resolve(config)
    else:
        spec = resolve(config, store.lookup_keys(config.secret_name))

    warnings: list[str] = []
    if not spec.mounts:
        warnings.append(f"Secret '{config.secret_name}' has no keys — nothing to mount")
    patched, apply_warnings = apply_to_manifests(
        manifests, spec, config.secret_name, workloads=workloads, container=container)
    warnings.extend(apply_warnings)
    return ProvisionResult(spec=spec, manifests=patched, warnings=warnings)
