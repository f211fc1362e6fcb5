"""Apply a ResolvedSpec to DaemonSet manifests — volumes, mounts, env."""

import copy

from catrust.errors import ApplyTimeError
from catrust.pacts.types import ResolvedSpec
from catrust.core.constants import CA_BUNDLE_ENV_VARS, TARGET_KINDS, VOLUME_NAME


def _full_name(manifest: dict) -> str:
    """Return 'Kind/name' string for use in messages."""
    meta = manifest.get("metadata") or {}
    return f"{manifest.get('kind', '?')}/{meta.get('name', '?')}"


def _pod_spec(manifest: dict) -> dict:
    """Return the pod template spec, creating empty levels as needed."""
    spec = manifest.setdefault("spec", {})
    template = spec.setdefault("template", {})
    return template.setdefault("spec", {})


def _find_container(pod_spec: dict, container: str | None, full: str) -> dict:
    containers = pod_spec.get("containers") or []
    if not containers:
        raise ApplyTimeError(f"{full} has no containers")
    if container is None:
        return containers[0]
    for c in containers:
        if c.get("name") == container:
            return c
    raise ApplyTimeError(f"container '{container}' not found in {full}")


def _secret_volume(spec: ResolvedSpec, secret_name: str) -> dict:
    return {
        "name": VOLUME_NAME,
        "secret": {
            "secretName": secret_name,
            "items": [{"key": m.source_key, "path": m.source_key} for m in spec.mounts],
        },
    }


def _set_volume(pod_spec: dict, volume: dict) -> None:
    volumes = [v for v in (pod_spec.get("volumes") or []) if v.get("name") != VOLUME_NAME]
    volumes.append(volume)
    pod_spec["volumes"] = volumes


def _set_volume_mounts(container: dict, spec: ResolvedSpec) -> None:
    mounts = [vm for vm in (container.get("volumeMounts") or [])
              if vm.get("name") != VOLUME_NAME]
    for m in spec.mounts:
        # subPath keeps the rest of the mount directory (system CAs) visible
        mounts.append({
            "name": VOLUME_NAME,
            "mountPath": m.destination_path,
            "subPath": m.source_key,
            "readOnly": True,
        })
    container["volumeMounts"] = mounts


def _set_env(container: dict, env_vars: dict[str, str]) -> None:
    """Set env vars on a container, replacing same-name entries in place.

    CA bundle vars not in env_vars are dropped, so switching to whole-secret
    mode never leaves them pointing at a file that is no longer mounted.
    """
    env = []
    remaining = dict(env_vars)
    for entry in container.get("env") or []:
        name = entry.get("name")
        if name in remaining:
            env.append({"name": name, "value": remaining.pop(name)})
        elif name not in CA_BUNDLE_ENV_VARS:
            env.append(entry)
    env.extend({"name": k, "value": v} for k, v in remaining.items())
    if env or "env" in container:
        container["env"] = env


def apply_to_workload(manifest: dict, spec: ResolvedSpec, secret_name: str,
                      container: str | None = None) -> dict:
    """Return a patched copy of a workload manifest. The input is never modified.

    An empty spec returns an unchanged copy: disabling never tears anything down.
    Re-applying the same spec yields the same manifest.
    """
    patched = copy.deepcopy(manifest)
    if spec.is_empty:
        return patched
    full = _full_name(manifest)
    pod_spec = _pod_spec(patched)
    target = _find_container(pod_spec, container, full)
    if spec.mounts:
        _set_volume(pod_spec, _secret_volume(spec, secret_name))
        _set_volume_mounts(target, spec)
    _set_env(target, spec.env_vars)
    return patched


def apply_to_manifests(manifests: dict[str, list[dict]], spec: ResolvedSpec, secret_name: str,
                       workloads: list[str] | None = None,
                       container: str | None = None) -> tuple[dict, list[str]]:
    """Patch every DaemonSet (or only those named in workloads). Returns (manifests, warnings)."""
    warnings: list[str] = []
    result = {kind: list(items) for kind, items in manifests.items()}
    if spec.is_empty:
        return result, warnings
    patched_names = set()
    for kind in TARGET_KINDS:
        items = []
        for m in manifests.get(kind, []):
            name = (m.get("metadata") or {}).get("name", "")
            if workloads and name not in workloads:
                items.append(m)
                continue
            items.append(apply_to_workload(m, spec, secret_name, container=container))
            patched_names.add(name)
        if kind in result:
            result[kind] = items
    for name in sorted(set(workloads or []) - patched_names):
        warnings.append(f"workload '{name}' not found among {', '.join(TARGET_KINDS)} manifests")
    if not patched_names:
        warnings.append(f"no {'/'.join(TARGET_KINDS)} manifest patched — CA bundle not injected")
    return result, warnings
