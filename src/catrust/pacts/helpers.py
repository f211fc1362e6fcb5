"""Public helper functions for reading K8s Secret manifests."""

import base64
import binascii


def secret_keys(secret: dict) -> set[str]:
    """Return every key of a K8s Secret (data and stringData)."""
    return set(secret.get("data") or {}) | set(secret.get("stringData") or {})


def secret_bytes(secret: dict, key: str) -> bytes | None:
    """Get the raw content of a K8s Secret key (base64 data or plain stringData)."""
    # stringData wins over data, as it does on the API server
    val = (secret.get("stringData") or {}).get(key)
    if val is not None:
        return str(val).encode("utf-8")
    val = (secret.get("data") or {}).get(key)
    if val is not None:
        try:
            return base64.b64decode(val, validate=True)
        except (binascii.Error, ValueError):
            return None
    return None
