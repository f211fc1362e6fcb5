"""Secret collaborators — key listing and materialization of mount directives."""

import subprocess
import sys
from pathlib import Path

import yaml

from catrust.errors import ApplyTimeError
from catrust.pacts.helpers import secret_bytes, secret_keys
from catrust.pacts.types import MountDirective


class SecretStore:
    """Base class for secret collaborators.

    Subclasses implement get_secret(); key listing and materialization are
    derived from the returned Secret manifest.
    """

    def get_secret(self, secret_name: str) -> dict:
        raise NotImplementedError

    def lookup_keys(self, secret_name: str) -> set[str]:
        """Return the key listing of a secret. Raises ApplyTimeError if missing."""
        return secret_keys(self.get_secret(secret_name))

    def read(self, secret_name: str, key: str) -> bytes:
        """Return the raw bytes stored under one key."""
        secret = self.get_secret(secret_name)
        if key not in secret_keys(secret):
            raise ApplyTimeError(f"key '{key}' not found in Secret '{secret_name}'")
        content = secret_bytes(secret, key)
        if content is None:
            raise ApplyTimeError(f"Secret '{secret_name}' key '{key}' could not be decoded")
        return content

    def materialize(self, secret_name: str, directive: MountDirective, root: str) -> Path:
        """Write a directive's content under root, mirroring the container filesystem."""
        root_dir = Path(root).resolve()
        target = (root_dir / directive.destination_path.lstrip("/")).resolve()
        if not target.is_relative_to(root_dir):
            raise ApplyTimeError(
                f"refusing to write '{directive.destination_path}' outside '{root}'")
        content = self.read(secret_name, directive.source_key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return target


class ManifestSecretStore(SecretStore):
    """Secrets taken from rendered Secret manifests, indexed by name."""

    def __init__(self, secrets: dict[str, dict]):
        self.secrets = secrets

    def get_secret(self, secret_name: str) -> dict:
        secret = self.secrets.get(secret_name)
        if secret is None:
            raise ApplyTimeError(f"Secret '{secret_name}' not found")
        return secret


class KubectlSecretStore(SecretStore):
    """Secrets fetched from a live cluster with kubectl."""

    def __init__(self, namespace: str, kubectl: str = "kubectl"):
        self.namespace = namespace
        self.kubectl = kubectl
        self._cache: dict[str, dict] = {}

    def get_secret(self, secret_name: str) -> dict:
        if secret_name in self._cache:
            return self._cache[secret_name]
        cmd = [self.kubectl, "get", "secret", secret_name,
               "--namespace", self.namespace, "--output", "yaml"]
        print(f"Running: {' '.join(cmd)}", file=sys.stderr)
        try:
            proc = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise ApplyTimeError(f"'{self.kubectl}' not found on PATH") from exc
        except subprocess.CalledProcessError as exc:
            raise ApplyTimeError(
                f"Secret '{secret_name}' not found in namespace '{self.namespace}': "
                f"{(exc.stderr or '').strip()}") from exc
        secret = yaml.safe_load(proc.stdout) or {}
        self._cache[secret_name] = secret
        return secret
