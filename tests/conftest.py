import base64

import pytest
import yaml


def _b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


ROOT_PEM = "-----BEGIN CERTIFICATE-----\nroot\n-----END CERTIFICATE-----\n"
INTERMEDIATE_PEM = "-----BEGIN CERTIFICATE-----\nintermediate\n-----END CERTIFICATE-----\n"


@pytest.fixture
def daemonset():
    return {
        "apiVersion": "apps/v1",
        "kind": "DaemonSet",
        "metadata": {"name": "network-flow-monitor-agent", "namespace": "amazon-network-flow-monitor"},
        "spec": {
            "template": {
                "spec": {
                    "containers": [{
                        "name": "agent",
                        "image": "public.ecr.aws/example/agent:latest",
                        "env": [{"name": "LOG_LEVEL", "value": "info"}],
                        "volumeMounts": [{"name": "bpf", "mountPath": "/sys/fs/bpf"}],
                    }],
                    "volumes": [{"name": "bpf", "hostPath": {"path": "/sys/fs/bpf"}}],
                },
            },
        },
    }


@pytest.fixture
def bundle_secret():
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": "ca-cert-bundle"},
        "data": {"ca-bundle.crt": _b64(ROOT_PEM + INTERMEDIATE_PEM)},
    }


@pytest.fixture
def split_secret():
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": "ca-cert-bundle"},
        "data": {"root.crt": _b64(ROOT_PEM)},
        "stringData": {"intermediate.crt": INTERMEDIATE_PEM},
    }


@pytest.fixture
def rendered_dir(tmp_path, daemonset, bundle_secret):
    rendered = tmp_path / "rendered"
    (rendered / "agent" / "templates").mkdir(parents=True)
    with open(rendered / "agent" / "templates" / "daemonset.yaml", "w") as f:
        yaml.safe_dump(daemonset, f)
    with open(rendered / "agent" / "templates" / "secret.yaml", "w") as f:
        yaml.safe_dump_all([bundle_secret, None], f, explicit_start=True)
    return rendered
