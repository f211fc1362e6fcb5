"""Constants shared by the values layer, resolver and apply step."""

# Env vars read by the agent (AWS SDK and OpenSSL) to locate the CA bundle
ENV_AWS_CA_BUNDLE = "AWS_CA_BUNDLE"
ENV_SSL_CERT_FILE = "SSL_CERT_FILE"
CA_BUNDLE_ENV_VARS = (ENV_AWS_CA_BUNDLE, ENV_SSL_CERT_FILE)

# Pod volume name owned by catrust; re-apply replaces it
VOLUME_NAME = "ca-certs"

# Workload kinds patched by the apply step
TARGET_KINDS = ("DaemonSet",)

# Values document key holding the CA settings
VALUES_KEY = "caCerts"

DEFAULT_VALUES = {
    VALUES_KEY: {
        "enabled": False,
        "secretName": "ca-cert-bundle",
        "secretKey": "ca-bundle.crt",
        "mountPath": "/etc/ssl/certs",
        "fileName": "ca-bundle.crt",
    },
}
