import pytest

from catrust import (
    CaCertsConfig, ConfigurationError, MountDirective, ResolvedSpec,
    SingleKeyMode, WholeSecretMode, resolve,
)


def _config(**overrides):
    fields = {
        "enabled": True,
        "secret_name": "ca-cert-bundle",
        "secret_key": "ca-bundle.crt",
        "mount_path": "/etc/ssl/certs",
        "file_name": "ca-bundle.crt",
    }
    fields.update(overrides)
    return CaCertsConfig(**fields)


class TestDisabled:
    def test_disabled_returns_empty_spec(self):
        spec = resolve(_config(enabled=False), {"root.crt"})
        assert spec == ResolvedSpec()
        assert spec.is_empty

    @pytest.mark.parametrize("overrides", [
        {"secret_name": ""},
        {"mount_path": ""},
        {"file_name": ""},
        {"secret_key": None, "mount_path": "relative"},
    ])
    def test_disabled_ignores_invalid_fields(self, overrides):
        assert resolve(_config(enabled=False, **overrides)).is_empty


class TestSingleKey:
    def test_default_scenario(self):
        spec = resolve(_config())
        assert spec.mounts == (
            MountDirective(source_key="ca-bundle.crt",
                           destination_path="/etc/ssl/certs/ca-bundle.crt"),
        )
        assert spec.env_vars == {
            "AWS_CA_BUNDLE": "/etc/ssl/certs/ca-bundle.crt",
            "SSL_CERT_FILE": "/etc/ssl/certs/ca-bundle.crt",
        }

    def test_file_name_differs_from_key(self):
        spec = resolve(_config(secret_key="tls.crt", file_name="corp-ca.pem",
                               mount_path="/opt/certs"))
        assert spec.mounts[0].source_key == "tls.crt"
        assert spec.mounts[0].destination_path == "/opt/certs/corp-ca.pem"
        assert set(spec.env_vars.values()) == {"/opt/certs/corp-ca.pem"}

    def test_secret_keys_ignored(self):
        assert resolve(_config(), {"a.crt", "b.crt"}) == resolve(_config())

    def test_trailing_slash_on_mount_path(self):
        spec = resolve(_config(mount_path="/etc/ssl/certs/"))
        assert spec.mounts[0].destination_path == "/etc/ssl/certs/ca-bundle.crt"

    def test_missing_file_name(self):
        with pytest.raises(ConfigurationError, match="file name required"):
            resolve(_config(file_name=""))

    def test_file_name_with_slash(self):
        with pytest.raises(ConfigurationError, match="plain file name"):
            resolve(_config(file_name="sub/ca.crt"))


class TestWholeSecret:
    def test_two_keys_scenario(self):
        spec = resolve(_config(secret_key=None), {"root.crt", "intermediate.crt"})
        assert [m.destination_path for m in spec.mounts] == [
            "/etc/ssl/certs/intermediate.crt",
            "/etc/ssl/certs/root.crt",
        ]
        assert spec.env_vars == {}

    def test_empty_secret_key_selects_whole_secret(self):
        config = _config(secret_key="")
        assert isinstance(config.mode, WholeSecretMode)
        assert len(resolve(config, {"root.crt"}).mounts) == 1

    def test_file_name_not_used(self):
        spec = resolve(_config(secret_key=None, file_name="ignored.crt"), {"root.crt"})
        assert spec.mounts == (
            MountDirective(source_key="root.crt", destination_path="/etc/ssl/certs/root.crt"),
        )

    def test_no_keys_is_not_an_error(self):
        assert resolve(_config(secret_key=None), set()).mounts == ()
        assert resolve(_config(secret_key=None)).mounts == ()

    @pytest.mark.parametrize("bad_key", ["../../../../escape.crt", "", ".", ".."])
    def test_rejects_keys_that_are_not_file_names(self, bad_key):
        with pytest.raises(ConfigurationError, match="key of Secret 'ca-cert-bundle'"):
            resolve(_config(secret_key=None), {"root.crt", bad_key})

    def test_bare_string_rejected(self):
        with pytest.raises(TypeError, match="not a str"):
            resolve(_config(secret_key=None), "root.crt")

    def test_ordering_is_deterministic(self):
        keys = ["z.crt", "a.crt", "m.crt"]
        first = resolve(_config(secret_key=None), keys)
        second = resolve(_config(secret_key=None), reversed(keys))
        assert first == second
        assert [m.source_key for m in first.mounts] == ["a.crt", "m.crt", "z.crt"]


class TestValidation:
    def test_missing_secret_name(self):
        with pytest.raises(ConfigurationError, match="missing required secret reference"):
            resolve(_config(secret_name=""))

    def test_missing_secret_name_whole_secret(self):
        with pytest.raises(ConfigurationError, match="missing required secret reference"):
            resolve(_config(secret_name="", secret_key=None), {"root.crt"})

    def test_missing_mount_path(self):
        with pytest.raises(ConfigurationError, match="mount path required"):
            resolve(_config(mount_path=""))

    def test_relative_mount_path(self):
        with pytest.raises(ConfigurationError, match="must be absolute"):
            resolve(_config(mount_path="etc/ssl"))

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve(_config(secret_name=""))


def test_mode_variant():
    assert _config().mode == SingleKeyMode(secret_key="ca-bundle.crt", file_name="ca-bundle.crt")
    assert _config(secret_key=None).mode == WholeSecretMode()


def test_idempotent():
    config = _config(secret_key=None)
    keys = {"root.crt", "intermediate.crt"}
    assert resolve(config, keys) == resolve(config, keys)
    assert resolve(_config()).to_dict() == resolve(_config()).to_dict()


def test_to_dict():
    assert resolve(_config()).to_dict() == {
        "mounts": [{"sourceKey": "ca-bundle.crt",
                    "destinationPath": "/etc/ssl/certs/ca-bundle.crt"}],
        "envVars": {"AWS_CA_BUNDLE": "/etc/ssl/certs/ca-bundle.crt",
                    "SSL_CERT_FILE": "/etc/ssl/certs/ca-bundle.crt"},
    }


def test_spec_is_hashable_and_immutable():
    spec = resolve(_config())
    assert hash(spec) == hash(resolve(_config()))
    spec.env_vars["AWS_CA_BUNDLE"] = "/tmp/other.crt"
    assert spec.env_vars["AWS_CA_BUNDLE"] == "/etc/ssl/certs/ca-bundle.crt"
