"""Tests for ProfileResolver.resolve() and field merging."""

import os

import pytest

from idclone.identity import Identity
from idclone.ssh.key_store import KeyStore
from idclone.ssh.profile_registry import ProfileRegistry
from idclone.ssh.profile_resolver import ProfileResolver, default_fields, merge_fields

IDENTITY = Identity("dev@example.com")
BASE_NAME = "github.com-dev_at_example.com"


@pytest.fixture
def config_path(ssh_dir):
    return str(ssh_dir / "config")


@pytest.fixture
def resolve(ssh_dir, config_path, fake_key_generator):
    """Resolve with a fresh KeyStore and ProfileRegistry, as a new invocation would."""
    def _resolve(**kwargs):
        resolver = ProfileResolver(
            KeyStore(str(ssh_dir), fake_key_generator),
            ProfileRegistry(config_path),
        )
        return resolver.resolve(IDENTITY, "github.com", **kwargs)
    return _resolve


def _read(path):
    with open(path) as f:
        return f.read()


@pytest.mark.unit
class TestMergeFields:

    def test_no_overrides_is_unchanged(self):
        merged, changed = merge_fields({"User": "git"}, {})
        assert merged == {"User": "git"}
        assert changed is False

    def test_same_value_is_not_a_change(self):
        _, changed = merge_fields({"User": "git"}, {"User": "git"})
        assert changed is False

    def test_different_value_replaces_in_place(self):
        merged, changed = merge_fields({"HostName": "h", "User": "git"}, {"user": "me"})
        assert list(merged.items()) == [("HostName", "h"), ("User", "me")]
        assert changed is True

    def test_new_key_is_appended(self):
        merged, changed = merge_fields({"User": "git"}, {"Port": 2222})
        assert list(merged.items()) == [("User", "git"), ("Port", "2222")]
        assert changed is True


@pytest.mark.unit
class TestResolve:

    def test_default_profile_name(self, resolve):
        assert resolve().name == BASE_NAME

    def test_default_fields_use_generated_key(self, resolve, ssh_dir):
        resolved = resolve()
        key_path = os.path.join(str(ssh_dir), "id_ed25519_dev_at_example.com")
        assert resolved.profile.fields == default_fields("github.com", key_path)
        assert resolved.profile.customized is False

    def test_first_run_is_not_preexisting(self, resolve):
        assert resolve().is_preexisting is False

    def test_second_run_is_preexisting(self, resolve):
        resolve()
        assert resolve().is_preexisting is True

    def test_always_appends(self, resolve, config_path):
        resolve()
        resolve()
        assert _read(config_path).count(f"Host {BASE_NAME}\n") == 2

    def test_existing_profile_with_new_key_is_not_preexisting(self, resolve, config_path):
        with open(config_path, "w") as f:
            f.write(f"Host {BASE_NAME}\n    User git\n")
        resolved = resolve()
        assert resolved.key.was_generated is True
        assert resolved.is_preexisting is False

    def test_same_overrides_as_defaults_keep_plain_name(self, resolve):
        assert resolve(field_overrides={"User": "git"}).name == BASE_NAME

    def test_overrides_add_hash_suffix(self, resolve, config_path):
        resolved = resolve(field_overrides={"Port": "2222"})

        assert resolved.name.startswith(BASE_NAME + "-")
        assert len(resolved.name) == len(BASE_NAME) + 11
        assert resolved.profile.customized is True
        assert "(customized)" in _read(config_path)

    def test_same_overrides_give_same_name(self, resolve):
        first = resolve(field_overrides={"Port": "2222"})
        second = resolve(field_overrides={"port": "2222"})
        assert first.name == second.name
        assert second.is_preexisting is True

    def test_different_overrides_give_different_names(self, resolve):
        first = resolve(field_overrides={"Port": "2222"})
        second = resolve(field_overrides={"Port": "2223"})
        assert first.name != second.name

    def test_explicit_key_is_used(self, resolve, tmp_path, fake_key_generator):
        key = tmp_path / "work_key"
        key.write_text("private\n")
        (tmp_path / "work_key.pub").write_text("ssh-ed25519 AAAA\n")

        resolved = resolve(explicit_key_path=str(key))

        assert resolved.profile.fields["IdentityFile"] == str(key)
        assert fake_key_generator.calls == []

    def test_explicit_key_failure_writes_no_profile(self, resolve, tmp_path, config_path):
        from idclone.errors import MissingPublicKeyError

        key = tmp_path / "work_key"
        key.write_text("private\n")
        with pytest.raises(MissingPublicKeyError):
            resolve(explicit_key_path=str(key))
        assert not os.path.exists(config_path)
