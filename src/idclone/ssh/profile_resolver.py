"""ProfileResolver: turns an identity and remote host into a named SSH profile."""

import logging
from dataclasses import dataclass

from idclone.ssh.identity_hash import config_hash
from idclone.ssh.key_store import KeyResult
from idclone.ssh.profile_registry import ConnectionProfile

logger = logging.getLogger(__name__)

DEFAULT_USER = "git"


@dataclass
class ResolvedProfile:
    """Outcome of resolving a profile for one invocation."""

    profile: ConnectionProfile
    key: KeyResult
    is_preexisting: bool

    @property
    def name(self) -> str:
        return self.profile.name


def default_fields(remote_host, key_path) -> dict:
    return {
        "HostName": remote_host,
        "User": DEFAULT_USER,
        "IdentityFile": key_path,
        "IdentitiesOnly": "yes",
        "StrictHostKeyChecking": "accept-new",
    }


def merge_fields(defaults, overrides):
    """Layer overrides onto defaults.

    Keys matching a default case-insensitively replace it in place; other keys
    are appended in the order given.

    Returns:
        (merged, changed) where changed is True if any override introduced a
        new key or a value different from the default.
    """
    merged = dict(defaults)
    key_by_lower = {key.lower(): key for key in merged}
    changed = False
    for key, value in (overrides or {}).items():
        value = str(value)
        existing_key = key_by_lower.get(key.lower())
        if existing_key is None:
            merged[key] = value
            key_by_lower[key.lower()] = key
            changed = True
        elif merged[existing_key] != value:
            merged[existing_key] = value
            changed = True
    return merged, changed


def profile_name_for(remote_host, identity, fields=None) -> str:
    """Return `<host>-<identity>`, plus a field hash when fields are customised."""
    base = f"{remote_host}-{identity.safe_name}"
    if fields is None:
        return base
    return f"{base}-{config_hash(fields)}"


class ProfileResolver:
    """Resolves and records the SSH profile an identity uses for a host.

    Args:
        key_store: KeyStore providing the key pair.
        registry: ProfileRegistry persisting the profile.
    """

    def __init__(self, key_store, registry):
        self._key_store = key_store
        self._registry = registry

    def resolve(self, identity, remote_host, explicit_key_path=None, field_overrides=None) -> ResolvedProfile:
        """Build the profile for identity on remote_host and append it to the registry.

        The profile is appended on every run, even when it already exists. It
        counts as preexisting only if neither the key nor the profile had to be
        created.
        """
        key = self._key_store.ensure_key(identity, explicit_key_path)

        fields, customized = merge_fields(default_fields(remote_host, key.key_path), field_overrides)
        name = profile_name_for(remote_host, identity, fields if customized else None)
        profile = ConnectionProfile(
            name=name,
            email=identity.email,
            host=remote_host,
            fields=fields,
            customized=customized,
        )

        existed = self._registry.exists(name)
        logger.debug("Profile %s %s", name, "already declared" if existed else "is new")
        self._registry.append(profile)

        return ResolvedProfile(
            profile=profile,
            key=key,
            is_preexisting=not key.was_generated and existed,
        )
