"""KeyStore: finds or creates the SSH key pair an identity connects with."""

import logging
import os
import subprocess
from dataclasses import dataclass

from idclone.errors import (
    ExternalToolError,
    IncompleteKeyPairError,
    MissingPrivateKeyError,
    MissingPublicKeyError,
)

logger = logging.getLogger(__name__)

KEY_PREFIX = "id_ed25519_"
PUBLIC_SUFFIX = ".pub"


@dataclass
class KeyResult:
    """Path of the private key and whether this run created the pair."""

    key_path: str
    was_generated: bool

    @property
    def public_key_path(self) -> str:
        return self.key_path + PUBLIC_SUFFIX

    def read_public_key(self) -> str:
        with open(self.public_key_path) as f:
            return f.read().strip()


class SshKeyGenerator:
    """Generates Ed25519 key pairs with ssh-keygen."""

    def generate(self, key_path, comment):
        result = subprocess.run(
            ["ssh-keygen", "-t", "ed25519", "-N", "", "-C", comment, "-f", key_path, "-q"],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise ExternalToolError("ssh-keygen", result.returncode, result.stderr)


class KeyStore:
    """Ensures a complete key pair exists for an identity, never overwriting.

    Args:
        key_dir: Directory holding managed keys (usually ~/.ssh).
        key_generator: Object with generate(key_path, comment).
    """

    def __init__(self, key_dir, key_generator=None):
        self._key_dir = key_dir
        self._key_generator = key_generator or SshKeyGenerator()

    @property
    def key_dir(self):
        return self._key_dir

    def key_path_for(self, identity) -> str:
        return os.path.join(self._key_dir, f"{KEY_PREFIX}{identity.safe_name}")

    def ensure_key(self, identity, explicit_key_path=None) -> KeyResult:
        """Return the key pair for identity, generating one only when none exists.

        Args:
            identity: The Identity the key belongs to.
            explicit_key_path: Caller-chosen key (private or .pub path). Must
                exist in full; it is never generated.

        Raises:
            MissingPrivateKeyError, MissingPublicKeyError: explicit key incomplete.
            IncompleteKeyPairError: only one half of the managed pair exists.
            ExternalToolError: ssh-keygen failed.
        """
        if explicit_key_path:
            return self._use_explicit_key(explicit_key_path)

        key_path = self.key_path_for(identity)
        has_private = os.path.isfile(key_path)
        has_public = os.path.isfile(key_path + PUBLIC_SUFFIX)

        if has_private and has_public:
            logger.debug("Reusing key pair %s", key_path)
            return KeyResult(key_path=key_path, was_generated=False)
        if has_private:
            raise IncompleteKeyPairError(key_path, "public key")
        if has_public:
            raise IncompleteKeyPairError(key_path, "private key")

        os.makedirs(self._key_dir, mode=0o700, exist_ok=True)
        logger.debug("Generating key pair %s for %s", key_path, identity.email)
        self._key_generator.generate(key_path, identity.email)
        return KeyResult(key_path=key_path, was_generated=True)

    def _use_explicit_key(self, explicit_key_path) -> KeyResult:
        key_path = os.path.abspath(os.path.expanduser(explicit_key_path))
        if key_path.endswith(PUBLIC_SUFFIX):
            key_path = key_path[: -len(PUBLIC_SUFFIX)]

        if not os.path.isfile(key_path):
            raise MissingPrivateKeyError(key_path)
        if not os.path.isfile(key_path + PUBLIC_SUFFIX):
            raise MissingPublicKeyError(key_path)

        logger.debug("Using explicit key pair %s", key_path)
        return KeyResult(key_path=key_path, was_generated=False)
