"""Locations of the managed key directory and the SSH config file."""

import os
from dataclasses import dataclass

DEFAULT_SSH_DIR = "~/.ssh"
SSH_DIR_ENVVAR = "IDCLONE_SSH_DIR"
SSH_CONFIG_ENVVAR = "IDCLONE_SSH_CONFIG"


@dataclass
class Settings:
    """Filesystem locations used by the key store and profile registry."""

    ssh_dir: str
    ssh_config_path: str

    @classmethod
    def build(cls, ssh_dir=None, ssh_config_path=None) -> "Settings":
        """Apply defaults: ~/.ssh and <ssh_dir>/config."""
        resolved_dir = os.path.abspath(os.path.expanduser(ssh_dir or DEFAULT_SSH_DIR))
        if ssh_config_path:
            resolved_config = os.path.abspath(os.path.expanduser(ssh_config_path))
        else:
            resolved_config = os.path.join(resolved_dir, "config")
        return cls(ssh_dir=resolved_dir, ssh_config_path=resolved_config)
