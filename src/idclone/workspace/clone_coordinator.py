"""CloneCoordinator: clones a remote through an SSH profile without clobbering."""

import logging
import os
from dataclasses import dataclass

from idclone.errors import WorkspaceConflictError

logger = logging.getLogger(__name__)


def qualified_url_for(profile_name, remote_path) -> str:
    """Remote URL that routes through the SSH profile: `<profile>:<path>`."""
    return f"{profile_name}:{remote_path}"


@dataclass
class Workspace:
    """A local clone bound to a profile-qualified remote."""

    local_path: str
    remote_profile_name: str
    remote_relative_path: str
    already_provisioned: bool = False

    @property
    def qualified_url(self) -> str:
        return qualified_url_for(self.remote_profile_name, self.remote_relative_path)


def _parent_listing(local_path):
    parent = os.path.dirname(local_path) or "."
    try:
        return os.listdir(parent)
    except FileNotFoundError:
        return []


class CloneCoordinator:
    """Decides whether a target directory can receive a clone, then clones.

    Args:
        git_client: GitClient used to read origins and clone.
    """

    def __init__(self, git_client):
        self._git_client = git_client

    def clone(self, profile_name, remote_path, local_path) -> Workspace:
        """Clone into local_path, or confirm an earlier clone of the same remote.

        Returns:
            The Workspace; already_provisioned is True when local_path already
            holds a clone whose origin is the qualified URL.

        Raises:
            WorkspaceConflictError: local_path is non-empty and belongs elsewhere.
            ExternalToolError: git clone failed.
        """
        local_path = os.path.abspath(local_path)
        workspace = Workspace(
            local_path=local_path,
            remote_profile_name=profile_name,
            remote_relative_path=remote_path,
        )
        url = workspace.qualified_url

        if os.path.basename(local_path) in _parent_listing(local_path):
            if not os.path.isdir(local_path):
                raise WorkspaceConflictError(local_path, url, "")
            if os.listdir(local_path):
                origin = self._git_client.read_origin_url(local_path)
                if origin != url:
                    raise WorkspaceConflictError(local_path, url, origin)
                logger.debug("%s already cloned from %s", local_path, url)
                workspace.already_provisioned = True
                return workspace
            logger.debug("%s exists but is empty", local_path)

        logger.debug("Cloning %s into %s", url, local_path)
        self._git_client.clone(url, local_path)
        return workspace
