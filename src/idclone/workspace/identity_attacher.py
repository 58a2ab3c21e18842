"""IdentityAttacher: sets the commit author of a cloned repository."""

import logging

from idclone.identity import CommitIdentity

logger = logging.getLogger(__name__)


class IdentityAttacher:
    """Writes a confirmed user.name and user.email into a repository's local config."""

    def __init__(self, git_client, prompter):
        self._git_client = git_client
        self._prompter = prompter

    def suggest_name(self, identity, workspace_path) -> str:
        """Author name from history for this email, else the capitalised local part."""
        name = self._git_client.find_author_name(workspace_path, identity.email)
        if name:
            logger.debug("Found author name %r in history of %s", name, workspace_path)
            return name
        return identity.suggested_name

    def attach(self, identity, workspace_path) -> CommitIdentity:
        suggestion = self.suggest_name(identity, workspace_path)
        display_name = self._prompter.ask(f"Commit name for {identity.email}", suggestion)
        commit_identity = CommitIdentity(display_name=display_name, email=identity.email)
        self._git_client.set_local_identity(workspace_path, display_name, identity.email)
        return commit_identity
