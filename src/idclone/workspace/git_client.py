"""GitClient: the git operations the clone and identity steps need.

Provides an injectable interface so tests can substitute FakeGitClient.
"""

import logging
import subprocess

from git import Repo
from git.exc import GitError, NoSuchPathError

from idclone.errors import ExternalToolError

logger = logging.getLogger(__name__)

AUTHOR_SCAN_LIMIT = 20


class GitClient:
    """Runs git against local working trees."""

    def read_origin_url(self, path) -> str:
        """Return remote.origin.url for the repository at path, or "" if unreadable."""
        try:
            return Repo(path).git.config("--get", "remote.origin.url").strip()
        except (GitError, NoSuchPathError) as e:
            logger.debug("Could not read origin of %s: %s", path, e)
            return ""

    def clone(self, url, path):
        """Clone url into path, streaming git's progress to the terminal."""
        result = subprocess.run(["git", "clone", url, path])
        if result.returncode != 0:
            raise ExternalToolError("git clone", result.returncode)

    def find_author_name(self, path, email):
        """Return the author name of the most recent commit on any ref authored by email.

        git narrows the history to authors whose `<email>` matches literally and
        case-insensitively; the exact email is still compared here.

        Returns None when no commit matches or the repository has no history.
        """
        try:
            log = Repo(path).git.log(
                "--all",
                "--fixed-strings",
                "--regexp-ignore-case",
                f"--author=<{email}>",
                f"--max-count={AUTHOR_SCAN_LIMIT}",
                "--format=%an%x00%ae",
            )
        except GitError as e:
            logger.debug("Could not read history of %s: %s", path, e)
            return None
        for line in log.splitlines():
            name, _, author_email = line.partition("\x00")
            if author_email.strip().lower() == email.lower() and name.strip():
                return name.strip()
        return None

    def set_local_identity(self, path, name, email):
        """Write user.name and user.email to the repository's own config."""
        writer = Repo(path).config_writer("repository")
        try:
            writer.set_value("user", "name", name)
            writer.set_value("user", "email", email)
        finally:
            writer.release()
