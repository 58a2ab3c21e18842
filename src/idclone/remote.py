"""Parse the remote repository locators accepted on the command line."""

import posixpath
import re
import shlex
from dataclasses import dataclass
from urllib.parse import urlsplit

from idclone.errors import InvalidRemoteError
from idclone.ssh.profile_resolver import DEFAULT_USER

URL_SCHEMES = ("ssh", "git+ssh", "https", "http", "git")
SSH_SCHEMES = ("ssh", "git+ssh")
DEFAULT_PORT = 22

# git clone options that consume the following argument
_CLONE_OPTIONS_WITH_VALUE = {
    "-b", "--branch", "-o", "--origin", "-c", "--config", "-u", "--upload-pack",
    "-j", "--jobs", "--depth", "--reference", "--reference-if-able",
    "--separate-git-dir", "--filter", "--shallow-since", "--shallow-exclude",
    "--template", "--server-option",
}

_SCP_LIKE = re.compile(r"^(?:(?P<user>[^@/:\s]+)@)?(?P<host>[^@/:\s]+):(?P<path>[^\s]+)$")
_BARE = re.compile(r"^(?P<host>[^@/:\s]+)/(?P<path>[^\s]+)$")


@dataclass
class RemoteTarget:
    """Host and host-relative repository path, plus the clone directory."""

    host: str
    path: str
    directory: str
    user: str | None = None
    port: int | None = None

    def ssh_overrides(self) -> dict:
        """SSH profile fields implied by the locator: a non-default Port or User."""
        overrides = {}
        if self.port is not None and self.port != DEFAULT_PORT:
            overrides["Port"] = str(self.port)
        if self.user and self.user != DEFAULT_USER:
            overrides["User"] = self.user
        return overrides


def default_directory(path) -> str:
    """Last path segment without .git: org/repo.git -> repo."""
    name = posixpath.basename(path.rstrip("/"))
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


def _split_clone_command(locator):
    try:
        tokens = shlex.split(locator)
    except ValueError as e:
        raise InvalidRemoteError(f"Cannot parse clone command {locator!r}: {e}")

    positionals = []
    args = iter(tokens[2:])
    for token in args:
        if token in _CLONE_OPTIONS_WITH_VALUE:
            next(args, None)
        elif not token.startswith("-"):
            positionals.append(token)

    if not positionals or len(positionals) > 2:
        raise InvalidRemoteError(f"Expected `git clone <url> [<dir>]`, got {locator!r}")
    url = positionals[0]
    directory = positionals[1] if len(positionals) == 2 else None
    return url, directory


def _url_parts(url):
    parts = urlsplit(url)
    if parts.scheme not in URL_SCHEMES or not parts.hostname:
        return None
    user = port = None
    if parts.scheme in SSH_SCHEMES:
        user = parts.username
        try:
            port = parts.port
        except ValueError as e:
            raise InvalidRemoteError(f"Invalid port in {url!r}: {e}")
    return parts.hostname, parts.path.lstrip("/"), user, port


def _remote_parts(url):
    """Return (host, path, user, port) for url, or None if it is not a locator."""
    if "://" in url:
        return _url_parts(url)
    match = _SCP_LIKE.match(url)
    if match:
        return match.group("host"), match.group("path").lstrip("/"), match.group("user"), None
    match = _BARE.match(url)
    if match:
        return match.group("host"), match.group("path").lstrip("/"), None, None
    return None


def parse_remote(locator) -> RemoteTarget:
    """Parse a URL, scp-like address, bare host/path or `git clone ...` command.

    The SSH user and port are kept when the locator names them, so they can be
    carried into the profile.

    Raises:
        InvalidRemoteError: The locator has no recognisable host and path, or an
            invalid port.
    """
    locator = locator.strip()
    directory = None
    if locator.startswith("git clone ") or locator == "git clone":
        locator, directory = _split_clone_command(locator)

    parts = _remote_parts(locator)
    if parts is None:
        raise InvalidRemoteError(f"Unrecognised remote repository: {locator!r}")
    host, path, user, port = parts
    path = path.rstrip("/")
    if not path or not default_directory(path):
        raise InvalidRemoteError(f"Remote {locator!r} has no repository path")

    return RemoteTarget(
        host=host.lower(),
        path=path,
        directory=directory or default_directory(path),
        user=user,
        port=port,
    )
