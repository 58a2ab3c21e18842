"""Exception types raised by the provisioning pipeline.

Every error is a click.ClickException so the CLI reports the message on
stderr and exits with the error's exit_code without a traceback.
"""

import click


class IdcloneError(click.ClickException):
    """Base class for provisioning failures."""


class InvalidIdentityError(click.UsageError):
    """The identity is not a usable email address."""


class InvalidRemoteError(click.UsageError):
    """The remote locator could not be parsed into host and path."""


class KeyPairError(IdcloneError):
    """An SSH key pair is missing or only partially present."""

    def __init__(self, message, key_path):
        super().__init__(message)
        self.key_path = key_path


class MissingPrivateKeyError(KeyPairError):
    def __init__(self, key_path):
        super().__init__(f"Private key not found: {key_path}", key_path)


class MissingPublicKeyError(KeyPairError):
    def __init__(self, key_path):
        super().__init__(f"Public key not found: {key_path}.pub", key_path)


class IncompleteKeyPairError(KeyPairError):
    """Only one half of a managed key pair exists on disk."""

    def __init__(self, key_path, missing):
        super().__init__(
            f"Key pair {key_path} is incomplete ({missing} is missing); "
            "refusing to overwrite it",
            key_path,
        )
        self.missing = missing


class WorkspaceConflictError(IdcloneError):
    """The clone target holds content that does not belong to this remote."""

    def __init__(self, local_path, expected_url, actual_url):
        detail = f"origin is {actual_url!r}" if actual_url else "no origin could be read"
        super().__init__(
            f"Directory {local_path} is not empty and {detail}, "
            f"expected {expected_url!r}. Nothing was changed."
        )
        self.local_path = local_path
        self.expected_url = expected_url
        self.actual_url = actual_url


class ExternalToolError(IdcloneError):
    """An external command (git, ssh-keygen) exited with a non-zero status."""

    def __init__(self, tool, returncode, stderr=""):
        message = f"{tool} failed with exit status {returncode}"
        if stderr and stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr


class AmbiguousAnswerError(IdcloneError):
    """An interactive question was not answered after the allowed attempts."""

    exit_code = 3

    def __init__(self, question, answers):
        super().__init__(
            f"No valid answer to {question!r} after {len(answers)} attempts: "
            + ", ".join(repr(a) for a in answers)
        )
        self.question = question
        self.answers = answers
