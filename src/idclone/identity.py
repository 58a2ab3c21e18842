"""Identity value objects: the email an environment is bound to and the
commit identity attached to a cloned repository."""

from dataclasses import dataclass

from idclone.errors import InvalidIdentityError

SAFE_SEPARATOR = "_at_"

# SSH Host pattern syntax and path separators, which safe_name cannot carry
UNSAFE_CHARACTERS = frozenset("*?!,/\\\"")


@dataclass(frozen=True)
class Identity:
    """An email address used to derive key and profile names."""

    email: str

    def __post_init__(self):
        local, sep, domain = self.email.partition("@")
        if not sep or not local or not domain or "@" in domain or any(c.isspace() for c in self.email):
            raise InvalidIdentityError(f"Not a valid email address: {self.email!r}")
        unsafe = sorted(UNSAFE_CHARACTERS.intersection(self.email))
        if unsafe:
            raise InvalidIdentityError(
                f"Email {self.email!r} contains characters not allowed in key and profile names: {' '.join(unsafe)}"
            )

    @property
    def local_part(self) -> str:
        return self.email.split("@", 1)[0]

    @property
    def safe_name(self) -> str:
        """Filesystem and SSH host safe form of the email."""
        return self.email.replace("@", SAFE_SEPARATOR)

    @property
    def suggested_name(self) -> str:
        """Display name guessed from the local part: dev@example.com -> Dev."""
        local = self.local_part
        return local[:1].upper() + local[1:]


@dataclass(frozen=True)
class CommitIdentity:
    """Name and email written to a repository's local user config."""

    display_name: str
    email: str
