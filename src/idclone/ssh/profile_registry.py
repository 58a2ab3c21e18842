"""ProfileRegistry: the append-only SSH config file holding connection profiles."""

import logging
import os
import re
from dataclasses import dataclass, field

from idclone.template_renderer import render_template

logger = logging.getLogger(__name__)

FIELD_INDENT = "    "
_BLANK_RUN = re.compile(r"\n{3,}")


@dataclass
class ConnectionProfile:
    """A named SSH host alias and its fields, in the order they are written."""

    name: str
    email: str
    host: str
    fields: dict = field(default_factory=dict)
    customized: bool = False


def render_profile(profile) -> str:
    """Render a profile as a newline-terminated SSH config block."""
    return render_template(
        "profile_block.j2",
        package=__package__,
        email=profile.email,
        host=profile.host,
        customized=profile.customized,
        name=profile.name,
        fields=profile.fields,
        indent=FIELD_INDENT,
    )


def strip_comments(content) -> str:
    """Drop full-line comments and collapse runs of blank lines."""
    lines = [line for line in content.splitlines() if not line.lstrip().startswith("#")]
    return _BLANK_RUN.sub("\n\n", "\n".join(lines))


def _separator_before(content) -> str:
    if not content or content.endswith("\n\n"):
        return ""
    if content.endswith("\n"):
        return "\n"
    return "\n\n"


class ProfileRegistry:
    """Reads and appends Host blocks in a single SSH config file.

    The file is read at most once per instance. Entries are never edited or
    deduplicated; repeated appends of the same profile leave duplicate blocks,
    which SSH resolves by taking the first match.
    """

    def __init__(self, config_path):
        self._config_path = config_path
        self._content = None

    @property
    def config_path(self):
        return self._config_path

    def read(self) -> str:
        if self._content is None:
            if os.path.isfile(self._config_path):
                with open(self._config_path) as f:
                    self._content = f.read()
            else:
                self._content = ""
        return self._content

    def exists(self, profile_name) -> bool:
        """Return True if a `Host <profile_name>` line is declared."""
        pattern = re.compile(
            rf"^Host[ \t]+{re.escape(profile_name)}[ \t]*$",
            re.MULTILINE,
        )
        return pattern.search(strip_comments(self.read())) is not None

    def append(self, profile):
        """Append profile as a new block, separated by one blank line."""
        content = self.read()
        block = _separator_before(content) + render_profile(profile)

        config_dir = os.path.dirname(self._config_path)
        if config_dir:
            os.makedirs(config_dir, mode=0o700, exist_ok=True)
        is_new = not os.path.exists(self._config_path)
        with open(self._config_path, "a") as f:
            f.write(block)
        if is_new:
            os.chmod(self._config_path, 0o600)

        logger.debug("Appended profile %s to %s", profile.name, self._config_path)
        self._content = content + block
