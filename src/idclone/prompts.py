"""Interactive questions asked while provisioning.

All input goes through PromptConfig.input_fn so tests can supply canned
answers instead of a terminal.
"""

import sys
from dataclasses import dataclass, field
from typing import Callable, TextIO

import click

from idclone.errors import AmbiguousAnswerError

YES = "yes"
NO = "no"


@dataclass
class PromptConfig:
    """I/O configuration for prompts."""

    input_fn: Callable[[str], str] = field(default_factory=lambda: input)
    output: TextIO = field(default_factory=lambda: sys.stderr)
    max_attempts: int = 3


@dataclass
class _Option:
    value: str
    alias: str
    label: str
    is_default: bool


def _parse_options(options, default):
    parsed = []
    aliases = {}
    for value in options:
        is_default = value.lower() == default.lower()
        option = _Option(
            value=value,
            alias=value[0].lower(),
            label=value[:1].upper() + value[1:] if is_default else value,
            is_default=is_default,
        )
        if option.alias in aliases:
            raise ValueError(
                f'Aliases for options "{aliases[option.alias].value}" and "{value}" '
                f"are not unique: {option.alias}"
            )
        aliases[option.alias] = option
        parsed.append(option)
    return parsed


def _suggestions(options, default):
    labels = [f"{o.alias}/{o.label}" for o in options]
    default_label = default[:1].upper() + default[1:]
    return f"({'/'.join(labels)}, Enter for {default_label})"


class Prompter:
    """Asks the operator questions, one line of input per question."""

    def __init__(self, config=None):
        self._config = config or PromptConfig()

    def echo(self, message=""):
        click.echo(message, file=self._config.output)

    def _read(self, prompt_text) -> str:
        try:
            return self._config.input_fn(prompt_text).strip()
        except EOFError:
            self.echo()
            raise click.Abort()

    def ask(self, message, default) -> str:
        """Ask a free-text question; an empty answer returns default."""
        answer = self._read(f"{message} [{default}]: ")
        return answer or default

    def choose(self, message, options, default) -> str:
        """Ask the operator to pick one of options by alias or full name.

        Raises:
            ValueError: Two options share a first letter.
            AmbiguousAnswerError: No valid answer after max_attempts.
        """
        parsed = _parse_options(options, default)
        prompt_text = f"{message} {_suggestions(parsed, default)}: "
        answers = []
        while len(answers) < self._config.max_attempts:
            answer = self._read(prompt_text)
            if not answer:
                return default
            lowered = answer.lower()
            for option in parsed:
                if lowered in (option.alias, option.value.lower()):
                    return option.value
            answers.append(answer)
            self.echo(f"Unrecognised answer: {answer}")
        raise AmbiguousAnswerError(message, answers)

    def confirm(self, message, default=True) -> bool:
        return self.choose(message, [YES, NO], YES if default else NO) == YES


class AutoPrompter(Prompter):
    """Prompter that accepts every default without reading input."""

    def ask(self, message, default) -> str:
        self.echo(f"{message} [{default}]: {default}")
        return default

    def choose(self, message, options, default) -> str:
        _parse_options(options, default)
        self.echo(f"{message}: {default}")
        return default
