"""Shared fixtures for idclone tests."""

import io
import os
import subprocess
import sys

import pytest

# Ensure tests/ is on sys.path so test files can import the fakes
# unambiguously (avoids conftest module name collisions).
sys.path.insert(0, os.path.dirname(__file__))

from fake_git_client import FakeGitClient  # noqa: E402
from fake_key_generator import FakeKeyGenerator  # noqa: E402

from idclone.prompts import PromptConfig, Prompter  # noqa: E402


def scripted_prompter(answers, output=None):
    """Prompter that answers questions from a list, recording the prompts shown."""
    it = iter(answers)
    prompts = []

    def _input(prompt_text):
        prompts.append(prompt_text)
        return next(it)

    prompter = Prompter(PromptConfig(input_fn=_input, output=output or io.StringIO()))
    prompter.prompts = prompts
    return prompter


def git(cwd, *args):
    """Run a git command in cwd and return stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


def init_git_repo(path, email="test@test.com", name="Test"):
    """Create a git repo with one commit authored by name <email>."""
    os.makedirs(path, exist_ok=True)
    git(path, "init", "-q")
    git(path, "config", "user.email", email)
    git(path, "config", "user.name", name)
    with open(os.path.join(path, "README.md"), "w") as f:
        f.write("# test\n")
    git(path, "add", ".")
    git(path, "commit", "-q", "-m", "Initial commit")
    return path


@pytest.fixture
def fake_git_client():
    return FakeGitClient()


@pytest.fixture
def fake_key_generator():
    return FakeKeyGenerator()


@pytest.fixture
def ssh_dir(tmp_path):
    path = tmp_path / "ssh"
    path.mkdir()
    return path
