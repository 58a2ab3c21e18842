"""Tests for ProfileRegistry: existence checks and appended block format."""

import os
import stat

import pytest

from idclone.ssh.profile_registry import ConnectionProfile, ProfileRegistry, strip_comments


def _profile(name="github.com-dev_at_example.com", customized=False, **fields):
    return ConnectionProfile(
        name=name,
        email="dev@example.com",
        host="github.com",
        fields=fields or {"HostName": "github.com", "User": "git"},
        customized=customized,
    )


def _registry(tmp_path, content=None):
    path = tmp_path / "config"
    if content is not None:
        path.write_text(content)
    return ProfileRegistry(str(path)), path


@pytest.mark.unit
class TestStripComments:

    def test_removes_full_line_comments(self):
        assert strip_comments("# Host a\nHost b\n  # Host c\n") == "Host b"

    def test_collapses_blank_runs(self):
        assert strip_comments("Host a\n\n\n\nHost b") == "Host a\n\nHost b"


@pytest.mark.unit
class TestExists:

    def test_missing_file_has_no_profiles(self, tmp_path):
        registry, _ = _registry(tmp_path)
        assert registry.exists("github.com-dev") is False

    def test_finds_declared_host(self, tmp_path):
        registry, _ = _registry(tmp_path, "Host github.com-dev\n    User git\n")
        assert registry.exists("github.com-dev") is True

    def test_ignores_commented_out_host(self, tmp_path):
        registry, _ = _registry(tmp_path, "# Host github.com-dev\n")
        assert registry.exists("github.com-dev") is False

    def test_prefix_of_other_name_does_not_match(self, tmp_path):
        registry, _ = _registry(tmp_path, "Host github.com-dev-abc123\n")
        assert registry.exists("github.com-dev") is False

    def test_longer_name_does_not_match_shorter_declaration(self, tmp_path):
        registry, _ = _registry(tmp_path, "Host github.com-dev\n")
        assert registry.exists("github.com-dev-abc123") is False

    def test_dots_in_name_are_literal(self, tmp_path):
        registry, _ = _registry(tmp_path, "Host githubXcom-dev\n")
        assert registry.exists("github.com-dev") is False

    def test_is_case_sensitive(self, tmp_path):
        registry, _ = _registry(tmp_path, "host github.com-dev\nHost GitHub.com-dev\n")
        assert registry.exists("github.com-dev") is False

    def test_reads_file_once(self, tmp_path):
        registry, path = _registry(tmp_path, "Host a\n")
        assert registry.exists("a") is True
        path.write_text("Host b\n")
        assert registry.exists("b") is False


@pytest.mark.unit
class TestAppend:

    def test_writes_header_host_and_indented_fields(self, tmp_path):
        registry, path = _registry(tmp_path)
        registry.append(_profile())

        assert path.read_text() == (
            "# dev@example.com for github.com\n"
            "Host github.com-dev_at_example.com\n"
            "    HostName github.com\n"
            "    User git\n"
        )

    def test_marks_customized_profiles(self, tmp_path):
        registry, path = _registry(tmp_path)
        registry.append(_profile(name="github.com-dev_at_example.com-abc", customized=True))

        assert path.read_text().splitlines()[0] == "# dev@example.com for github.com (customized)"

    def test_keeps_field_insertion_order(self, tmp_path):
        registry, path = _registry(tmp_path)
        registry.append(_profile(User="git", HostName="github.com", Port="22"))

        lines = path.read_text().splitlines()[2:]
        assert lines == ["    User git", "    HostName github.com", "    Port 22"]

    def test_separates_blocks_with_one_blank_line(self, tmp_path):
        registry, path = _registry(tmp_path, "Host other\n    User me")
        registry.append(_profile())

        content = path.read_text()
        assert content.startswith("Host other\n    User me\n\n# dev@example.com")
        assert "\n\n\n" not in content

    def test_does_not_add_blank_line_after_existing_blank_line(self, tmp_path):
        registry, path = _registry(tmp_path, "Host other\n\n")
        registry.append(_profile())
        assert path.read_text().startswith("Host other\n\n# dev@example.com")

    def test_appending_twice_keeps_duplicate_blocks(self, tmp_path):
        registry, path = _registry(tmp_path)
        registry.append(_profile())
        registry.append(_profile())

        assert path.read_text().count("Host github.com-dev_at_example.com\n") == 2

    def test_appended_profile_is_visible_to_exists(self, tmp_path):
        registry, _ = _registry(tmp_path)
        registry.append(_profile())
        assert registry.exists("github.com-dev_at_example.com") is True

    def test_creates_private_config_file(self, tmp_path):
        path = tmp_path / "ssh" / "config"
        ProfileRegistry(str(path)).append(_profile())

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        assert stat.S_IMODE(os.stat(path.parent).st_mode) & 0o077 == 0


@pytest.mark.unit
class TestRenderTemplate:

    def test_missing_variable_fails(self):
        import jinja2

        from idclone.template_renderer import render_template

        with pytest.raises(jinja2.UndefinedError):
            render_template("profile_block.j2", package="idclone.ssh", email="dev@example.com")
