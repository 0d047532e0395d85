"""
Tests for git lookups.
"""
from __future__ import annotations

import shutil
import subprocess
from unittest.mock import patch

import pytest

from oci_labels.vcs import GitClient


class TestGitClient:
    """Test GitClient with subprocess mocked."""

    def test_nearest_tag_argv(self, tmp_path):
        completed = subprocess.CompletedProcess([], 0, stdout="v1.4.0\n", stderr="")
        with patch("oci_labels.vcs.subprocess.run", return_value=completed) as run:
            assert GitClient(tmp_path).nearest_tag() == "v1.4.0"
        assert run.call_args.args[0] == ["git", "-C", str(tmp_path), "describe", "--tags", "--abbrev=0"]

    def test_short_revision_argv(self, tmp_path):
        completed = subprocess.CompletedProcess([], 0, stdout="abc1234\n", stderr="")
        with patch("oci_labels.vcs.subprocess.run", return_value=completed) as run:
            assert GitClient(tmp_path).short_revision() == "abc1234"
        assert run.call_args.args[0][-3:] == ["rev-parse", "--short", "HEAD"]

    def test_command_failure_is_empty(self, tmp_path):
        """Test a repository without tags yields an empty value."""
        error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: No names found")
        with patch("oci_labels.vcs.subprocess.run", side_effect=error):
            assert GitClient(tmp_path).nearest_tag() == ""

    def test_missing_git_is_empty(self, tmp_path):
        client = GitClient(tmp_path, executable="definitely-not-git")
        assert client.short_revision() == ""


@pytest.mark.integration
@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitClientIntegration:
    """Test GitClient against a real repository."""

    def _git(self, root, *args):
        subprocess.run(["git", "-C", str(root), *args], check=True, capture_output=True)

    def test_revision_and_tag(self, tmp_path):
        self._git(tmp_path, "init", "-q")
        self._git(tmp_path, "-c", "user.name=t", "-c", "user.email=t@example.com",
                  "commit", "-q", "--allow-empty", "-m", "init")
        self._git(tmp_path, "tag", "v0.2.0")

        client = GitClient(tmp_path)
        assert client.nearest_tag() == "v0.2.0"
        assert len(client.short_revision()) >= 7

    def test_not_a_repository(self, tmp_path):
        client = GitClient(tmp_path)
        assert client.nearest_tag() == ""
        assert client.short_revision() == ""
