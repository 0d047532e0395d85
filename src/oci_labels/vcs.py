"""
Version control queries used for VERSION (Go) and REVISION labels.

Every lookup degrades to an empty string: a project that is not a git
repository, has no commits or tags, or runs where git is not installed still
gets a complete label set.
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

__all__ = ["VersionControl", "GitClient"]

logger = logging.getLogger(__name__)


class VersionControl(Protocol):
    """Protocol for version control lookups."""

    def nearest_tag(self) -> str:
        """Nearest tag reachable from HEAD, or empty string."""
        ...

    def short_revision(self) -> str:
        """Short hash of the current commit, or empty string."""
        ...


class GitClient:
    """Runs git against a fixed project root."""

    def __init__(self, project_root: Path, executable: str = "git") -> None:
        self.project_root = Path(project_root)
        self.executable = executable

    def _run(self, args: Sequence[str]) -> str:
        argv = [self.executable, "-C", str(self.project_root), *args]
        try:
            result = subprocess.run(argv, capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug(f"git {' '.join(args)} failed in {self.project_root}: {e}")
            return ""
        return result.stdout.strip()

    def nearest_tag(self) -> str:
        return self._run(["describe", "--tags", "--abbrev=0"])

    def short_revision(self) -> str:
        return self._run(["rev-parse", "--short", "HEAD"])
