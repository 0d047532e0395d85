"""
Fake version control client for testing.

Returns fixed values instead of running git, and counts calls so tests can
check which lookups a resolution performed.
"""
from __future__ import annotations

from oci_labels.vcs import VersionControl

__all__ = ["FakeVcs"]


class FakeVcs(VersionControl):
    """In-memory VersionControl test double."""

    def __init__(self, tag: str = "", revision: str = "") -> None:
        self.tag = tag
        self.revision = revision
        self.calls: list[str] = []

    def nearest_tag(self) -> str:
        self.calls.append("nearest_tag")
        return self.tag

    def short_revision(self) -> str:
        self.calls.append("short_revision")
        return self.revision
