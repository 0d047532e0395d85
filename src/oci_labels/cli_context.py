"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings, the
detected ecosystem and the field resolver, avoiding global state and enabling
proper dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from .container import ContainerTool
from .ecosystems import Ecosystem, select_ecosystem
from .parsers import ManifestSource
from .resolver import FieldResolver
from .settings import Settings, create_settings_from_env
from .vcs import GitClient, VersionControl


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Manages application-level dependencies that are initialized once and
    shared across a CLI command execution. The ecosystem is detected and the
    resolver is built on first access, so commands that never touch the
    manifest never fail on detection.
    """
    settings: Settings
    _ecosystem: Optional[Ecosystem] = None
    _vcs: Optional[VersionControl] = None
    _resolver: Optional[FieldResolver] = None
    _container: Optional[ContainerTool] = None

    @classmethod
    def from_env(cls, **overrides: Any) -> CLIContext:
        """
        Create CLI context from environment variables.

        Args:
            **overrides: Settings fields to override; None values are ignored

        Returns:
            CLIContext with settings loaded from environment
        """
        settings = create_settings_from_env()
        changes = {k: v for k, v in overrides.items() if v is not None}
        if changes:
            settings = replace(settings, **changes)
        return cls(settings=settings)

    @property
    def ecosystem(self) -> Ecosystem:
        """
        Get the project ecosystem (lazy, detected once).

        Raises:
            ManifestNotFound: If auto-detection finds no manifest
            UnknownEcosystem: If the explicit project type is unsupported
        """
        if self._ecosystem is None:
            self._ecosystem = select_ecosystem(self.settings.project_root, self.settings.project_type)
        return self._ecosystem

    @property
    def vcs(self) -> VersionControl:
        if self._vcs is None:
            self._vcs = GitClient(self.settings.project_root)
        return self._vcs

    @property
    def resolver(self) -> FieldResolver:
        """Get or create the field resolver for the project."""
        if self._resolver is None:
            manifest = ManifestSource(
                self.settings.project_root,
                self.ecosystem,
                self.settings.parser_preferences,
            )
            self._resolver = FieldResolver(self.ecosystem, manifest, self.vcs)
        return self._resolver

    @property
    def container(self) -> ContainerTool:
        if self._container is None:
            self._container = ContainerTool(self.settings.container_tool)
        return self._container
