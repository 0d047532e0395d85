"""
Settings and configuration for oci-labels.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables at command start.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .parsers import DEFAULT_PARSERS, KNOWN_PARSERS

__all__ = ["Settings", "create_settings_from_env"]


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for label extraction.

    Project Settings:
        project_root: Directory containing the project manifest
        project_type: Explicit ecosystem override (None = auto-detect); checked
            when the ecosystem is selected, not here

    Parser Settings:
        json_parsers: JSON backends in preference order
        toml_parsers: TOML backends in preference order

    Container Settings:
        container_tool: Executable used for build/inspect
        dockerfile: Dockerfile path (None = <project_root>/Dockerfile)

    Logging:
        debug: Emit debug logging to stderr
    """
    project_root: Path = field(default_factory=Path.cwd)
    project_type: Optional[str] = None
    json_parsers: Tuple[str, ...] = DEFAULT_PARSERS["json"]
    toml_parsers: Tuple[str, ...] = DEFAULT_PARSERS["toml"]
    container_tool: str = "podman"
    dockerfile: Optional[Path] = None
    debug: bool = False

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.project_root:
            raise ValueError("project_root is required")
        if not Path(self.project_root).is_dir():
            raise ValueError(f"project_root is not a directory: {self.project_root}")

        for family, names in (("json", self.json_parsers), ("toml", self.toml_parsers)):
            if not names:
                raise ValueError(f"{family}_parsers must name at least one parser")
            unknown = [n for n in names if n not in KNOWN_PARSERS[family]]
            if unknown:
                raise ValueError(
                    f"Unknown {family} parsers {unknown}. Choose from: {', '.join(KNOWN_PARSERS[family])}"
                )

        if not self.container_tool:
            raise ValueError("container_tool is required")

    @property
    def parser_preferences(self) -> Mapping[str, Tuple[str, ...]]:
        return {"json": self.json_parsers, "toml": self.toml_parsers}

    @property
    def dockerfile_path(self) -> Path:
        return Path(self.dockerfile) if self.dockerfile else Path(self.project_root) / "Dockerfile"


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - OCI_LABELS_PROJECT_ROOT (default: current directory)
        - OCI_LABELS_PROJECT_TYPE, then PROJECT_TYPE (default: auto-detect)
        - OCI_LABELS_JSON_PARSERS (default: jq,node; add builtin to parse in-process)
        - OCI_LABELS_TOML_PARSERS (default: tomlq; add builtin to parse in-process)
        - OCI_LABELS_CONTAINER_TOOL (default: podman)
        - OCI_LABELS_DOCKERFILE (default: <project_root>/Dockerfile)
        - OCI_LABELS_DEBUG, then DEBUG (default: false)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    return _load_settings_impl()


def _load_settings_impl() -> Settings:
    """Internal implementation of settings loading."""
    # Helper to convert string to bool
    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    # Helper to split comma-separated lists
    def get_list(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
        value = os.getenv(key)
        if not value:
            return default
        return tuple(part.strip() for part in value.split(",") if part.strip())

    root = os.getenv("OCI_LABELS_PROJECT_ROOT")
    project_root = Path(root).expanduser().resolve() if root else Path.cwd()

    project_type = os.getenv("OCI_LABELS_PROJECT_TYPE") or os.getenv("PROJECT_TYPE") or None

    dockerfile = os.getenv("OCI_LABELS_DOCKERFILE")
    debug = str_to_bool(os.getenv("OCI_LABELS_DEBUG") or os.getenv("DEBUG") or "false")

    return Settings(
        project_root=project_root,
        project_type=project_type,
        json_parsers=get_list("OCI_LABELS_JSON_PARSERS", DEFAULT_PARSERS["json"]),
        toml_parsers=get_list("OCI_LABELS_TOML_PARSERS", DEFAULT_PARSERS["toml"]),
        container_tool=os.getenv("OCI_LABELS_CONTAINER_TOOL") or "podman",
        dockerfile=Path(dockerfile) if dockerfile else None,
        debug=debug,
    )
