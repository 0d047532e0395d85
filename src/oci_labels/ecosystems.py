"""
Ecosystems, label fields and per-ecosystem field path tables.

An ecosystem is identified by the manifest marker file present in the project
root. Each ecosystem carries a parser family (json or toml) and a table that
maps every resolvable label field to a path spec describing how to find it in
the manifest.

Path specs are written in a compact notation:

    "project.name"                                   Direct path
    "SPECIAL:go_extract_name"                        Special handler
    "project.authors[0].name|project.authors[0]"     Fallback chain

and parsed once at import time into tagged variants.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .errors import ManifestNotFound, UnknownEcosystem

__all__ = [
    "Ecosystem",
    "Field",
    "Handler",
    "Direct",
    "Special",
    "Fallback",
    "PathSpec",
    "RESOLVED_FIELDS",
    "FIELD_PATHS",
    "parse_path_spec",
    "describe",
    "field_spec",
    "detect",
    "select_ecosystem",
]

logger = logging.getLogger(__name__)

SPECIAL_PREFIX = "SPECIAL:"


class Ecosystem(str, Enum):
    """Supported project ecosystems, in detection priority order."""
    NODE = "node"
    PYTHON = "python"
    RUST = "rust"
    PHP = "php"
    GO = "go"

    @property
    def marker(self) -> str:
        """Manifest filename that identifies this ecosystem."""
        return _MARKERS[self]

    @property
    def parser_family(self) -> str:
        return _PARSER_FAMILIES[self]


_MARKERS = {
    Ecosystem.NODE: "package.json",
    Ecosystem.PYTHON: "pyproject.toml",
    Ecosystem.RUST: "Cargo.toml",
    Ecosystem.PHP: "composer.json",
    Ecosystem.GO: "go.mod",
}

_PARSER_FAMILIES = {
    Ecosystem.NODE: "json",
    Ecosystem.PYTHON: "toml",
    Ecosystem.RUST: "toml",
    Ecosystem.PHP: "json",
    Ecosystem.GO: "toml",
}

_DESCRIPTIONS = {
    Ecosystem.NODE: "Node.js/npm",
    Ecosystem.PYTHON: "Python/pip",
    Ecosystem.RUST: "Rust/cargo",
    Ecosystem.PHP: "PHP/composer",
    Ecosystem.GO: "Go modules",
}


class Field(str, Enum):
    """OCI label fields in their declared output order."""
    TITLE = "TITLE"
    DESCRIPTION = "DESCRIPTION"
    VERSION = "VERSION"
    AUTHORS = "AUTHORS"
    VENDOR = "VENDOR"
    LICENSES = "LICENSES"
    URL = "URL"
    DOCUMENTATION = "DOCUMENTATION"
    SOURCE = "SOURCE"
    CREATED = "CREATED"
    REVISION = "REVISION"


# Fields resolved from the manifest; CREATED and REVISION are computed.
RESOLVED_FIELDS: Tuple[Field, ...] = tuple(
    f for f in Field if f not in (Field.CREATED, Field.REVISION)
)


class Handler(str, Enum):
    """Special-case extractors referenced from path specs."""
    EXTRACT_DOCUMENTATION_FROM_REPO = "extract_documentation_from_repo"
    RUST_EXTRACT_DOCUMENTATION = "rust_extract_documentation"
    GO_EXTRACT_NAME = "go_extract_name"
    GO_EXTRACT_VERSION = "go_extract_version"
    GO_EXTRACT_HOMEPAGE = "go_extract_homepage"
    GO_EXTRACT_REPOSITORY = "go_extract_repository"
    GO_EXTRACT_DOCUMENTATION = "go_extract_documentation"


@dataclass(frozen=True)
class Direct:
    """A single dotted manifest path, e.g. ``project.urls.homepage``."""
    path: str


@dataclass(frozen=True)
class Special:
    """A reference to a special-case extractor."""
    handler: Handler


@dataclass(frozen=True)
class Fallback:
    """Ordered candidates; the first non-empty, non-null value wins."""
    candidates: Tuple[Union[Direct, Special], ...]


PathSpec = Union[Direct, Special, Fallback]


def _parse_candidate(text: str) -> Union[Direct, Special]:
    text = text.strip()
    if not text:
        raise ValueError("empty candidate in path spec")
    if text.startswith(SPECIAL_PREFIX):
        # Raises ValueError for unknown handler names
        return Special(Handler(text[len(SPECIAL_PREFIX):]))
    return Direct(text)


def parse_path_spec(text: str) -> Optional[PathSpec]:
    """
    Parse compact path spec notation into a tagged variant.

    Args:
        text: Spec string; empty means the field is unsupported

    Returns:
        Direct, Special or Fallback, or None for an empty spec

    Raises:
        ValueError: If a candidate is empty or names an unknown handler

    Examples:
        >>> parse_path_spec("package.name")
        Direct(path='package.name')
        >>> parse_path_spec("SPECIAL:go_extract_name")
        Special(handler=<Handler.GO_EXTRACT_NAME: 'go_extract_name'>)
    """
    if not text:
        return None
    parts = text.split("|")
    if len(parts) == 1:
        return _parse_candidate(parts[0])
    return Fallback(tuple(_parse_candidate(part) for part in parts))


_RAW_FIELD_PATHS: Dict[Ecosystem, Dict[Field, str]] = {
    Ecosystem.NODE: {
        Field.TITLE: "name",
        Field.DESCRIPTION: "description",
        Field.VERSION: "version",
        Field.AUTHORS: "author",
        Field.VENDOR: "author",
        Field.LICENSES: "license",
        Field.URL: "homepage",
        Field.DOCUMENTATION: "SPECIAL:extract_documentation_from_repo",
        Field.SOURCE: "repository",
    },
    Ecosystem.PYTHON: {
        Field.TITLE: "project.name",
        Field.DESCRIPTION: "project.description",
        Field.VERSION: "project.version",
        Field.AUTHORS: "project.authors[0].name|project.authors[0]",
        Field.VENDOR: "project.authors[0].name|project.authors[0]",
        Field.LICENSES: "project.license.text|project.license",
        Field.URL: "project.urls.homepage",
        Field.DOCUMENTATION: "project.urls.documentation|SPECIAL:extract_documentation_from_repo",
        Field.SOURCE: "project.urls.repository|project.urls.source",
    },
    Ecosystem.RUST: {
        Field.TITLE: "package.name",
        Field.DESCRIPTION: "package.description",
        Field.VERSION: "package.version",
        Field.AUTHORS: "package.authors[0]",
        Field.VENDOR: "package.authors[0]",
        Field.LICENSES: "package.license",
        Field.URL: "package.homepage",
        Field.DOCUMENTATION: "package.documentation|SPECIAL:rust_extract_documentation",
        Field.SOURCE: "package.repository",
    },
    Ecosystem.PHP: {
        Field.TITLE: "name",
        Field.DESCRIPTION: "description",
        Field.VERSION: "version",
        Field.AUTHORS: "authors[0].name",
        Field.VENDOR: "authors[0].name",
        Field.LICENSES: "license",
        Field.URL: "homepage",
        Field.DOCUMENTATION: "support.docs|SPECIAL:extract_documentation_from_repo",
        Field.SOURCE: "support.source",
    },
    Ecosystem.GO: {
        Field.TITLE: "SPECIAL:go_extract_name",
        Field.DESCRIPTION: "",
        Field.VERSION: "SPECIAL:go_extract_version",
        Field.AUTHORS: "",
        Field.VENDOR: "",
        Field.LICENSES: "",
        Field.URL: "SPECIAL:go_extract_homepage",
        Field.DOCUMENTATION: "SPECIAL:go_extract_documentation",
        Field.SOURCE: "SPECIAL:go_extract_repository",
    },
}

FIELD_PATHS: Dict[Ecosystem, Dict[Field, Optional[PathSpec]]] = {
    ecosystem: {field: parse_path_spec(spec) for field, spec in table.items()}
    for ecosystem, table in _RAW_FIELD_PATHS.items()
}


def field_spec(ecosystem: Ecosystem, field: Field) -> Optional[PathSpec]:
    """Look up the path spec for a field; None when unsupported."""
    return FIELD_PATHS[ecosystem].get(field)


def describe(ecosystem: Ecosystem) -> str:
    """Human-readable label, e.g. ``Node.js/npm (package.json)``."""
    return f"{_DESCRIPTIONS[ecosystem]} ({ecosystem.marker})"


def detect(project_root: Path) -> Ecosystem:
    """
    Detect the project ecosystem from marker files.

    Marker files are tried in a fixed priority order, so a project with both
    ``package.json`` and ``Cargo.toml`` is classified as node.

    Args:
        project_root: Directory to search

    Returns:
        The first ecosystem whose marker file exists

    Raises:
        ManifestNotFound: If no marker file exists
    """
    logger.debug(f"Detecting project type in {project_root}")
    for ecosystem in Ecosystem:
        if (Path(project_root) / ecosystem.marker).is_file():
            logger.debug(f"Found {ecosystem.marker} -> {ecosystem.value}")
            return ecosystem

    logger.debug("No project metadata file found")
    raise ManifestNotFound(
        str(project_root), [(e.value, e.marker) for e in Ecosystem]
    )


def select_ecosystem(project_root: Path, override: Optional[str] = None) -> Ecosystem:
    """
    Pick the ecosystem from an explicit override or by detection.

    Args:
        project_root: Directory to search when no override is given
        override: Explicit project type name; bypasses detection entirely

    Raises:
        UnknownEcosystem: If override is not a supported ecosystem
        ManifestNotFound: If detection finds no marker file
    """
    if override:
        try:
            return Ecosystem(override.strip().lower())
        except ValueError:
            raise UnknownEcosystem(override, [e.value for e in Ecosystem]) from None
    return detect(project_root)
