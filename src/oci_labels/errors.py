"""
Label extraction error classes.

Provides a clear taxonomy of errors that can occur while detecting a project,
binding a manifest parser and driving the container tool. An empty field value
is never an error; only callers that require a field raise for it.
"""
from __future__ import annotations

from typing import Iterable, Tuple


class LabelError(Exception):
    """Base class for all oci-labels errors."""
    pass


class ManifestNotFound(LabelError):
    """
    No manifest marker file was found in the project root.

    Raised when auto-detection is requested and none of the known marker
    files exist. Fatal for auto-detection only; callers may supply an
    explicit project type instead.
    """

    def __init__(self, project_root: str, searched: Iterable[Tuple[str, str]]):
        self.project_root = project_root
        self.searched = list(searched)
        lines = ["Could not detect project type", "", f"Searched for these files in {project_root}:"]
        lines += [f"  - {filename} ({ecosystem})" for ecosystem, filename in self.searched]
        lines += [
            "",
            "None were found. Please specify explicitly:",
            "  oci-labels --project-type node labels",
        ]
        super().__init__("\n".join(lines))


class UnknownEcosystem(LabelError):
    """Explicit project type override is not a supported ecosystem."""

    def __init__(self, name: str, supported: Iterable[str]):
        self.name = name
        self.supported = list(supported)
        super().__init__(
            f"Unknown project type '{name}'. Supported types: {', '.join(self.supported)}"
        )


class NoParserAvailable(LabelError):
    """
    No manifest parser backend is available for a parser family.

    Raised when every configured backend for the family (json or toml) is
    missing from the execution path.
    """

    def __init__(self, family: str, tried: Iterable[str]):
        self.family = family
        self.tried = list(tried)
        if family == "toml":
            hint = "To install: pip install yq  # Provides tomlq"
        else:
            hint = "To install: Install jq or ensure node is in PATH"
        super().__init__(
            f"No {family} parser available\nTried: {', '.join(self.tried)}\n{hint}\n"
            f"Or parse in-process: OCI_LABELS_{family.upper()}_PARSERS=builtin"
        )


class MissingRequiredField(LabelError):
    """A field required for building an image resolved to an empty value."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Could not extract {field}")


class ContainerToolError(LabelError):
    """Container tool is missing or a build invocation failed."""
    pass


class ImageNotFound(LabelError):
    """Container tool could not find the requested image."""

    def __init__(self, image: str):
        self.image = image
        super().__init__(f"Image not found: {image}. Run: oci-labels build")


__all__ = [
    "LabelError",
    "ManifestNotFound",
    "UnknownEcosystem",
    "NoParserAvailable",
    "MissingRequiredField",
    "ContainerToolError",
    "ImageNotFound",
]
