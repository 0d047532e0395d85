"""
Field resolution against a project manifest.

Walks a field's path spec (direct path, fallback chain or special handler),
takes the first value that is neither empty nor ``null``, and applies the
field's transform. Unresolvable fields yield an empty string, never an error;
callers that require a field check for emptiness themselves.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Dict

from .ecosystems import (
    RESOLVED_FIELDS,
    Direct,
    Ecosystem,
    Fallback,
    Field,
    Handler,
    Special,
    field_spec,
)
from .parsers import ManifestSource, query_rendered
from .vcs import VersionControl

__all__ = [
    "FieldResolver",
    "FIELD_TRANSFORMS",
    "strip_quotes",
    "transform_noop",
    "transform_repository_url",
]

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r'^\s*module\s+"?([^"\s]+)"?', re.MULTILINE)
_GITHUB_PREFIX = "github.com/"


def strip_quotes(value: str) -> str:
    """
    Strip the surrounding double quotes of a rendered string value.

    Escapes inside the quotes are kept as rendered, so ``"a\\nb"`` stays on
    one line as ``a\\nb``.
    """
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def _is_present(value: str) -> bool:
    cleaned = strip_quotes(value)
    return bool(cleaned) and cleaned != "null"


def transform_noop(value: str) -> str:
    return strip_quotes(value)


def transform_repository_url(value: str) -> str:
    """
    Normalize a repository reference to a browsable URL.

    Accepts either a plain string or an embedded ``{"url": ...}`` object
    (package.json ``repository``), then strips a ``git+`` scheme marker and a
    trailing ``.git``.

    Examples:
        >>> transform_repository_url('{"type":"git","url":"git+https://example.com/x.git"}')
        'https://example.com/x'
        >>> transform_repository_url('"https://example.com/x.git"')
        'https://example.com/x'
    """
    if not value or value in ("null", '""'):
        return ""

    if value.startswith("{"):
        value = query_rendered(value, "url")

    value = strip_quotes(value)
    value = value.removeprefix("git+")
    value = value.removesuffix(".git")
    return value


# Per-field transforms; fields not listed use transform_noop
FIELD_TRANSFORMS: Dict[Field, Callable[[str], str]] = {
    Field.SOURCE: transform_repository_url,
}


class FieldResolver:
    """
    Resolves label fields for one ecosystem and manifest.

    Special handlers only read the resolved ecosystem, the manifest and
    version control; they share no other state.
    """

    def __init__(self, ecosystem: Ecosystem, manifest: ManifestSource, vcs: VersionControl) -> None:
        self.ecosystem = ecosystem
        self.manifest = manifest
        self.vcs = vcs
        self._handlers: Dict[Handler, Callable[[], str]] = {
            Handler.EXTRACT_DOCUMENTATION_FROM_REPO: self._extract_documentation_from_repo,
            Handler.RUST_EXTRACT_DOCUMENTATION: self._rust_extract_documentation,
            Handler.GO_EXTRACT_NAME: self._go_extract_name,
            Handler.GO_EXTRACT_VERSION: self._go_extract_version,
            Handler.GO_EXTRACT_HOMEPAGE: self._go_extract_homepage,
            Handler.GO_EXTRACT_REPOSITORY: self._go_extract_repository,
            Handler.GO_EXTRACT_DOCUMENTATION: self._go_extract_documentation,
        }

    def resolve(self, field: Field) -> str:
        """
        Resolve the raw value of a field, before its transform.

        A bare special handler is returned verbatim. Otherwise candidates are
        tried in order and the first value that is neither empty nor ``null``
        wins.

        Args:
            field: Field to resolve

        Returns:
            Raw value, or empty string if nothing resolved
        """
        spec = field_spec(self.ecosystem, field)
        if spec is None:
            return ""

        if isinstance(spec, Special):
            return self._invoke(spec.handler)

        candidates = spec.candidates if isinstance(spec, Fallback) else (spec,)
        for candidate in candidates:
            if isinstance(candidate, Special):
                value = self._invoke(candidate.handler)
            else:
                value = self.manifest.query(candidate.path)

            if _is_present(value):
                logger.debug(f"{field.value} resolved via {candidate}")
                return value

        logger.debug(f"{field.value} did not resolve for {self.ecosystem.value}")
        return ""

    def extract(self, field: Field) -> str:
        """Resolve a field and apply its transform."""
        value = self.resolve(field)
        if isinstance(field_spec(self.ecosystem, field), Special):
            return value
        transform = FIELD_TRANSFORMS.get(field, transform_noop)
        return transform(value)

    def extract_all(self) -> Dict[Field, str]:
        """Extract every manifest-backed field in declared order."""
        return {field: self.extract(field) for field in RESOLVED_FIELDS}

    def _invoke(self, handler: Handler) -> str:
        return self._handlers[handler]()

    # Special handlers

    def _extract_documentation_from_repo(self) -> str:
        repo = self.extract(Field.SOURCE)
        return f"{repo}/blob/main/README.md" if repo else ""

    def _rust_extract_documentation(self) -> str:
        name = self.extract(Field.TITLE)
        return f"https://docs.rs/{name}" if name else ""

    def _go_module(self) -> str:
        m = _MODULE_RE.search(self.manifest.content)
        return m.group(1) if m else ""

    def _go_extract_name(self) -> str:
        return self._go_module().rsplit("/", 1)[-1]

    def _go_extract_version(self) -> str:
        return self.vcs.nearest_tag()

    def _go_extract_homepage(self) -> str:
        module = self._go_module()
        return f"https://{module}" if module.startswith(_GITHUB_PREFIX) else ""

    def _go_extract_repository(self) -> str:
        return self._go_extract_homepage()

    def _go_extract_documentation(self) -> str:
        module = self._go_module()
        return f"https://pkg.go.dev/{module}" if module.startswith(_GITHUB_PREFIX) else ""
