"""
Manifest parser adapter.

Queries a project manifest with a dotted path (``project.authors[0].name``)
through a parser backend. Backends are grouped by parser family:

- json: ``jq``, ``node``, ``builtin``
- toml: ``tomlq``, ``builtin``

External backends pipe the manifest to a command-line tool; the builtin
backends evaluate the path in-process with ``json``/``tomllib`` and are only
used when named in the preference list. All backends render values the way
``jq -c`` does: strings as JSON string literals, objects and arrays as
compact JSON, and missing values as an empty string.
"""
from __future__ import annotations

import json
import logging
import re
import shutil
import subprocess
import tomllib
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Any, Callable, List, Mapping, Protocol, Sequence, Tuple, Union

from .ecosystems import Ecosystem
from .errors import ManifestNotFound, NoParserAvailable

__all__ = [
    "KNOWN_PARSERS",
    "DEFAULT_PARSERS",
    "ParserBackend",
    "BuiltinBackend",
    "ExternalBackend",
    "ManifestSource",
    "parse_path",
    "lookup",
    "render_value",
    "make_backend",
    "bind_parser",
    "query_rendered",
]

logger = logging.getLogger(__name__)

# Backend names accepted per family
KNOWN_PARSERS: Mapping[str, Tuple[str, ...]] = {
    "json": ("jq", "node", "builtin"),
    "toml": ("tomlq", "builtin"),
}

# Default preference order; builtin is opt-in
DEFAULT_PARSERS: Mapping[str, Tuple[str, ...]] = {
    "json": ("jq", "node"),
    "toml": ("tomlq",),
}

PathToken = Union[str, int]

_TOKEN_RE = re.compile(r"\.?([A-Za-z_][A-Za-z0-9_-]*)|\[(\d+)\]")


@lru_cache(maxsize=64)
def parse_path(path: str) -> Tuple[PathToken, ...]:
    """
    Split a dotted path into object keys and array indices.

    Args:
        path: Path such as ``project.authors[0].name``

    Returns:
        Tuple of tokens, e.g. ``("project", "authors", 0, "name")``

    Raises:
        ValueError: If the path is empty or malformed
    """
    if not path:
        raise ValueError("empty manifest path")

    tokens: List[PathToken] = []
    pos = 0
    while pos < len(path):
        m = _TOKEN_RE.match(path, pos)
        if m is None:
            raise ValueError(f"invalid manifest path: {path!r}")
        key, index = m.group(1), m.group(2)
        if key is not None:
            # Keys after the first token must be dot-separated
            if pos > 0 and not m.group(0).startswith("."):
                raise ValueError(f"invalid manifest path: {path!r}")
            tokens.append(key)
        else:
            tokens.append(int(index))
        pos = m.end()
    return tuple(tokens)


def lookup(document: Any, tokens: Sequence[PathToken]) -> Any:
    """Walk a parsed document; missing keys and type mismatches give None."""
    node = document
    for token in tokens:
        if isinstance(token, int):
            if not isinstance(node, list) or token >= len(node):
                return None
            node = node[token]
        else:
            if not isinstance(node, dict) or token not in node:
                return None
            node = node[token]
    return node


def render_value(value: Any) -> str:
    """Render a value the way ``jq -c '.path // ""'`` prints it."""
    if value is None or value is False:
        return ""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


class ParserBackend(Protocol):
    """Protocol for manifest parser backends."""

    name: str
    family: str

    def available(self) -> bool:
        """Whether the backend can run in this environment."""
        ...

    def query(self, text: str, path: str) -> str:
        """
        Evaluate a dotted path against manifest text.

        Returns:
            Rendered value, or empty string when the path is missing
        """
        ...


@lru_cache(maxsize=8)
def _load_json(text: str) -> Any:
    return json.loads(text)


@lru_cache(maxsize=8)
def _load_toml(text: str) -> Any:
    return tomllib.loads(text)


class BuiltinBackend:
    """In-process backend using the standard library parsers."""

    def __init__(self, family: str) -> None:
        if family not in KNOWN_PARSERS:
            raise ValueError(f"Unknown parser family: {family}")
        self.name = "builtin"
        self.family = family
        self._load: Callable[[str], Any] = _load_json if family == "json" else _load_toml

    def available(self) -> bool:
        return True

    def query(self, text: str, path: str) -> str:
        document = self._load(text)
        return render_value(lookup(document, parse_path(path)))

    def __repr__(self) -> str:
        return f"BuiltinBackend(family={self.family!r})"


def _brackets(tokens: Sequence[PathToken]) -> List[str]:
    return [f"[{t}]" if isinstance(t, int) else f"[{json.dumps(t)}]" for t in tokens]


def _jq_argv(executable: str, path: str) -> List[str]:
    return [executable, "-c", "." + "".join(_brackets(parse_path(path))) + ' // ""']


def _node_argv(executable: str, path: str) -> List[str]:
    access = "".join(f"?.{part}" for part in _brackets(parse_path(path)))
    script = (
        "JSON.stringify(JSON.parse(require('fs').readFileSync(0, 'utf-8'))"
        f"{access} || '')"
    )
    return [executable, "-p", script]


class ExternalBackend:
    """
    Backend that pipes manifest text to a command-line parser.

    A non-zero exit (for example jq indexing a string with a key) is treated
    as a missing value so that the fallback chain can continue.
    """

    def __init__(self, name: str, family: str, executable: str,
                 argv: Callable[[str, str], List[str]]) -> None:
        self.name = name
        self.family = family
        self.executable = executable
        self._argv = argv

    def available(self) -> bool:
        return shutil.which(self.executable) is not None

    def query(self, text: str, path: str) -> str:
        argv = self._argv(self.executable, path)
        result = subprocess.run(argv, input=text, capture_output=True, text=True, check=False)
        if result.returncode != 0:
            logger.debug(f"{self.name} failed for path {path!r}: {result.stderr.strip()}")
            return ""
        return result.stdout.strip()

    def __repr__(self) -> str:
        return f"ExternalBackend(name={self.name!r}, family={self.family!r})"


def make_backend(family: str, name: str) -> ParserBackend:
    """
    Construct a backend by family and name.

    Raises:
        ValueError: If the name is not a known backend for the family
    """
    if name not in KNOWN_PARSERS.get(family, ()):
        raise ValueError(f"Unknown {family} parser: {name}")
    if name == "builtin":
        return BuiltinBackend(family)
    if name == "node":
        return ExternalBackend("node", family, "node", _node_argv)
    # jq and tomlq share the jq filter language
    return ExternalBackend(name, family, name, _jq_argv)


def bind_parser(family: str, preference: Sequence[str]) -> ParserBackend:
    """
    Bind to the first available backend in preference order.

    Raises:
        NoParserAvailable: If none of the preferred backends is available
    """
    for name in preference:
        backend = make_backend(family, name)
        if backend.available():
            logger.debug(f"Using {name} for {family}")
            return backend
    raise NoParserAvailable(family, preference)


# Values piped back in for re-parsing were rendered as JSON by a backend
_RENDERED_VALUE_BACKEND = BuiltinBackend("json")


def query_rendered(text: str, path: str) -> str:
    """Query a previously rendered value, e.g. the ``url`` of an embedded object."""
    if not text:
        return ""
    try:
        return _RENDERED_VALUE_BACKEND.query(text, path)
    except json.JSONDecodeError:
        return ""


class ManifestSource:
    """
    A project's manifest file plus its lazily bound parser.

    Both the file content and the parser binding are computed on first use
    and never change afterwards.
    """

    def __init__(self, project_root: Path, ecosystem: Ecosystem,
                 preferences: Mapping[str, Sequence[str]] = DEFAULT_PARSERS) -> None:
        self.project_root = Path(project_root)
        self.ecosystem = ecosystem
        self.path = self.project_root / ecosystem.marker
        self._preferences = preferences

    @cached_property
    def content(self) -> str:
        """Raw manifest text, read once."""
        if not self.path.is_file():
            raise ManifestNotFound(str(self.project_root), [(self.ecosystem.value, self.ecosystem.marker)])
        text = self.path.read_text(encoding="utf-8")
        logger.debug(f"Loaded metadata cache from {self.path}")
        return text

    @cached_property
    def parser(self) -> ParserBackend:
        """Parser backend for this ecosystem's family, bound once."""
        family = self.ecosystem.parser_family
        return bind_parser(family, self._preferences.get(family, DEFAULT_PARSERS[family]))

    @property
    def parser_name(self) -> str | None:
        """Name of the bound backend, or None if nothing has been queried yet."""
        backend = self.__dict__.get("parser")
        return backend.name if backend is not None else None

    def query(self, path: str, source: str | None = None) -> str:
        """
        Return the rendered value at ``path``.

        Args:
            path: Dotted manifest path
            source: Previously rendered value to re-parse instead of the manifest

        Returns:
            Rendered value, empty when missing
        """
        if source is not None:
            return query_rendered(source, path)
        return self.parser.query(self.content, path)
