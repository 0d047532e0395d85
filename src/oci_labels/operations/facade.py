"""
Operations Facade - Application service layer.

Provides a clean interface between CLI and the resolver, centralizing
command orchestration while keeping CLI commands thin and testable.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..cli_context import CLIContext
from ..ecosystems import Field, RESOLVED_FIELDS, describe
from ..errors import LabelError
from ..labels import assemble_labels, utc_timestamp
from ..models import ImageLabels


def parse_field_name(name: str) -> Field:
    """
    Parse a case-insensitive label field name.

    Raises:
        ValueError: If the name is not a label field
    """
    try:
        return Field(name.strip().upper())
    except ValueError:
        supported = ", ".join(f.value for f in Field)
        raise ValueError(f"Unknown field '{name}'. Supported fields: {supported}") from None


@dataclass
class ProjectInfo:
    """Environment summary shown by the ``info`` command."""
    project_root: Path
    project_type: Optional[str]
    detected: str
    parser: str = "none"
    fields: Dict[Field, str] = field(default_factory=dict)
    problem: Optional[str] = None


class Operations:
    """
    Application service facade for CLI operations.

    One method per CLI verb. Exceptions bubble up for central mapping to
    exit codes; the facade itself holds no state beyond the injected context.
    """

    def __init__(self, context: CLIContext):
        self.context = context

    def labels(self, now: Optional[datetime] = None) -> ImageLabels:
        """
        Assemble all eleven labels.

        Raises:
            ManifestNotFound, UnknownEcosystem, NoParserAvailable
        """
        return assemble_labels(self.context.resolver, now=now)

    def resolve_field(self, name: str) -> str:
        """Resolve a single label field by name."""
        target = parse_field_name(name)
        if target is Field.CREATED:
            return utc_timestamp()
        if target is Field.REVISION:
            return self.context.vcs.short_revision()
        return self.context.resolver.extract(target)

    def info(self) -> ProjectInfo:
        """
        Summarize the project environment.

        Detection and parser failures are reported in the summary rather than
        raised, so that ``info`` works in any directory.
        """
        settings = self.context.settings
        info = ProjectInfo(
            project_root=settings.project_root,
            project_type=settings.project_type,
            detected="none",
        )
        try:
            ecosystem = self.context.ecosystem
            info.detected = describe(ecosystem)
            info.fields = {f: self.context.resolver.extract(f) for f in RESOLVED_FIELDS}
            info.parser = self.context.resolver.manifest.parser_name or "none"
        except LabelError as e:
            info.problem = str(e)
        return info

    def build(self, extra_tags: Sequence[str] = ()) -> List[str]:
        """
        Build a labelled image with the container tool.

        Raises:
            MissingRequiredField: If TITLE or VERSION is empty
            ContainerToolError: If the build cannot run or fails
        """
        labels = self.labels()
        settings = self.context.settings
        return self.context.container.build(
            labels,
            context_dir=settings.project_root,
            dockerfile=settings.dockerfile_path,
            extra_tags=extra_tags,
        )

    def inspect(self, image: Optional[str] = None) -> Tuple[str, Dict[str, str]]:
        """
        Read OCI labels back from a built image.

        Args:
            image: Image reference; defaults to ``<title>:<version>``
        """
        if image is None:
            resolver = self.context.resolver
            image = f"{resolver.extract(Field.TITLE)}:{resolver.extract(Field.VERSION)}"
        return image, self.context.container.inspect(image)
