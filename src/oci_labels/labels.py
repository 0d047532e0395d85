"""
Label assembly.

Resolves every manifest-backed field and adds the computed CREATED and
REVISION values. Assembly is a pure projection: it reads the manifest and
queries version control, nothing else.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .models import ImageLabels
from .resolver import FieldResolver

__all__ = ["assemble_labels", "utc_timestamp"]


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Format a time as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def assemble_labels(resolver: FieldResolver, now: Optional[datetime] = None) -> ImageLabels:
    """
    Assemble the full label set for a project.

    Args:
        resolver: Field resolver bound to the project's ecosystem and manifest
        now: Timestamp override for CREATED (defaults to the current time)

    Returns:
        ImageLabels with all eleven values

    Raises:
        NoParserAvailable: If the manifest needs a parser and none is available
    """
    values = {field.value.lower(): value for field, value in resolver.extract_all().items()}
    return ImageLabels(
        **values,
        created=utc_timestamp(now),
        revision=resolver.vcs.short_revision(),
    )
