"""
Data models for assembled image labels.

The Pydantic model keeps the eleven label values in their declared order and
renders them as container build arguments or as OCI annotation keys.
"""
from __future__ import annotations

import re
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ecosystems import Field as LabelField

OCI_LABEL_PREFIX = "org.opencontainers.image."

_CREATED_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


def _one_line(value: str) -> str:
    return value.replace("\r", "\\r").replace("\n", "\\n")


class ImageLabels(BaseModel):
    """OCI image label values; empty strings for fields that did not resolve."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Project name")
    description: str = Field(default="", description="Short project description")
    version: str = Field(default="", description="Project version")
    authors: str = Field(default="", description="Primary author")
    vendor: str = Field(default="", description="Vendor, taken from the primary author")
    licenses: str = Field(default="", description="License expression")
    url: str = Field(default="", description="Project homepage")
    documentation: str = Field(default="", description="Documentation URL")
    source: str = Field(default="", description="Source repository URL")
    created: str = Field(..., description="Build timestamp, UTC YYYY-MM-DDTHH:MM:SSZ")
    revision: str = Field(default="", description="Short VCS commit hash")

    @field_validator("created")
    @classmethod
    def _check_created(cls, v: str) -> str:
        if not _CREATED_RE.match(v):
            raise ValueError(f"created must be YYYY-MM-DDTHH:MM:SSZ, got {v!r}")
        return v

    def get(self, field: LabelField) -> str:
        """
        Look up a label value by field.

        Args:
            field: Any of the eleven label fields, including CREATED and REVISION

        Returns:
            The value, empty when the field did not resolve
        """
        return getattr(self, field.value.lower())

    def items(self) -> List[Tuple[LabelField, str]]:
        """
        Label values paired with their fields.

        Returns:
            One (field, value) pair per label, in declared order
        """
        return [(field, self.get(field)) for field in LabelField]

    def build_args(self) -> List[str]:
        """
        Render ``KEY=value`` lines for a container build argument file.

        Always returns exactly one line per label, in declared order,
        regardless of how many values are empty. Line breaks inside a value
        are written as ``\\n`` and ``\\r`` escapes.
        """
        return [f"{field.value}={_one_line(value)}" for field, value in self.items()]

    def oci_labels(self) -> Dict[str, str]:
        """Map values to ``org.opencontainers.image.*`` label keys."""
        return {f"{OCI_LABEL_PREFIX}{field.value.lower()}": value for field, value in self.items()}
