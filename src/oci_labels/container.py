"""
Container tool integration for building and inspecting labelled images.

Drives ``podman`` (or a compatible CLI such as ``docker``) with the assembled
labels passed as a build argument file.
"""
from __future__ import annotations

import json
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .ecosystems import Field
from .errors import ContainerToolError, ImageNotFound, MissingRequiredField
from .models import OCI_LABEL_PREFIX, ImageLabels

__all__ = ["ContainerTool", "image_tags"]

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def image_tags(labels: ImageLabels) -> List[str]:
    """
    Image tags for a build: ``name:version`` and ``name:latest``.

    Raises:
        MissingRequiredField: If TITLE or VERSION is empty
    """
    for field in (Field.TITLE, Field.VERSION):
        if not labels.get(field):
            raise MissingRequiredField(field.value)
    return [f"{labels.title}:{labels.version}", f"{labels.title}:latest"]


class ContainerTool:
    """Thin wrapper around a container CLI."""

    def __init__(self, executable: str = "podman", runner: Optional[Runner] = None) -> None:
        self.executable = executable
        self._runner = runner or subprocess.run

    def _require_executable(self) -> None:
        if shutil.which(self.executable) is None:
            raise ContainerToolError(f"Container tool not found in PATH: {self.executable}")

    def build(self, labels: ImageLabels, context_dir: Path, dockerfile: Path,
              extra_tags: Sequence[str] = ()) -> List[str]:
        """
        Build an image labelled with ``labels``.

        Args:
            labels: Assembled labels, passed as build arguments
            context_dir: Build context directory
            dockerfile: Dockerfile to build
            extra_tags: Additional tags to apply

        Returns:
            All tags applied to the image

        Raises:
            MissingRequiredField: If TITLE or VERSION is empty
            ContainerToolError: If the Dockerfile or tool is missing, or the build fails
        """
        tags = image_tags(labels) + list(extra_tags)

        dockerfile = Path(dockerfile)
        if not dockerfile.is_file():
            raise ContainerToolError(f"Dockerfile not found: {dockerfile}")
        self._require_executable()

        with tempfile.TemporaryDirectory(prefix="oci-labels-") as tmp:
            arg_file = Path(tmp) / "labels.args"
            arg_file.write_text("\n".join(labels.build_args()) + "\n", encoding="utf-8")

            argv = [self.executable, "build", "--squash", "--build-arg-file", str(arg_file)]
            for tag in tags:
                argv += ["-t", tag]
            argv += ["-f", str(dockerfile), str(context_dir)]

            logger.debug(f"Running {' '.join(argv)}")
            result = self._runner(argv, check=False)
            if result.returncode != 0:
                raise ContainerToolError(f"Build failed with exit code {result.returncode}")

        return tags

    def inspect(self, image: str) -> Dict[str, str]:
        """
        Return the OCI labels of a built image, sorted by key.

        Raises:
            ContainerToolError: If the tool is missing or prints invalid output
            ImageNotFound: If the tool cannot find the image
        """
        self._require_executable()
        result = self._runner(
            [self.executable, "inspect", image], capture_output=True, text=True, check=False
        )
        if result.returncode != 0:
            raise ImageNotFound(image)

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ContainerToolError(f"Invalid inspect output for {image}: {e}") from e
        if not data:
            raise ImageNotFound(image)

        labels = (data[0].get("Config") or {}).get("Labels") or {}
        return {
            key: labels[key]
            for key in sorted(labels)
            if key.startswith(OCI_LABEL_PREFIX)
        }
