"""Root pytest configuration for oci-labels tests."""
import pytest

from oci_labels.ecosystems import Ecosystem
from oci_labels.parsers import ManifestSource
from oci_labels.resolver import FieldResolver
from oci_labels.settings import Settings

from .fakes.fake_vcs import FakeVcs
from .helpers.manifests import MANIFESTS, write_manifest

# Builtin parsers only, so tests never depend on jq/tomlq/node being installed
BUILTIN_ONLY = {"json": ("builtin",), "toml": ("builtin",)}


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Automatically clear environment variables that affect settings."""
    for key in (
        "OCI_LABELS_PROJECT_ROOT",
        "OCI_LABELS_PROJECT_TYPE",
        "PROJECT_TYPE",
        "OCI_LABELS_JSON_PARSERS",
        "OCI_LABELS_TOML_PARSERS",
        "OCI_LABELS_CONTAINER_TOOL",
        "OCI_LABELS_DOCKERFILE",
        "OCI_LABELS_DEBUG",
        "DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings(tmp_path):
    """Standard test settings rooted at an empty temporary project."""
    return Settings(
        project_root=tmp_path,
        json_parsers=("builtin",),
        toml_parsers=("builtin",),
    )


@pytest.fixture
def vcs():
    """Standard fake version control with a tag and a revision."""
    return FakeVcs(tag="v1.2.3", revision="abc1234")


@pytest.fixture
def project(tmp_path):
    """Factory writing the standard manifest for an ecosystem into tmp_path."""
    def _project(ecosystem: str, content=None):
        filename, default = MANIFESTS[ecosystem]
        write_manifest(tmp_path, filename, default if content is None else content)
        return tmp_path
    return _project


@pytest.fixture
def make_resolver(tmp_path, project, vcs):
    """Factory building a FieldResolver over a freshly written manifest."""
    def _make(ecosystem: str, content=None, fake_vcs=None):
        root = project(ecosystem, content)
        eco = Ecosystem(ecosystem)
        manifest = ManifestSource(root, eco, BUILTIN_ONLY)
        return FieldResolver(eco, manifest, fake_vcs or vcs)
    return _make
