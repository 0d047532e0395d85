"""
Tests for ecosystem detection and field path tables.
"""
from __future__ import annotations

import pytest

from oci_labels.ecosystems import (
    FIELD_PATHS,
    RESOLVED_FIELDS,
    Direct,
    Ecosystem,
    Fallback,
    Field,
    Handler,
    Special,
    detect,
    field_spec,
    parse_path_spec,
    select_ecosystem,
)
from oci_labels.errors import ManifestNotFound, UnknownEcosystem


class TestDetect:
    """Test marker-file based detection."""

    @pytest.mark.parametrize("marker,expected", [
        ("package.json", Ecosystem.NODE),
        ("pyproject.toml", Ecosystem.PYTHON),
        ("Cargo.toml", Ecosystem.RUST),
        ("composer.json", Ecosystem.PHP),
        ("go.mod", Ecosystem.GO),
    ])
    def test_single_marker(self, tmp_path, marker, expected):
        """Test each marker file maps to its ecosystem."""
        (tmp_path / marker).write_text("")
        assert detect(tmp_path) is expected

    def test_node_wins_over_rust(self, tmp_path):
        """Test detection order: package.json beats Cargo.toml."""
        (tmp_path / "Cargo.toml").write_text("")
        (tmp_path / "package.json").write_text("{}")
        assert detect(tmp_path) is Ecosystem.NODE

    def test_python_wins_over_go(self, tmp_path):
        """Test detection order: pyproject.toml beats go.mod."""
        (tmp_path / "go.mod").write_text("module x\n")
        (tmp_path / "pyproject.toml").write_text("")
        assert detect(tmp_path) is Ecosystem.PYTHON

    def test_directory_named_like_marker_ignored(self, tmp_path):
        """Test that a directory named package.json is not a marker."""
        (tmp_path / "package.json").mkdir()
        (tmp_path / "go.mod").write_text("module x\n")
        assert detect(tmp_path) is Ecosystem.GO

    def test_no_marker_raises(self, tmp_path):
        """Test that an empty project raises ManifestNotFound listing searched files."""
        with pytest.raises(ManifestNotFound) as exc_info:
            detect(tmp_path)

        message = str(exc_info.value)
        for marker in ("package.json", "pyproject.toml", "Cargo.toml", "composer.json", "go.mod"):
            assert marker in message
        assert "--project-type" in message
        assert exc_info.value.project_root == str(tmp_path)


class TestSelectEcosystem:
    """Test explicit override handling."""

    def test_override_bypasses_detection(self, tmp_path):
        """Test override is used even when another marker exists."""
        (tmp_path / "package.json").write_text("{}")
        assert select_ecosystem(tmp_path, "rust") is Ecosystem.RUST

    def test_override_without_any_marker(self, tmp_path):
        """Test override does not require a marker to exist."""
        assert select_ecosystem(tmp_path, "go") is Ecosystem.GO

    def test_override_case_insensitive(self, tmp_path):
        assert select_ecosystem(tmp_path, " Python ") is Ecosystem.PYTHON

    def test_unknown_override_raises(self, tmp_path):
        """Test unknown override lists supported values."""
        with pytest.raises(UnknownEcosystem, match="Unknown project type 'ruby'") as exc_info:
            select_ecosystem(tmp_path, "ruby")
        assert exc_info.value.supported == ["node", "python", "rust", "php", "go"]

    def test_no_override_detects(self, tmp_path):
        (tmp_path / "composer.json").write_text("{}")
        assert select_ecosystem(tmp_path, None) is Ecosystem.PHP


class TestEcosystemAttributes:
    """Test static ecosystem attributes."""

    def test_parser_families(self):
        assert Ecosystem.NODE.parser_family == "json"
        assert Ecosystem.PHP.parser_family == "json"
        assert Ecosystem.PYTHON.parser_family == "toml"
        assert Ecosystem.RUST.parser_family == "toml"
        assert Ecosystem.GO.parser_family == "toml"

    def test_detection_order(self):
        assert [e.value for e in Ecosystem] == ["node", "python", "rust", "php", "go"]


class TestPathSpecs:
    """Test path spec parsing and the field tables."""

    def test_parse_direct(self):
        assert parse_path_spec("package.name") == Direct("package.name")

    def test_parse_special(self):
        assert parse_path_spec("SPECIAL:go_extract_name") == Special(Handler.GO_EXTRACT_NAME)

    def test_parse_fallback(self):
        spec = parse_path_spec("project.urls.documentation|SPECIAL:extract_documentation_from_repo")
        assert spec == Fallback((
            Direct("project.urls.documentation"),
            Special(Handler.EXTRACT_DOCUMENTATION_FROM_REPO),
        ))

    def test_parse_empty_is_unsupported(self):
        assert parse_path_spec("") is None

    def test_unknown_handler_raises(self):
        with pytest.raises(ValueError):
            parse_path_spec("SPECIAL:does_not_exist")

    def test_empty_candidate_raises(self):
        with pytest.raises(ValueError, match="empty candidate"):
            parse_path_spec("a||b")

    def test_every_table_covers_all_resolved_fields(self):
        """Test each ecosystem maps exactly the nine manifest-backed fields."""
        for ecosystem in Ecosystem:
            assert set(FIELD_PATHS[ecosystem]) == set(RESOLVED_FIELDS)

    def test_resolved_fields_order(self):
        assert [f.value for f in RESOLVED_FIELDS] == [
            "TITLE", "DESCRIPTION", "VERSION", "AUTHORS", "VENDOR",
            "LICENSES", "URL", "DOCUMENTATION", "SOURCE",
        ]

    def test_go_unsupported_fields(self):
        """Test Go leaves description, authors, vendor and licenses unsupported."""
        for field in (Field.DESCRIPTION, Field.AUTHORS, Field.VENDOR, Field.LICENSES):
            assert field_spec(Ecosystem.GO, field) is None

    def test_python_authors_fallback(self):
        assert field_spec(Ecosystem.PYTHON, Field.AUTHORS) == Fallback((
            Direct("project.authors[0].name"),
            Direct("project.authors[0]"),
        ))

    def test_computed_fields_have_no_spec(self):
        assert field_spec(Ecosystem.NODE, Field.CREATED) is None
        assert field_spec(Ecosystem.NODE, Field.REVISION) is None
