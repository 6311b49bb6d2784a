"""Tests for transcoder.py - canonical serialization and fail-fast parsing."""

import json

import pytest

from levelcode.document import LevelSource, SourceKind, now_ms
from levelcode.errors import ErrorKind, LevelImportError
from levelcode.transcoder import parse, parse_tree, serialize, to_canonical


class TestSerializeRecord:
    """Test serializing editor records."""

    def test_projection(self, sample_record):
        """rows/cols map to the grid and durability becomes health."""
        tree = json.loads(serialize(sample_record))

        assert tree["id"] == "rec-7"
        assert tree["version"] == "1.0.0"
        assert tree["grid"]["width"] == 16
        assert tree["grid"]["height"] == 12
        assert tree["metadata"] == {"tags": []}
        assert "settings" not in tree
        assert "author" not in tree
        assert tree["grid"]["blocks"][1] == {
            "x": 3, "y": 2, "type": "power_up", "health": 2, "powerUp": "multiball",
        }

    def test_editor_fields_dropped(self, sample_record):
        """points, color, rotation and metadata never reach the output."""
        tree = json.loads(serialize(sample_record))
        for block in tree["grid"]["blocks"]:
            assert set(block) <= {"x", "y", "type", "health", "powerUp"}
        assert "cellSize" not in tree

    def test_lossy_projection_survives_parse(self, sample_record):
        """Parsed blocks carry only the canonical fields."""
        doc = parse(serialize(sample_record))
        for block in doc.grid.blocks:
            assert set(block.to_dict()) <= {"x", "y", "type", "health", "powerUp"}
        assert doc.grid.blocks[2].health is None

    def test_key_order(self, sample_record):
        """Top-level keys follow the canonical order."""
        tree = json.loads(serialize(sample_record))
        assert list(tree) == ["id", "name", "createdAt", "updatedAt", "version", "metadata", "grid"]

    def test_pretty_printed(self, sample_record):
        """Output is indented with two spaces."""
        text = serialize(sample_record)
        assert text.startswith('{\n  "id": "rec-7",\n  "name"')

    def test_missing_timestamps_default_to_now(self, sample_record):
        """A record without timestamps is stamped with the current time."""
        from dataclasses import replace

        before = now_ms()
        tree = to_canonical(replace(sample_record, created_at=None, updated_at=None))
        after = now_ms()

        assert before <= tree["createdAt"] <= after
        assert before <= tree["updatedAt"] <= after


class TestSerializeDocument:
    """Test serializing canonical documents."""

    def test_pass_through(self, sample_document, valid_level):
        """A document serializes field for field."""
        assert json.loads(serialize(sample_document)) == valid_level

    def test_keeps_document_version(self, sample_document):
        """A document's own format version is preserved."""
        from dataclasses import replace

        doc = replace(sample_document, format_version="1.3.0")
        assert json.loads(serialize(doc))["version"] == "1.3.0"

    def test_round_trip(self, sample_document):
        """parse(serialize(d)) == d for canonical documents."""
        assert parse(serialize(sample_document)) == sample_document

    def test_explicit_source(self, sample_record, sample_document):
        """Tagged sources serialize like their bare values."""
        assert serialize(LevelSource.record(sample_record)) == serialize(sample_record)
        assert serialize(LevelSource.document(sample_document)) == serialize(sample_document)
        assert LevelSource.of(sample_record).kind is SourceKind.RECORD

    def test_source_kind_must_match(self, sample_record):
        """A tag that does not match its value is refused."""
        with pytest.raises(TypeError):
            LevelSource(SourceKind.DOCUMENT, sample_record)

    def test_untagged_dict_refused(self, valid_level):
        """Plain dicts are not sniffed for their shape."""
        with pytest.raises(TypeError):
            serialize(valid_level)


def minimal_level(**overrides):
    level = {
        "id": "t1",
        "name": "T",
        "version": "1.0.0",
        "grid": {"width": 3, "height": 3, "blocks": [{"x": 0, "y": 0, "type": "normal"}]},
    }
    level.update(overrides)
    return level


class TestParse:
    """Test the fail-fast parser."""

    @pytest.mark.parametrize("text,message,kind", [
        ("{not json", "Invalid JSON format", ErrorKind.MALFORMED_JSON),
        ("[1, 2]", "Invalid level data structure", ErrorKind.INVALID_STRUCTURE),
        ("{}", "Missing or invalid level ID", ErrorKind.MISSING_REQUIRED_FIELD),
        (json.dumps({"id": "a"}), "Missing or invalid level name", ErrorKind.MISSING_REQUIRED_FIELD),
        (json.dumps({"id": "a", "name": ""}), "Missing or invalid level name",
         ErrorKind.MISSING_REQUIRED_FIELD),
        (json.dumps({"id": "a", "name": "b", "version": 1}), "Missing or invalid version",
         ErrorKind.MISSING_REQUIRED_FIELD),
        (json.dumps({"id": "a", "name": "b", "version": "2.1.0"}),
         "Incompatible version: 2.1.0 (expected 1.0.0)", ErrorKind.INCOMPATIBLE_VERSION),
        (json.dumps({"id": "a", "name": "b", "version": "1.0.0"}), "Missing or invalid grid data",
         ErrorKind.MISSING_REQUIRED_FIELD),
        (json.dumps(minimal_level(grid={"width": "3", "height": 3, "blocks": []})),
         "Invalid grid dimensions", ErrorKind.INVALID_GRID_DIMENSIONS),
        (json.dumps(minimal_level(grid={"width": 3, "height": 3})),
         "Invalid blocks array", ErrorKind.INVALID_BLOCKS_ARRAY),
        (json.dumps(minimal_level(grid={"width": 3, "height": 3, "blocks": [7]})),
         "Invalid block data", ErrorKind.INVALID_BLOCK_PROPERTIES),
        (json.dumps(minimal_level(grid={"width": 3, "height": 3, "blocks": [{"x": "0", "y": 0, "type": "normal"}]})),
         "Invalid block properties", ErrorKind.INVALID_BLOCK_PROPERTIES),
        (json.dumps(minimal_level(grid={"width": 3, "height": 3, "blocks": [{"x": 0, "y": 0}]})),
         "Invalid block properties", ErrorKind.INVALID_BLOCK_PROPERTIES),
    ])
    def test_errors(self, text, message, kind):
        """Each violation maps to its message and kind."""
        with pytest.raises(LevelImportError) as exc_info:
            parse(text)
        assert exc_info.value.message == message
        assert exc_info.value.kind is kind

    def test_first_violation_wins(self):
        """With several problems, the earliest check is reported."""
        text = json.dumps({"id": "a", "version": "9.0.0", "grid": "nope"})
        with pytest.raises(LevelImportError, match="level name"):
            parse(text)

    def test_minor_patch_accepted(self):
        """Only the major version is compared."""
        assert parse(json.dumps(minimal_level(version="1.9.3"))).format_version == "1.9.3"

    def test_format_version_key(self):
        """formatVersion is read when version is absent."""
        level = minimal_level()
        level["formatVersion"] = level.pop("version")
        assert parse(json.dumps(level)).format_version == "1.0.0"

    def test_defaults(self):
        """Missing optional fields receive their defaults."""
        before = now_ms()
        doc = parse(json.dumps(minimal_level(author=42)))

        assert doc.author is None
        assert doc.created_at >= before
        assert doc.updated_at >= before
        assert doc.metadata.tags == ()
        assert doc.metadata.difficulty is None
        assert doc.metadata.description is None
        assert doc.settings is None

    def test_no_sanitization_or_semantics(self):
        """Markup, duplicates and out-of-bounds blocks pass through untouched."""
        blocks = [{"x": 0, "y": 0, "type": "normal"}, {"x": 0, "y": 0, "type": "lava"},
                  {"x": 50, "y": 0, "type": "normal"}]
        text = json.dumps(minimal_level(
            name="<b>x</b>", grid={"width": 3, "height": 3, "blocks": blocks},
        ))

        doc = parse(text)

        assert doc.name == "<b>x</b>"
        assert len(doc.grid.blocks) == 3
        assert doc.grid.blocks[1].type == "lava"

    def test_accepts_bytes(self):
        """UTF-8 bytes are accepted as input."""
        assert parse(json.dumps(minimal_level()).encode("utf-8")).id == "t1"


class TestParseTree:
    """Test parse_tree, the checked but uncoerced tree."""

    def test_absent_fields_defaulted(self):
        """Absent timestamps and metadata receive defaults."""
        before = now_ms()
        tree = parse_tree(json.dumps(minimal_level()))

        assert tree["createdAt"] >= before
        assert tree["updatedAt"] == tree["createdAt"]
        assert tree["metadata"] == {"tags": []}
        assert "settings" not in tree

    def test_wrong_types_left_in_place(self):
        """Wrong-typed optional fields are kept for validation to report."""
        text = json.dumps(minimal_level(
            author=42, createdAt="yesterday", metadata={"tags": "abc"}, settings="fast",
        ))

        tree = parse_tree(text)

        assert tree["author"] == 42
        assert tree["createdAt"] == "yesterday"
        assert tree["metadata"] == {"tags": "abc"}
        assert tree["settings"] == "fast"

    def test_format_version_normalized(self):
        """formatVersion is renamed to version."""
        level = minimal_level()
        level["formatVersion"] = level.pop("version")

        tree = parse_tree(json.dumps(level))

        assert tree["version"] == "1.0.0"
        assert "formatVersion" not in tree

    def test_same_gate_as_parse(self):
        """Structural violations raise exactly as in parse."""
        with pytest.raises(LevelImportError) as exc_info:
            parse_tree(json.dumps({"id": "a"}))
        assert exc_info.value.message == "Missing or invalid level name"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
