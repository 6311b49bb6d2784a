"""Tests for sanitize.py - markup stripping."""

import pytest

from levelcode.sanitize import sanitize_level, sanitize_text


SAMPLES = [
    "Plain level name",
    "<b>Bold</b> move",
    "Hi<script>alert(1)</script>!",
    "Tom &amp; Jerry",
    "&lt;b&gt;sneaky&lt;/b&gt;",
    "&amp;lt;i&amp;gt;double&amp;lt;/i&amp;gt;",
    '<img src=x onerror="alert(1)">Pic',
    "<style>body{}</style>Styled",
    "hi <script",
    "<img src=x onerror=alert(1)",
    "",
]


class TestSanitizeText:
    """Test sanitize_text."""

    def test_plain_text_unchanged(self):
        """Text without markup passes through."""
        assert sanitize_text("Brick Breaker 2") == "Brick Breaker 2"

    def test_strips_tags_keeps_text(self):
        """Tags are removed and their text kept."""
        assert sanitize_text("<b>Hello</b> <i>world</i>") == "Hello world"

    def test_drops_script_content(self):
        """Script elements are removed together with their content."""
        assert sanitize_text("Hi<script>alert(1)</script>!") == "Hi!"

    def test_drops_attributes(self):
        """Event handler attributes disappear with the tag."""
        assert sanitize_text('<img src=x onerror="alert(1)">Pic') == "Pic"

    def test_decodes_entities(self):
        """Entities become plain characters."""
        assert sanitize_text("Tom &amp; Jerry") == "Tom & Jerry"

    def test_encoded_markup_is_stripped(self):
        """Markup hidden behind entities does not survive."""
        assert sanitize_text("&lt;b&gt;sneaky&lt;/b&gt;") == "sneaky"

    @pytest.mark.parametrize("text, kept", [
        ("<img src=x onerror=alert(1)", ""),
        ("hi <script", "hi"),
        ("<b>ok</b> <a href='x'", "ok"),
    ])
    def test_unterminated_tags_removed(self, text, kept):
        """A tag cut off at the end of the text is still removed."""
        cleaned = sanitize_text(text)
        assert "<" not in cleaned
        assert "onerror" not in cleaned
        assert cleaned.strip() == kept

    def test_lone_angle_bracket_kept(self):
        """A "<" that starts no tag is ordinary text."""
        assert sanitize_text("3 < 5") == "3 < 5"

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        """Sanitizing twice gives the same result as sanitizing once."""
        once = sanitize_text(text)
        assert sanitize_text(once) == once


class TestSanitizeLevel:
    """Test sanitize_level."""

    def test_sanitizes_free_text_fields(self, valid_level):
        """name, author, description, tags and theme are all cleaned."""
        valid_level["name"] = "<b>Boss</b> Rush"
        valid_level["author"] = "<i>ada</i>"
        valid_level["metadata"]["description"] = "<p>Hard</p>"
        valid_level["metadata"]["tags"] = ["<u>fast</u>", 7]
        valid_level["settings"]["theme"] = "<script>x</script>neon"

        cleaned = sanitize_level(valid_level)

        assert cleaned["name"] == "Boss Rush"
        assert cleaned["author"] == "ada"
        assert cleaned["metadata"]["description"] == "Hard"
        assert cleaned["metadata"]["tags"] == ["fast", 7]
        assert cleaned["settings"]["theme"] == "neon"

    def test_input_not_mutated(self, valid_level):
        """The raw tree is left untouched."""
        valid_level["metadata"]["tags"] = ["<u>fast</u>"]
        sanitize_level(valid_level)
        assert valid_level["metadata"]["tags"] == ["<u>fast</u>"]

    def test_non_mapping_returned_as_is(self):
        """Non-object input is returned unchanged."""
        assert sanitize_level([1, 2]) == [1, 2]
        assert sanitize_level(None) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
