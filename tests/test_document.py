# ==============================================
# Tests for the Properties Document Model
# ==============================================

import pytest

from sconfig.properties.document import (
    Document,
    PropertiesParseError,
    comment_lines,
    parse_values,
    render_key,
    render_value,
)


SAMPLE = (
    "# Server properties\n"
    "\n"
    "debug: false\n"
    "#enable logs\n"
    "port: 8080\n"
    "\n"
    "motd: Welcome # inline\n"
    "worlds:\n"
    "  - overworld\n"
    "  - nether\n"
    "# listed worlds\n"
)


class TestParseRender:
    """Parsing a document and rendering it back."""

    @pytest.mark.parametrize("text", [
        SAMPLE,
        "debug: false\n#enable logs\nport: 8080",
        "",
        "\n",
        "a: 1\r\nb: 2\r\n",
        "# only a comment\n",
    ])
    def test_render_is_identity(self, text):
        """Unmodified documents render byte-for-byte."""
        assert Document.parse(text).render() == text

    def test_keys_in_order(self):
        doc = Document.parse(SAMPLE)
        assert doc.keys() == ["debug", "port", "motd", "worlds"]

    def test_preamble_before_first_key(self):
        doc = Document.parse(SAMPLE)
        assert doc.preamble == ["# Server properties", ""]

    def test_comment_attached_to_key_above(self):
        doc = Document.parse(SAMPLE)
        assert doc.comments() == {"debug": "#enable logs"}
        assert doc.find("worlds").comment is None

    def test_url_value_is_not_a_key(self):
        doc = Document.parse("url: http://localhost:8080\n")
        assert doc.keys() == ["url"]
        assert doc.find("url").rest == " http://localhost:8080"


class TestSet:
    """Replacing a key's value in place."""

    def test_set_replaces_line(self):
        doc = Document.parse("debug: false\n#enable logs\nport: 8080")
        assert doc.set("port", "9090")
        assert doc.render() == "debug: false\n#enable logs\nport: 9090"

    def test_set_keeps_comment_below_key(self):
        doc = Document.parse("debug: false\n#enable logs\nport: 8080\n")
        doc.set("debug", "true")
        assert doc.render() == "debug: true\n#enable logs\nport: 8080\n"

    def test_set_drops_old_block_value(self):
        doc = Document.parse(SAMPLE)
        doc.set("worlds", "[end]")
        assert doc.render().endswith("worlds: [end]\n# listed worlds\n")
        assert parse_values(doc.render())["worlds"] == ["end"]

    def test_set_missing_key_returns_false(self):
        doc = Document.parse("a: 1\n")
        assert not doc.set("b", "2")
        assert doc.render() == "a: 1\n"

    def test_set_updates_duplicates(self):
        doc = Document.parse("a: 1\na: 2\n")
        doc.set("a", "3")
        assert doc.render() == "a: 3\na: 3\n"


class TestAppend:
    """Appending new keys at the end."""

    def test_append_after_trailing_newline_adds_blank_line(self):
        doc = Document.parse("a: 1\n")
        doc.append("b", "2", ["# second"])
        assert doc.render() == "a: 1\n\nb: 2\n# second\n"

    def test_append_without_trailing_newline(self):
        doc = Document.parse("a: 1")
        doc.append("b", "2")
        assert doc.render() == "a: 1\nb: 2\n"

    def test_append_to_empty_document(self):
        doc = Document.parse("")
        doc.append("a", "1")
        assert doc.render() == "a: 1\n"


class TestValues:
    """YAML parsing and value rendering."""

    def test_parse_values(self):
        assert parse_values(SAMPLE) == {
            "debug": False,
            "port": 8080,
            "motd": "Welcome",
            "worlds": ["overworld", "nether"],
        }

    @pytest.mark.parametrize("text", ["a: [1", "- a\n- b\n", "", "just text"])
    def test_parse_values_rejects_non_mappings(self, text):
        with pytest.raises(PropertiesParseError):
            parse_values(text)

    @pytest.mark.parametrize("value, expected", [
        (True, "true"),
        (8080, "8080"),
        ("8080", "'8080'"),
        (None, "null"),
        ([1, 2], "[1, 2]"),
        ({"a": 1}, "{a: 1}"),
        ("hello", "hello"),
    ])
    def test_render_value(self, value, expected):
        assert render_value(value) == expected

    @pytest.mark.parametrize("value", ["a: b", "x # y", "line one\nline two", ""])
    def test_rendered_strings_parse_back(self, value):
        text = f"key: {render_value(value)}"
        assert "\n" not in text
        assert parse_values(text)["key"] == value

    def test_comment_lines(self):
        assert comment_lines(None) == []
        assert comment_lines("Enable logs") == ["# Enable logs"]
        assert comment_lines("#enable logs") == ["#enable logs"]


class TestKeys:
    """Quoted keys in the file and quoting of keys that need it."""

    def test_quoted_keys_are_entries(self):
        doc = Document.parse("\"a b\": 1\n# spaced\n'#tag': 2\n")
        assert doc.keys() == ["a b", "#tag"]
        assert doc.comments() == {"a b": "# spaced"}

    def test_set_keeps_quoted_spelling(self):
        doc = Document.parse("'a: b': 1\n")
        assert doc.set("a: b", "2")
        assert doc.render() == "'a: b': 2\n"

    def test_plain_key_read_as_yaml_scalar(self):
        doc = Document.parse("1: one\nnull: nothing\n")
        assert doc.keys() == [1, None]

    @pytest.mark.parametrize("key, expected", [
        ("debug", "debug"),
        ("#tag", "'#tag'"),
        ("a: b", "'a: b'"),
        ("-x", '"-x"'),
        (1, "1"),
    ])
    def test_render_key(self, key, expected):
        assert render_key(key) == expected

    @pytest.mark.parametrize("key", ["#tag", "a: b", "-x", "x # y", "line\nbreak", "", "8080"])
    def test_appended_keys_parse_back(self, key):
        doc = Document.parse("a: 1\n")
        doc.append(key, "2")
        assert parse_values(doc.render()) == {"a": 1, key: 2}
        assert Document.parse(doc.render()).keys() == ["a", key]

    def test_unhashable_key_rejected(self):
        doc = Document.parse("a: 1\n")
        with pytest.raises(ValueError):
            doc.append(("x", ["y"]), "2")
        assert doc.render() == "a: 1\n"
