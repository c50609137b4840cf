"""Tests for HTML label escaping."""
from debugdump.escape import escape_html


def test_escape_all_special_characters():
    assert escape_html('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"


def test_ampersand_escaped_first():
    # '<' becomes '&lt;', whose '&' must not be escaped again
    assert escape_html("<") == "&lt;"
    assert escape_html("&<") == "&amp;&lt;"


def test_plain_text_returned_unchanged():
    text = "main_pass_3d"
    assert escape_html(text) is text


def test_empty_string():
    assert escape_html("") == ""


def test_non_string_input_is_rendered():
    assert escape_html(42) == "42"


def test_escaping_is_not_idempotent_on_entities():
    once = escape_html("A & B")
    assert once == "A &amp; B"
    assert escape_html(once) == "A &amp;amp; B"


def test_escaping_is_idempotent_without_special_characters():
    assert escape_html(escape_html("view: Entity")) == "view: Entity"
