"""Unit tests for the DOT writer."""
import pytest

from debugdump.dot import (
    AttrList,
    AttrStmt,
    AttrType,
    Compass,
    DebugDumpError,
    DotGraph,
    EdgeStmt,
    GraphBuildError,
    Identity,
    MalformedAttributeError,
    NodeStmt,
    Port,
    font_tag,
)


class TestIdentity:
    def test_bare_id(self):
        assert str(Identity.id("plaintext")) == "plaintext"
        assert str(Identity.id("_node2")) == "_node2"

    @pytest.mark.parametrize("bad", ["", "2abc", "has space", "a-b", "quo\"te"])
    def test_bare_id_rejects_invalid(self, bad):
        with pytest.raises(MalformedAttributeError) as info:
            Identity.id(bad)
        assert info.value.text == bad

    def test_bare_id_rejects_keywords(self):
        with pytest.raises(MalformedAttributeError):
            Identity.id("digraph")
        with pytest.raises(MalformedAttributeError):
            Identity.id("Node")

    def test_number(self):
        assert str(Identity.number(0)) == "0"
        assert str(Identity.number(2 ** 128 - 1)) == str(2 ** 128 - 1)

    @pytest.mark.parametrize("bad", [-1, True, 1.5, "7"])
    def test_number_rejects_invalid(self, bad):
        with pytest.raises(MalformedAttributeError):
            Identity.number(bad)

    def test_quoted(self):
        assert str(Identity.quoted("Roboto")) == '"Roboto"'
        assert str(Identity.quoted('say "hi"')) == '"say \\"hi\\""'

    def test_quoted_rejects_trailing_backslash(self):
        with pytest.raises(MalformedAttributeError):
            Identity.quoted("C:\\")
        assert str(Identity.quoted("C:\\\\")) == '"C:\\\\"'

    def test_html(self):
        assert str(Identity.html("<B>x</B>")) == "<<B>x</B>>"

    @pytest.mark.parametrize("bad", ["<B x", "x</B>>", "><"])
    def test_html_rejects_unbalanced(self, bad):
        with pytest.raises(MalformedAttributeError):
            Identity.html(bad)

    def test_malformed_attribute_is_a_debug_dump_error(self):
        with pytest.raises(DebugDumpError):
            Identity.id("not valid")


def test_port_rendering():
    assert str(Port(Identity.number(3), Compass.E)) == ":3:e"
    assert str(Port(Identity.raw("title"), Compass.W)) == ":title:w"
    assert str(Port(compass=Compass.NE)) == ":ne"
    assert str(Port()) == ""


def test_attr_list_rendering_and_chaining():
    attrs = AttrList().add("shape", "plaintext").add("fontname", Identity.quoted("Roboto"))
    assert str(attrs) == '[shape=plaintext, fontname="Roboto"]'
    assert not AttrList()


def test_attr_list_validates_plain_strings():
    with pytest.raises(MalformedAttributeError):
        AttrList().add("style", "very dashed")


def test_statements():
    assert str(AttrStmt(AttrType.GRAPH, AttrList().add("rankdir", Identity.quoted("LR")))) == 'graph [rankdir="LR"];'
    assert str(NodeStmt(Identity.number(1))) == "1;"
    edge = EdgeStmt(
        Identity.number(1),
        Identity.number(2),
        Port(Identity.raw("title"), Compass.E),
        Port(Identity.raw("title"), Compass.W),
        AttrList().add("style", "dashed"),
    )
    assert str(edge) == "1:title:e -> 2:title:w [style=dashed];"


def test_graph_rendering():
    graph = DotGraph(Identity.id("G"))
    graph.add(NodeStmt(Identity.number(1))).add(NodeStmt(Identity.number(2)))
    graph.add(EdgeStmt(Identity.number(1), Identity.number(2)))
    assert str(graph.build()) == "digraph G {\n  1;\n  2;\n  1 -> 2;\n}\n"


def test_strict_undirected_graph():
    graph = DotGraph(Identity.id("G"), directed=False, strict=True)
    graph.extend([NodeStmt(Identity.number(1)), EdgeStmt(Identity.number(1), Identity.number(1))])
    assert str(graph.build()) == "strict graph G {\n  1;\n  1 -- 1;\n}\n"


def test_build_rejects_duplicate_nodes():
    graph = DotGraph(Identity.id("G")).extend([NodeStmt(Identity.number(7)), NodeStmt(Identity.number(7))])
    with pytest.raises(GraphBuildError) as info:
        graph.build()
    assert "duplicate" in info.value.message
    assert str(info.value).startswith("Failed to build graph: ")


def test_build_rejects_dangling_edges():
    graph = DotGraph(Identity.id("G")).extend([NodeStmt(Identity.number(1)), EdgeStmt(Identity.number(1), Identity.number(9))])
    with pytest.raises(GraphBuildError):
        graph.build()


def test_font_tag():
    assert font_tag("Root", "red", 10) == '<FONT COLOR="red" POINT-SIZE="10">Root</FONT>'
