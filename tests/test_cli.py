"""Tests for the `python -m debugdump` command line."""
import logging
from pathlib import Path

from debugdump.__main__ import main

SAMPLES = Path(__file__).resolve().parents[1] / "samples"


def test_writes_dot_file(tmp_path, capsys):
    out = tmp_path / "nested" / "render_graph.dot"

    assert main([str(SAMPLES / "core_pipeline.yaml"), "-o", str(out)]) == 0

    text = out.read_text(encoding="utf-8")
    assert text.startswith("digraph RenderGraph {\n")
    assert "3:title:e -> 4:title:w [style=dashed];" in text
    assert f"Wrote {out} (4 nodes, 4 edges)" in capsys.readouterr().out


def test_writes_to_stdout(capsys):
    assert main([str(SAMPLES / "core_pipeline.yaml")]) == 0
    out = capsys.readouterr().out
    assert out.startswith("digraph RenderGraph {\n")
    assert out.endswith("}\n")


def test_settings_and_flags(capsys):
    code = main([
        str(SAMPLES / "core_pipeline.yaml"),
        "--settings", str(SAMPLES / "settings.yaml"),
        "--no-ids",
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert 'fontname="Helvetica"' in out
    assert "00000000-0000-0000-0000-000000000001" not in out
    # sorted by type name: bevy_core_pipeline nodes come before bevy_render
    first_node = next(line for line in out.splitlines() if "[label=<" in line)
    assert first_node.strip().startswith("2 [label=<")


def test_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.yaml")]) == 2
    assert "Error: input file not found" in capsys.readouterr().err


def test_invalid_snapshot_is_logged(tmp_path, caplog):
    f = tmp_path / "bad.yaml"
    f.write_text("nodes:\n  - name: a\n")

    with caplog.at_level(logging.ERROR):
        assert main([str(f)]) == 1

    assert any("missing 'type'" in r.getMessage() for r in caplog.records)


def test_malformed_yaml_is_logged(tmp_path, caplog):
    f = tmp_path / "bad.yaml"
    f.write_text("nodes: [unclosed\n")

    with caplog.at_level(logging.ERROR):
        assert main([str(f)]) == 1

    assert any("could not dump" in r.getMessage() for r in caplog.records)


def test_non_list_nodes_exit_with_error(tmp_path, caplog):
    f = tmp_path / "bad.yaml"
    f.write_text("nodes: 5\n")

    with caplog.at_level(logging.ERROR):
        assert main([str(f)]) == 1

    assert any("nodes must be a list" in r.getMessage() for r in caplog.records)


def test_list_valued_name_exits_with_error(tmp_path, caplog):
    f = tmp_path / "bad.yaml"
    f.write_text("nodes:\n  - {name: [a], type: x::A, id: 1}\n")

    with caplog.at_level(logging.ERROR):
        assert main([str(f)]) == 1

    assert any("non-string name" in r.getMessage() for r in caplog.records)


def test_settings_directory_exits_with_error(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        code = main([str(SAMPLES / "core_pipeline.yaml"), "--settings", str(tmp_path)])
    assert code == 1
    assert any("Settings YAML not found" in r.getMessage() for r in caplog.records)


def test_input_directory_is_reported_missing(tmp_path, capsys):
    assert main([str(tmp_path)]) == 2
    assert "Error: input file not found" in capsys.readouterr().err


def test_quoted_boolean_setting_exits_with_error(tmp_path):
    f = tmp_path / "settings.yaml"
    f.write_text('show_node_id: "no"\n')
    assert main([str(SAMPLES / "core_pipeline.yaml"), "--settings", str(f)]) == 1
