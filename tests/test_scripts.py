import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "validate_model.py"


@pytest.fixture
def run(monkeypatch, tmp_path):
    spec = importlib.util.spec_from_file_location("validate_model", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)

    def _run(text):
        path = tmp_path / "model.json"
        path.write_text(text, encoding="utf-8")
        monkeypatch.setattr("sys.argv", ["validate_model.py", str(path)])
        return mod.main()
    return _run


def test_clean_model_exits_0(run, capsys):
    body = {"nodes": [{"id": "A"}, {"id": "B"}], "edges": [{"src": "A", "dst": "B", "type": "AND"}]}
    assert run(json.dumps(body)) == 0
    assert "OK" in capsys.readouterr().out


def test_cycle_exits_1(run, capsys):
    body = {"nodes": [{"id": "A"}], "edges": [{"src": "A", "dst": "A"}]}
    assert run(json.dumps(body)) == 1
    assert "#0: A" in capsys.readouterr().out


def test_schema_error_exits_2(run):
    assert run(json.dumps({"nodes": 5})) == 2


def test_diagram_element_without_id_exits_2(run, capsys):
    body = {"elements": [{"type": "basic.Goal"}], "links": []}
    assert run(json.dumps(body)) == 2
    assert capsys.readouterr().err.startswith("[x]")


def test_dangling_link_exits_2(run, capsys):
    body = {"elements": [{"elementid": "0"}], "links": [{"linkSrcID": "0", "linkDestID": "9", "linkType": "AND"}]}
    assert run(json.dumps(body)) == 2
    assert "unknown node" in capsys.readouterr().err


def test_invalid_json_exits_2(run, capsys):
    assert run("{not json") == 2
    assert capsys.readouterr().err.startswith("[x]")
