"""Tests for the command-line interface."""

import json
from unittest.mock import Mock

import pytest
from typer.testing import CliRunner

from concept_graph.cli import app

runner = CliRunner()


@pytest.fixture
def notes(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("Neural networks and deep learning. Neural networks and big data.", encoding="utf-8")
    return path


class TestExtract:

    def test_keywords_to_file(self, notes, tmp_path):
        out = tmp_path / "out" / "graph.json"
        result = runner.invoke(app, ["extract", "--engine", "keywords", "--input", str(notes), "--output", str(out)])

        assert result.exit_code == 0, result.output
        graph = json.loads(out.read_text(encoding="utf-8"))
        assert graph["kind"] == "graph"
        assert graph["nodes"][0]["id"] == "kw-0"
        assert "Extraction Summary" in result.output

    def test_inline_text_to_stdout(self):
        result = runner.invoke(app, ["extract", "-e", "keywords", "-t", "Criminal minds study aberrant behavior."])
        assert result.exit_code == 0, result.output
        assert '"label": "Criminal Minds Study Aberrant Behavior"' in result.output

    def test_unknown_engine_exits_with_error(self):
        result = runner.invoke(app, ["extract", "--engine", "bogus", "--text", "hello there"])
        assert result.exit_code == 1
        assert "Unknown extraction engine" in result.output

    def test_text_is_required(self):
        result = runner.invoke(app, ["extract", "--engine", "keywords"])
        assert result.exit_code != 0

    def test_llm_engine_uses_cli_endpoint(self, monkeypatch, valid_graph_dict, tmp_path):
        response = Mock(ok=True, status_code=200, text="")
        response.json = Mock(return_value={"choices": [{"message": {"content": json.dumps(valid_graph_dict)}}]})
        post = Mock(return_value=response)
        monkeypatch.setattr("concept_graph.llm_client.requests.post", post)

        out = tmp_path / "llm.json"
        result = runner.invoke(app, [
            "extract", "-e", "llm", "-t", "Water evaporates.", "-v", "storyboard",
            "--endpoint", "http://box:1234/v1", "--model", "tiny", "-o", str(out),
        ])

        assert result.exit_code == 0, result.output
        assert post.call_args.args[0] == "http://box:1234/v1/chat/completions"
        assert post.call_args.kwargs["json"]["model"] == "tiny"
        assert json.loads(out.read_text(encoding="utf-8"))["title"] == "Water cycle"

    def test_llm_failure_exits_with_error(self, monkeypatch):
        monkeypatch.setattr(
            "concept_graph.llm_client.requests.post",
            Mock(return_value=Mock(ok=False, status_code=500, text="boom")),
        )
        result = runner.invoke(app, ["extract", "-e", "llm", "-t", "Water evaporates."])
        assert result.exit_code == 1
        assert "500" in result.output


class TestValidate:

    def test_valid_response(self, tmp_path, valid_graph_dict):
        path = tmp_path / "reply.txt"
        path.write_text(f"```json\n{json.dumps(valid_graph_dict)}\n```", encoding="utf-8")
        result = runner.invoke(app, ["validate", "--input", str(path)])
        assert result.exit_code == 0, result.output
        assert "Valid" in result.output

    def test_invalid_response(self, tmp_path):
        path = tmp_path / "reply.txt"
        path.write_text('{"kind": "graph"}', encoding="utf-8")
        result = runner.invoke(app, ["validate", "-i", str(path)])
        assert result.exit_code == 1
        assert "Missing or invalid title" in result.output


def test_prompt_command():
    result = runner.invoke(app, ["prompt", "--variant", "logical-flow"])
    assert result.exit_code == 0
    assert "logicalRole" in result.output


def test_analyze_command():
    result = runner.invoke(app, ["analyze", "--text", "First mix. Then bake. Finally serve."])
    assert result.exit_code == 0, result.output
    assert "Recommended: flowchart (1.00)" in result.output


def test_list_engines():
    result = runner.invoke(app, ["list", "engines"])
    assert result.exit_code == 0
    for engine_id in ("keywords", "nlp", "semantic", "llm"):
        assert engine_id in result.output
