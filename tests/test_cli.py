# tests/test_cli.py
"""
Tests for the `grammar-lens` command line (:mod:`nlg.cli_frontend`).
"""

from __future__ import annotations

import json

import pytest

from nlg.cli_frontend import main
from tests.builders import clause, noun, pron, sentence


def _workspace(path, *sentences) -> str:
    path.write_text(json.dumps({"sentences": [s.model_dump(mode="json") for s in sentences]}), encoding="utf-8")
    return str(path)


def test_render_json_workspace(tmp_path, capsys) -> None:
    src = _workspace(
        tmp_path / "ws.json",
        sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past")),
        sentence(clause("walk", agent=pron("she"))),
    )

    with pytest.raises(SystemExit) as info:
        main(["render", "--input", src])

    assert info.value.code == 0
    assert capsys.readouterr().out.splitlines() == ["He ate an apple.", "She walks."]


def test_render_notation_with_log(tmp_path, capsys) -> None:
    src = tmp_path / "ws.txt"
    src.write_text("# comment\nsentence(past+simple(eat(agent:'he)))\n\n", encoding="utf-8")

    with pytest.raises(SystemExit):
        main(["render", "--notation", "--log", "-i", str(src)])

    captured = capsys.readouterr()
    assert captured.out.strip() == "He ate."
    assert '"to": "ate"' in captured.err


def test_notation_command(tmp_path, capsys) -> None:
    src = _workspace(tmp_path / "ws.json", sentence(clause("walk", agent=pron("he"), tense="past")))

    with pytest.raises(SystemExit):
        main(["notation", "-i", src])

    assert capsys.readouterr().out.strip() == "sentence(past+simple(walk(agent:'he)))"


def test_bad_notation_exits_with_the_line_number(tmp_path) -> None:
    src = tmp_path / "ws.txt"
    src.write_text("sentence(past+simple(eat(agent:'he)))\nsentence(\n", encoding="utf-8")

    with pytest.raises(SystemExit) as info:
        main(["render", "--notation", "-i", str(src)])

    assert "line 2" in str(info.value.code)


def test_bad_json_exits(tmp_path) -> None:
    src = tmp_path / "ws.json"
    src.write_text("{ nope", encoding="utf-8")

    with pytest.raises(SystemExit) as info:
        main(["render", "-i", str(src)])

    assert "invalid JSON" in str(info.value.code)


def test_render_with_the_japanese_target(tmp_path, capsys) -> None:
    src = _workspace(tmp_path / "ws.json", sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past")))

    with pytest.raises(SystemExit):
        main(["render", "--target", "ja", "-i", src])

    assert capsys.readouterr().out.strip() == "heは an appleを eat。"
