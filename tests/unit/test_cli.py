"""
Unit tests for the ergo-kb command line.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from ergo_kb_cli.__main__ import build_parser, main
from ergo_kb_core import __version__
from ergo_kb_core.knowledge_base import SECTION_IDS, bundled_path
from ergo_kb_core.logging_service import LoggingService


@pytest.fixture
def abc_file(tmp_path: Path) -> Path:
    path = tmp_path / "abc.json"
    path.write_text(
        json.dumps(
            [
                {"id": "a", "title": "A", "tags": ["x"], "text": "alpha"},
                {"id": "b", "title": "B", "tags": ["x", "y"], "text": "beta"},
                {"id": "c", "title": "C", "tags": ["z"], "text": "gamma"},
            ]
        ),
        encoding="utf-8",
    )
    return path


class TestParser:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: ergo-kb" in capsys.readouterr().out

    def test_invalid_log_level_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "loud", "list"])

        assert exc_info.value.code == 2
        captured = capsys.readouterr()
        assert "invalid choice" in captured.err
        assert captured.out == ""

    def test_log_level_is_case_insensitive(self, capsys):
        assert main(["--log-level", "debug", "list"]) == 0

        assert capsys.readouterr().out.startswith("core_references\t")
        assert LoggingService._log_level == "DEBUG"

    def test_strict_defaults_to_none(self):
        args = build_parser().parse_args(["check-parity"])

        assert args.strict is None
        assert args.directory is None


class TestQueries:
    def test_list_bundled(self, capsys):
        assert main(["list"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert [line.split("\t")[0] for line in lines] == list(SECTION_IDS)

    def test_get(self, capsys, abc_file):
        assert main(["get", "b", "--source", str(abc_file)]) == 0

        assert capsys.readouterr().out == "# B\nid: b\ntags: x, y\n\nbeta\n"

    def test_get_unknown_id(self, capsys, abc_file):
        assert main(["get", "zzz", "--source", str(abc_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: No chunk with id 'zzz'" in captured.err

    def test_filter(self, capsys, abc_file):
        assert main(["filter", "x", "--source", str(abc_file)]) == 0

        assert capsys.readouterr().out == "a\tA\nb\tB\n"

    def test_filter_bundled_security(self, capsys):
        assert main(["filter", "security"]) == 0

        ids = [line.split("\t")[0] for line in capsys.readouterr().out.splitlines()]
        assert ids == ["known_issues", "secure_patterns_index", "audit_examples"]

    def test_unsupported_source(self, capsys, tmp_path):
        source = tmp_path / "kb.docx"
        source.write_text("", encoding="utf-8")

        assert main(["list", "--source", str(source)]) == 1
        assert "Unsupported knowledge-base format" in capsys.readouterr().err


class TestCheckParity:
    def test_bundled_corpus_ok(self, capsys):
        assert main(["check-parity", "--strict"]) == 0

        assert capsys.readouterr().out.startswith("OK: 7 source(s) agree with knowledge_base.json")

    def test_mismatch_exits_nonzero(self, capsys, tmp_path, abc_file):
        (tmp_path / "partial.yaml").write_text(
            "a: {title: A, tags: [x], text: alpha}\n", encoding="utf-8"
        )

        assert main(["check-parity", str(tmp_path), "--reference", "abc.json"]) == 1

        out = capsys.readouterr().out
        assert "[missing] partial.yaml:b" in out
        assert "[missing] partial.yaml:c" in out


class TestExport:
    def test_export_json(self, capsys, abc_file):
        assert main(["export", "--source", str(abc_file)]) == 0

        assert json.loads(capsys.readouterr().out)["c"]["tags"] == ["z"]

    def test_export_yaml(self, capsys):
        assert main(["export", "--format", "yaml", "--source", str(bundled_path("toml"))]) == 0

        assert list(yaml.safe_load(capsys.readouterr().out)) == list(SECTION_IDS)

    def test_export_rag(self, capsys, abc_file):
        assert main(["export", "--format", "rag", "--source", str(abc_file)]) == 0

        records = json.loads(capsys.readouterr().out)["chunks"]
        assert [record["id"] for record in records] == ["a", "b", "c"]
