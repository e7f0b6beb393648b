"""Integration tests for the CLI main() function."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest

from glossrank.cli import main, read_content


_TESTS_DIR = Path(__file__).parent
_SAMPLE = str(_TESTS_DIR / "sample_data" / "analysis_sample.json")


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _run_main(args: list[str], capsys) -> tuple[int, str, str]:
    """Run main() and return (exit_code, stdout, stderr)."""
    code = main(args)
    captured = capsys.readouterr()
    return code, captured.out, captured.err


# ---------------------------------------------------------------------------
# Basic invocations
# ---------------------------------------------------------------------------

class TestMainBasicInvocations:

    def test_main_terminal(self, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--no-color"], capsys)
        assert code == 0
        assert "我々" in out

    def test_main_verbose(self, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--no-color", "--verbose"], capsys)
        assert code == 0
        assert "Parsing input" in err
        assert "Parsed 4 words" in err

    def test_main_scores(self, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--no-color", "--scores"], capsys)
        assert code == 0
        assert "JMDict:1007120" in out

    @pytest.mark.parametrize("profile", ["default", "kana", "wanikani", "reading"])
    def test_main_profiles(self, profile, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--format", "json", "--profile", profile], capsys)
        assert code == 0
        assert json.loads(out)["metadata"]["profile"] == profile

    def test_list_profiles(self, capsys) -> None:
        code, out, err = _run_main(["--list-profiles"], capsys)
        assert code == 0
        assert "wanikani" in out
        assert "source=WaniKani (+1)" in out
        assert "&arch; (-1)" in out


# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------

class TestMainOutputFormats:

    def test_json_stdout(self, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--format", "json"], capsys)
        assert code == 0
        data = json.loads(out)
        assert [w["word"] for w in data["words"]] == ["そして", "我々", "を", "選ん"]
        assert data["words"][2]["selection"]["readings"] == ["ヲ"]

    def test_json_scores(self, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--format", "json", "--scores"], capsys)
        assert code == 0
        assert "score_breakdown" in json.loads(out)["words"][0]

    def test_markdown_to_file(self, tmp_path, capsys) -> None:
        target = tmp_path / "words.md"
        code, out, err = _run_main([_SAMPLE, "--format", "markdown", "--output", str(target)], capsys)
        assert code == 0
        assert "Report saved to" in err
        assert "| Word |" in target.read_text(encoding="utf-8")

    def test_json_to_file(self, tmp_path, capsys) -> None:
        target = tmp_path / "words.json"
        code, out, err = _run_main([_SAMPLE, "--format", "json", "-o", str(target)], capsys)
        assert code == 0
        assert json.loads(target.read_text(encoding="utf-8"))["metadata"]["total_words"] == 4


# ---------------------------------------------------------------------------
# Filter files
# ---------------------------------------------------------------------------

class TestMainFilterFile:

    def test_custom_filter(self, tmp_path, capsys) -> None:
        filter_path = tmp_path / "filter.json"
        filter_path.write_text(json.dumps({
            "tiers": [[{"predicate": "source", "value": "WaniKani", "weight": 1}]]
        }), encoding="utf-8")

        code, out, err = _run_main([_SAMPLE, "--format", "json", "--filter", str(filter_path)], capsys)
        assert code == 0
        data = json.loads(out)
        assert data["filter"]["tiers"][0][0]["value"] == "WaniKani"
        assert data["metadata"]["profile"] == "filter.json"
        # WaniKani entry for そして now wins definitions and audio
        assert [d["text"] for d in data["words"][0]["selection"]["definitions"]] == ["and then"]

    def test_missing_filter_file(self, tmp_path, capsys) -> None:
        code, out, err = _run_main([_SAMPLE, "--filter", str(tmp_path / "missing.json")], capsys)
        assert code == 1
        assert "Filter file not found" in err

    def test_invalid_filter_file(self, tmp_path, capsys) -> None:
        filter_path = tmp_path / "filter.json"
        filter_path.write_text(json.dumps({"tiers": [[{"predicate": "nope", "weight": 1}]]}), encoding="utf-8")
        code, out, err = _run_main([_SAMPLE, "--filter", str(filter_path)], capsys)
        assert code == 1
        assert "unknown predicate" in err


# ---------------------------------------------------------------------------
# Errors and stdin
# ---------------------------------------------------------------------------

class TestMainErrors:

    def test_missing_input_file(self, capsys) -> None:
        code, out, err = _run_main(["/nonexistent/analysis.json"], capsys)
        assert code == 1
        assert "Input file not found" in err

    def test_directory_input(self, tmp_path, capsys) -> None:
        code, out, err = _run_main([str(tmp_path)], capsys)
        assert code == 1
        assert "not a file" in err

    def test_not_json_input(self, tmp_path, capsys) -> None:
        path = tmp_path / "sentence.txt"
        path.write_text("そして我々を選んだのかもしれない。", encoding="utf-8")
        code, out, err = _run_main([str(path)], capsys)
        assert code == 1
        assert "Error (ValueError)" in err
        assert "--verbose" in err

    def test_stdin_dash(self, monkeypatch, capsys) -> None:
        content = Path(_SAMPLE).read_text(encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", io.StringIO(content))
        code, out, err = _run_main(["-", "--format", "json"], capsys)
        assert code == 0
        assert json.loads(out)["metadata"]["total_words"] == 4

    def test_read_content_requires_source(self, monkeypatch) -> None:
        class _Tty(io.StringIO):
            def isatty(self) -> bool:
                return True

        monkeypatch.setattr(sys, "stdin", _Tty())
        with pytest.raises(ValueError):
            read_content(None)

    def test_read_content_utf16_file(self, tmp_path) -> None:
        path = tmp_path / "analysis.json"
        path.write_text(Path(_SAMPLE).read_text(encoding="utf-8"), encoding="utf-16")
        assert "我々" in read_content(str(path))

    def test_read_content_size_limit(self, monkeypatch) -> None:
        monkeypatch.setattr("glossrank.parser.results.MAX_FILE_SIZE", 10)
        with pytest.raises(ValueError, match="limit"):
            read_content(_SAMPLE)

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "glossrank" in capsys.readouterr().out
