# tests/unit/test_main.py — v1
"""Tests for main.py: CLI entry point."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from infergate.gateway.models import InvocationResult
from infergate.main import _build_parser, _build_payload, _write_output, main


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self):
        parser = _build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_invoke_with_prompt(self):
        args = _build_parser().parse_args(["invoke", "sdxl", "--prompt", "a cat", "-o", "cat.png"])
        assert args.command == "invoke"
        assert args.model_key == "sdxl"
        assert args.prompt == "a cat"
        assert args.output == Path("cat.png")
        assert args.category is None
        assert args.no_fallback is False

    def test_invoke_requires_input(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["invoke", "sdxl"])

    def test_prompt_and_payload_exclusive(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["invoke", "sdxl", "--prompt", "a", "--payload", "{}"])

    def test_policies_subcommand(self):
        args = _build_parser().parse_args(["policies"])
        assert args.command == "policies"

    def test_wait_subcommand(self):
        args = _build_parser().parse_args(["wait", "whisper-large"])
        assert args.model_key == "whisper-large"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestBuildPayload:
    def test_prompt(self):
        args = argparse.Namespace(prompt="hi", payload=None)
        assert _build_payload(args) == {"inputs": "hi"}

    def test_payload_json(self):
        args = argparse.Namespace(prompt=None, payload='{"inputs": "x", "parameters": {"a": 1}}')
        assert _build_payload(args) == {"inputs": "x", "parameters": {"a": 1}}


class TestWriteOutput:
    def test_json_to_stdout(self, capsys):
        _write_output([{"generated_text": "hi"}], None)
        assert json.loads(capsys.readouterr().out) == [{"generated_text": "hi"}]

    def test_bytes_to_file(self, tmp_path):
        out = tmp_path / "img.png"
        _write_output(b"\x89PNG", out)
        assert out.read_bytes() == b"\x89PNG"

    def test_bytes_without_output(self, capsys):
        _write_output(b"abc", None)
        assert "3 bytes" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestMain:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_policies(self, capsys):
        assert main(["policies"]) == 0
        out = capsys.readouterr().out
        assert "image" in out
        assert "default" in out

    def test_wait(self, capsys):
        assert main(["wait", "sdxl"]) == 0
        assert "10-60s" in capsys.readouterr().out

    def test_invoke_success(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = InvocationResult(success=True, data={"ok": 1}, attempts_made=2, model_key="sdxl")
        with patch(
            "infergate.gateway.fallback.invoke_with_fallback",
            new=AsyncMock(return_value=result),
        ) as mocked:
            code = main(["invoke", "sdxl", "--prompt", "cat", "-o", str(tmp_path / "out.json")])
        assert code == 0
        assert mocked.await_args.args[1:] == ("sdxl", "image", {"inputs": "cat"})
        assert json.loads((tmp_path / "out.json").read_text()) == {"ok": 1}

    def test_invoke_failure_no_fallback(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        result = InvocationResult(success=False, error="timeout", attempts_made=3)
        with patch(
            "infergate.gateway.gateway.InferenceGateway.invoke",
            new=AsyncMock(return_value=result),
        ) as mocked:
            code = main(["invoke", "phi", "--prompt", "x", "--no-fallback", "-c", "text"])
        assert code == 1
        assert mocked.await_count == 1
        assert "timeout" in capsys.readouterr().err

    def test_invalid_payload_returns_1(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["invoke", "phi", "--payload", "{not json"]) == 1
