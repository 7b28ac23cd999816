"""Tests for entrypoints/cli.py - exit codes and option handling."""

from __future__ import annotations

import logging

import pytest

from ddlguard.entrypoints.cli import (
    EXIT_ERROR,
    EXIT_OK,
    EXIT_SCHEMA_MISMATCH,
    build_parser,
    main,
)
from ddlguard.shared.logging import LOGGER_NAME, _DdlguardHandler


@pytest.fixture(autouse=True)
def _cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DDLGUARD_TEST_MODE", "true")
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _DdlguardHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def _args(module, *extra):
    return ["--metadata", f"{module}:metadata", "--dialect", "sqlite", *extra]


class TestParser:
    def test_fixups_keep_command_line_order(self):
        args = build_parser().parse_args(
            ["--fixup", "a", "b", "--required-fixup", "b", "c", "--fixup", "c", ""]
        )
        assert args.fixups == [
            {"pattern": "a", "replacement": "b", "modification_required": False},
            {"pattern": "b", "replacement": "c", "modification_required": True},
            {"pattern": "c", "replacement": "", "modification_required": False},
        ]

    def test_unset_options_are_none(self):
        args = build_parser().parse_args([])
        assert args.fixups is None
        assert args.drop is None
        assert args.format is None
        assert args.verify_file is None

    def test_flags(self):
        args = build_parser().parse_args(["--drop", "--no-format", "--log-level", "debug"])
        assert args.drop is True
        assert args.format is False
        assert args.log_level == "DEBUG"


class TestMain:
    def test_defaults_write_build_output(self, sample_models_module, tmp_path):
        code = main(_args(sample_models_module, "--verify-file", "NONE"))
        assert code == EXIT_OK
        output = tmp_path / "build" / "generated-resources" / "schema.ddl"
        assert "CREATE TABLE widget" in output.read_text(encoding="utf-8")

    def test_matching_baseline(self, sample_models_module, tmp_path):
        assert main(_args(sample_models_module, "--output-file", "first.ddl", "--verify-file", "")) == EXIT_OK
        baseline = tmp_path / "schema" / "schema.ddl"
        baseline.parent.mkdir()
        baseline.write_bytes((tmp_path / "first.ddl").read_bytes())
        assert main(_args(sample_models_module)) == EXIT_OK

    def test_drift_exit_code(self, sample_models_module, tmp_path):
        baseline = tmp_path / "baseline.ddl"
        baseline.write_text("CREATE TABLE widget ();\n", encoding="utf-8")
        code = main(_args(sample_models_module, "--verify-file", str(baseline)))
        assert code == EXIT_SCHEMA_MISMATCH

    def test_missing_baseline_exit_code(self, sample_models_module):
        assert main(_args(sample_models_module)) == EXIT_ERROR

    def test_missing_metadata_exit_code(self):
        assert main(["--verify-file", "NONE"]) == EXIT_ERROR

    def test_broken_models_module_exit_code(self, broken_models_module, capsys):
        """A models module that blows up on import is a tooling error, not drift."""
        code = main(_args(broken_models_module, "--verify-file", "NONE"))
        assert code == EXIT_ERROR
        assert "bad model" in capsys.readouterr().err

    def test_required_fixup_exit_code(self, sample_models_module):
        code = main(
            _args(
                sample_models_module,
                "--verify-file",
                "NONE",
                "--required-fixup",
                "NO_SUCH_TEXT",
                "x",
            )
        )
        assert code == EXIT_ERROR

    def test_empty_fixup_pattern_exit_code(self, sample_models_module):
        code = main(_args(sample_models_module, "--verify-file", "NONE", "--fixup", "", "x"))
        assert code == EXIT_ERROR

    def test_cli_fixups_follow_config_fixups(self, sample_models_module, tmp_path):
        config = tmp_path / "ddlguard.yaml"
        config.write_text(
            "verify_file: NONE\n"
            "output_file: out.ddl\n"
            "fixups:\n"
            "  - pattern: widget\n"
            "    replacement: gizmo\n",
            encoding="utf-8",
        )
        code = main(
            _args(
                sample_models_module,
                "--config",
                str(config),
                "--required-fixup",
                "gizmo",
                "thing",
            )
        )
        assert code == EXIT_OK
        ddl = (tmp_path / "out.ddl").read_text(encoding="utf-8")
        assert "CREATE TABLE thing" in ddl

    def test_delimiter_and_format(self, sample_models_module, tmp_path):
        code = main(
            _args(
                sample_models_module,
                "--verify-file",
                "NONE",
                "--output-file",
                "flat.ddl",
                "--no-format",
                "--delimiter",
                " GO",
            )
        )
        assert code == EXIT_OK
        lines = (tmp_path / "flat.ddl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert lines[0].endswith(") GO")

    def test_error_is_logged(self, sample_models_module, capsys):
        main(_args(sample_models_module, "--verify-file", "missing.ddl"))
        assert "does not exist" in capsys.readouterr().err

    def test_json_logs(self, sample_models_module, capsys):
        main(_args(sample_models_module, "--verify-file", "NONE", "--json-logs"))
        err = capsys.readouterr().err
        assert '"level": "INFO"' in err
