"""
Tests for the command-line entry point.
"""
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from autol10n.cli import build_parser, config_from_args, main, print_summary
from autol10n.config import Settings
from autol10n.core.pipeline import PipelineReport


@pytest.fixture
def settings():
    return Settings(_env_file=None, mistral_api_key="mistral-key")


class TestArguments:
    """Parsing and configuration building"""

    def test_defaults_come_from_settings(self, settings):
        args = build_parser(settings).parse_args(
            ["--arbs-folder", "lib/l10n", "--files", "lib/a.dart", "lib/b.dart"]
        )

        assert args.provider == "mistral"
        assert args.model == "mistral-large-latest"
        assert args.bundles_folder == Path("lib/l10n")
        assert args.files == [Path("lib/a.dart"), Path("lib/b.dart")]
        assert args.package_name == ""
        assert args.backup is False

    def test_bundles_folder_alias(self, settings):
        args = build_parser(settings).parse_args(
            ["--bundles-folder", "l10n", "--files", "a.dart", "--log-level", "debug"]
        )

        assert args.bundles_folder == Path("l10n")
        assert args.log_level == "DEBUG"

    def test_required_arguments(self, settings):
        with pytest.raises(SystemExit):
            build_parser(settings).parse_args(["--files", "a.dart"])

    def test_api_key_falls_back_to_settings(self, settings):
        args = build_parser(settings).parse_args(
            ["--arbs-folder", "l10n", "--files", "a.dart", "--package-name", "my_app"]
        )

        config = config_from_args(args, settings)

        assert config.api_key == "mistral-key"
        assert config.package_name == "my_app"
        assert config.files == (Path("a.dart"),)
        assert config.final_answer_marker == "REPONSE FINALE :"

    def test_retry_waits_come_from_settings(self):
        settings = Settings(_env_file=None, retry_min_wait=0.1, retry_max_wait=0.5)
        args = build_parser(settings).parse_args(["--arbs-folder", "l10n", "--files", "a.dart"])

        config = config_from_args(args, settings)

        assert (config.retry_min_wait, config.retry_max_wait) == (0.1, 0.5)

    def test_explicit_api_key_wins(self, settings):
        args = build_parser(settings).parse_args(
            [
                "--provider", "openai",
                "--model", "gpt-4o",
                "--api-key", "cli-key",
                "--arbs-folder", "l10n",
                "--files", "a.dart",
                "--backup",
            ]
        )

        config = config_from_args(args, settings)

        assert config.provider == "openai"
        assert config.api_key == "cli-key"
        assert config.backup is True


class TestMain:
    """Exit codes and summary output"""

    def test_success_prints_summary(self, tmp_path, capsys):
        report = PipelineReport(
            source_language="en",
            processed_files=["a.dart"],
            rewritten_files=["a.dart"],
            new_keys={"hello": "Hello"},
            translated_languages=["fr"],
        )
        with patch("autol10n.cli.LocalizationPipeline") as pipeline_cls:
            pipeline_cls.return_value.process = AsyncMock(return_value=report)

            code = main(["--arbs-folder", str(tmp_path), "--files", "a.dart"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Source language: en" in out
        assert "Translated: fr" in out

    def test_missing_bundle_folder_exits_with_error(self, tmp_path):
        source = tmp_path / "a.dart"
        source.write_text("Text('Hello')", encoding="utf-8")

        code = main(
            ["--arbs-folder", str(tmp_path / "missing"), "--files", str(source), "--api-key", "k"]
        )

        assert code == 1

    def test_undecodable_first_file_exits_with_error(self, tmp_path):
        source = tmp_path / "a.dart"
        source.write_bytes(b"\xff\xfe")

        code = main(["--arbs-folder", str(tmp_path), "--files", str(source), "--api-key", "k"])

        assert code == 1

    def test_partial_failure_is_logged(self, tmp_path, caplog):
        report = PipelineReport(source_language="en", skipped_files={"b.dart": "file not found"})
        with patch("autol10n.cli.LocalizationPipeline") as pipeline_cls:
            pipeline_cls.return_value.process = AsyncMock(return_value=report)

            code = main(["--arbs-folder", str(tmp_path), "--files", "b.dart"])

        assert code == 0
        assert "Completed with failures: 1 file(s) skipped" in caplog.text

    def test_unknown_provider_exits_with_error(self, tmp_path):
        code = main(
            ["--provider", "nope", "--arbs-folder", str(tmp_path), "--files", "a.dart"]
        )

        assert code == 1

    def test_interrupt(self, tmp_path):
        with patch("autol10n.cli.LocalizationPipeline") as pipeline_cls:
            pipeline_cls.return_value.process = AsyncMock(side_effect=KeyboardInterrupt)

            code = main(["--arbs-folder", str(tmp_path), "--files", "a.dart"])

        assert code == 130


class TestSummary:
    def test_lists_failures(self, capsys):
        report = PipelineReport(
            source_language="en",
            skipped_files={"b.dart": "file not found"},
            failed_languages={"de": "timeout"},
            stopped=True,
        )

        print_summary(report)

        out = capsys.readouterr().out
        assert "skipped b.dart: file not found" in out
        assert "translation failed for de: timeout" in out
        assert "Run stopped before completion." in out
