"""Command-line entry point.

Example:
    autol10n --provider mistral --model mistral-large-latest \\
        --arbs-folder lib/l10n --package-name my_app \\
        --files lib/home_page.dart lib/settings_page.dart

When ``--api-key`` is omitted the key is read from ``<PROVIDER>_API_KEY``.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from autol10n.config import Settings, settings as default_settings
from autol10n.core.llm import BackendFactory
from autol10n.core.pipeline import LocalizationPipeline, PipelineConfig, PipelineReport
from autol10n.exceptions import L10nError

logger = logging.getLogger("autol10n")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autol10n",
        description="Extract user-facing strings into ARB bundles and translate them with an LLM",
    )
    parser.add_argument(
        "--provider",
        default=settings.provider,
        help=f"LLM provider ({', '.join(BackendFactory.available_providers())})",
    )
    parser.add_argument("--model", default=settings.model, help="Model name to use")
    parser.add_argument(
        "--arbs-folder",
        "--bundles-folder",
        dest="bundles_folder",
        required=True,
        type=Path,
        help="Directory of .arb localization files",
    )
    parser.add_argument(
        "--files",
        nargs="+",
        required=True,
        type=Path,
        help="Source files to process (the first one is used for language detection)",
    )
    parser.add_argument(
        "--package-name", default="", help="Project package name used in rewritten imports"
    )
    parser.add_argument("--api-key", help="API key for the LLM provider")
    parser.add_argument(
        "--backup",
        action="store_true",
        default=settings.backup,
        help="Keep a .bak copy of every file before overwriting it",
    )
    parser.add_argument(
        "--prompts-dir",
        type=Path,
        default=settings.prompts_dir,
        help="Directory with prompt template overrides",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity",
    )
    return parser


def config_from_args(args: argparse.Namespace, settings: Settings) -> PipelineConfig:
    """Combine parsed arguments with settings into a pipeline configuration."""
    return PipelineConfig(
        provider=args.provider,
        model=args.model,
        api_key=args.api_key or settings.api_key_for(args.provider),
        bundles_folder=args.bundles_folder,
        files=tuple(args.files),
        package_name=args.package_name,
        backup=args.backup,
        bundle_prefix=settings.bundle_prefix,
        bundle_extension=settings.bundle_extension,
        base_url=settings.base_url,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        max_retries=settings.max_retries,
        retry_min_wait=settings.retry_min_wait,
        retry_max_wait=settings.retry_max_wait,
        final_answer_marker=settings.final_answer_marker,
        prompts_dir=args.prompts_dir,
    )


def print_summary(report: PipelineReport) -> None:
    print("=" * 60)
    print(f"Source language: {report.source_language}")
    print(f"Files processed: {len(report.processed_files)} "
          f"({len(report.rewritten_files)} rewritten)")
    print(f"New keys: {len(report.new_keys)}")
    if report.translated_languages:
        print(f"Translated: {', '.join(report.translated_languages)}")
    for path, reason in report.skipped_files.items():
        print(f"  skipped {path}: {reason}")
    for tag, reason in report.failed_languages.items():
        print(f"  translation failed for {tag}: {reason}")
    if report.stopped:
        print("Run stopped before completion.")
    print("=" * 60)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = default_settings
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args, settings)
        pipeline = LocalizationPipeline(config)
        report = asyncio.run(pipeline.process())
    except L10nError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130

    print_summary(report)
    if report.has_failures:
        logger.warning(
            f"Completed with failures: {len(report.skipped_files)} file(s) skipped, "
            f"{len(report.failed_languages)} language(s) not translated"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
