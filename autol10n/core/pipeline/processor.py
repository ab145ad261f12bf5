"""Localization pipeline orchestrator.

Runs the full workflow for one invocation:
1. Validates the bundle folder and detects the available languages.
2. Detects the source language from the first input file.
3. Asks the model to extract new keys from every input file and to rewrite
   the file so it uses them.
4. Merges the new keys into the source-language bundle (existing entries win)
   and writes bundles and source files atomically.
5. Translates the new keys into every other language and merges them the
   same way.

Stages run strictly one after another. Invocations over the same bundle
folder must not run concurrently: nothing locks the bundle files.
"""

import logging
from pathlib import Path
from typing import Optional

from autol10n.core.bundles import BundleCatalog, dump_bundle, merge_bundles, parse_bundle
from autol10n.core.bundles.merger import Bundle
from autol10n.core.llm import BackendFactory, ModelGateway, split_extraction
from autol10n.core.prompts import PromptLoader
from autol10n.core.storage import atomic_write
from autol10n.exceptions import (
    BundleFolderNotFound,
    BundleFormatError,
    InvalidModelResponse,
    L10nError,
    MissingPromptTemplate,
    SourceFileNotFound,
    SourceFileUnreadable,
)
from autol10n.utils.text import preview_json, safe_truncate

from .models import KeyCollision, PipelineConfig, PipelineReport

logger = logging.getLogger(__name__)


class LocalizationPipeline:
    """Extracts, merges and translates localization keys for a set of files.

    Usage:
        pipeline = LocalizationPipeline(config)
        report = await pipeline.process()
    """

    def __init__(self, config: PipelineConfig, gateway: Optional[ModelGateway] = None):
        """Initialize the pipeline.

        Args:
            config: Run configuration
            gateway: Model gateway to use; built from the configured provider
                when omitted
        """
        self.config = config
        self.gateway = gateway or self.create_gateway(config)
        self._should_stop = False

    @staticmethod
    def create_gateway(config: PipelineConfig) -> ModelGateway:
        """Build the model gateway for the configured backend."""
        backend = BackendFactory.create(
            provider=config.provider,
            model=config.model,
            api_key=config.api_key,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            max_retries=config.max_retries,
            retry_min_wait=config.retry_min_wait,
            retry_max_wait=config.retry_max_wait,
        )
        return ModelGateway(
            backend,
            prompt_loader=PromptLoader(config.prompts_dir),
            marker=config.final_answer_marker,
        )

    def request_stop(self) -> None:
        """Stop after the file or language currently being processed."""
        self._should_stop = True

    async def process(self) -> PipelineReport:
        """Execute the localization workflow.

        Returns:
            Report of processed, skipped and translated items

        Raises:
            BundleFolderNotFound: If the bundle folder does not exist
            SourceFileNotFound: If the first input file does not exist
            SourceFileUnreadable: If the first input file cannot be read as UTF-8
            MissingPromptTemplate: If a prompt pair is missing
            InvalidModelResponse: If language detection gets no usable answer
        """
        report = PipelineReport()
        config = self.config

        catalog = self._open_catalog()
        tags = catalog.list_tags()
        if not tags:
            logger.warning(f"No bundle files found in {catalog.folder}")
        else:
            logger.info(f"Detected languages: {', '.join(tags)}")
        report.known_languages = tags

        # Detect the source language from the first file
        if not config.files:
            raise L10nError("No input files given")
        first_file = config.files[0].resolve()
        if not first_file.is_file():
            raise SourceFileNotFound(first_file)

        try:
            first_source = first_file.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise SourceFileUnreadable(first_file, e) from e

        logger.info("Language detection...")
        source_language = await self.gateway.detect_language(first_source, tags)
        logger.info(f"Language detected: {source_language}")
        report.source_language = source_language

        if not catalog.exists(source_language):
            logger.warning(
                f"Bundle not found, starting from an empty one: "
                f"{catalog.path_for(source_language)}"
            )

        running_keys: Bundle = {}
        for file_path in config.files:
            if self._should_stop:
                logger.info("Stop requested, remaining files not processed")
                break
            await self._process_file(
                file_path.resolve(), catalog, source_language, running_keys, report
            )
        # A stop requested during the last file still counts
        report.stopped = self._should_stop
        report.new_keys = dict(running_keys)

        if not report.stopped:
            targets = [tag for tag in tags if tag != source_language]
            await self._translate_all(catalog, targets, running_keys, report)

        logger.info(
            f"Localization finished: {len(report.processed_files)} file(s) processed, "
            f"{len(report.skipped_files)} skipped, {len(report.new_keys)} new key(s), "
            f"{len(report.translated_languages)} language(s) translated, "
            f"{len(report.failed_languages)} failed"
        )
        return report

    def _open_catalog(self) -> BundleCatalog:
        folder = self.config.bundles_folder.resolve()
        if not folder.is_dir():
            raise BundleFolderNotFound(folder)
        return BundleCatalog(
            folder,
            prefix=self.config.bundle_prefix,
            extension=self.config.bundle_extension,
        )

    def _skip_file(self, file_path: Path, reason: str, report: PipelineReport) -> None:
        logger.warning(f"Skipping {file_path}: {reason}")
        report.skipped_files[str(file_path)] = reason

    async def _process_file(
        self,
        file_path: Path,
        catalog: BundleCatalog,
        language: str,
        running_keys: Bundle,
        report: PipelineReport,
    ) -> None:
        """Extract keys from one file, update the bundle, rewrite the file.

        Failures specific to this file are reported and do not stop the run.
        Until the bundle is written nothing changes on disk; a failed rewrite
        after that leaves the new keys in the bundle and the source as it was.
        """
        if not file_path.is_file():
            self._skip_file(file_path, "file not found", report)
            return

        logger.info(f"File processing: {file_path}")
        try:
            source = file_path.read_text(encoding="utf-8")
            bundle_text = catalog.read(language)
            parse_bundle(bundle_text)

            answer = await self.gateway.extract(
                source, bundle_text, language, self.config.package_name
            )
            extraction = split_extraction(answer)
            logger.debug(f"Bundle entries created: {safe_truncate(extraction.keys_json, 200)}")
            new_keys = parse_bundle(extraction.keys_json)
        except (InvalidModelResponse, BundleFormatError, UnicodeDecodeError, OSError) as e:
            self._skip_file(file_path, str(e), report)
            return

        # The bundle may have changed since the previous file; merge against disk
        try:
            merged = merge_bundles(
                catalog.read(language), dump_bundle({**running_keys, **new_keys})
            )
            atomic_write(catalog.path_for(language), merged, self.config.backup)
        except OSError as e:
            self._skip_file(file_path, f"bundle write failed: {e}", report)
            return

        # Keys are on disk from here on, so they are translated even if the
        # rewrite below fails
        self._collect_keys(running_keys, new_keys, file_path, report)

        if extraction.has_rewrite:
            logger.info(f"Source file update: {file_path}")
            rewritten = extraction.rewritten_source
            if source.endswith("\n") and not rewritten.endswith("\n"):
                rewritten += "\n"
            try:
                atomic_write(file_path, rewritten, self.config.backup)
            except OSError as e:
                self._skip_file(file_path, f"source rewrite failed: {e}", report)
                return
            report.rewritten_files.append(str(file_path))

        report.processed_files.append(str(file_path))

    def _collect_keys(
        self,
        running_keys: Bundle,
        new_keys: Bundle,
        file_path: Path,
        report: PipelineReport,
    ) -> None:
        """Add a file's keys to the running set; the latest value wins."""
        for key, value in new_keys.items():
            previous = running_keys.get(key)
            if key in running_keys and previous != value:
                logger.warning(
                    f"Key {key!r} redefined by {file_path.name}: "
                    f"{preview_json(previous, 60)} -> {preview_json(value, 60)}"
                )
                report.key_collisions.append(
                    KeyCollision(
                        key=key,
                        previous_value=previous,
                        new_value=value,
                        file=str(file_path),
                    )
                )
            running_keys[key] = value

    async def _translate_all(
        self,
        catalog: BundleCatalog,
        targets: list[str],
        running_keys: Bundle,
        report: PipelineReport,
    ) -> None:
        if not targets:
            return
        if not running_keys:
            logger.info("No new keys extracted, translation skipped")
            return

        logger.info(f"Translation into other languages: {', '.join(targets)}")
        payload = dump_bundle(running_keys)
        for tag in targets:
            if self._should_stop:
                logger.info("Stop requested, remaining languages not translated")
                report.stopped = True
                return
            try:
                await self._translate_one(catalog, tag, payload)
            except MissingPromptTemplate:
                raise
            except Exception as e:
                logger.warning(f"Translation failed for {tag}: {e}")
                report.failed_languages[tag] = str(e)
                continue
            report.translated_languages.append(tag)

    async def _translate_one(self, catalog: BundleCatalog, tag: str, payload: str) -> None:
        logger.info(f"Translation in progress for: {tag}")
        translated = await self.gateway.translate(payload, tag)
        parse_bundle(translated)

        existing = catalog.read(tag)
        parse_bundle(existing)

        merged = merge_bundles(existing, translated)
        atomic_write(catalog.path_for(tag), merged, self.config.backup)
