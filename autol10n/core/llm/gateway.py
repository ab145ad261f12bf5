"""Model gateway for the localization operations.

The gateway turns each operation into a rendered prompt pair, sends it to the
configured backend and parses the final answer out of the free-text reply.
One gateway is bound to one backend for its whole lifetime.
"""

import logging
from typing import Iterable, Optional

from autol10n.core.bundles.catalog import sanitize_tag
from autol10n.core.prompts.loader import PromptLoader
from autol10n.exceptions import InvalidModelResponse
from autol10n.utils.text import one_line

from .backends import ChatBackend
from .response import FINAL_ANSWER_MARKER, extract_final_answer, strip_wrappers

logger = logging.getLogger(__name__)


class ModelGateway:
    """Language detection, key extraction and bundle translation via a model.

    Usage:
        backend = BackendFactory.create("mistral", "mistral-large-latest", api_key)
        gateway = ModelGateway(backend)
        tag = await gateway.detect_language(source, ["en", "fr"])
    """

    DETECT_LANGUAGE = "detect_language"
    EXTRACT = "extract"
    TRANSLATE = "translate"

    def __init__(
        self,
        backend: ChatBackend,
        prompt_loader: Optional[PromptLoader] = None,
        marker: str = FINAL_ANSWER_MARKER,
    ):
        self.backend = backend
        self.prompt_loader = prompt_loader or PromptLoader()
        self.marker = marker

    async def _run(self, operation: str, variables: dict) -> str:
        """Render the operation's prompts, call the backend, return the final answer.

        Raises:
            MissingPromptTemplate: If the prompt pair is missing
            InvalidModelResponse: If the answer has no final-answer marker
        """
        # Loaded on every call so edited override templates apply immediately
        template = self.prompt_loader.load_template(operation)
        variables = {"marker": self.marker, **variables}
        system_prompt = PromptLoader.render(template.system_prompt, variables)
        user_prompt = PromptLoader.render(template.user_prompt_template, variables)

        logger.debug(f"Calling {self.backend.provider} for {operation}...")
        raw = await self.backend.complete(system_prompt, user_prompt)
        logger.debug(f"{operation} raw answer: {one_line(raw)}")

        return extract_final_answer(raw, self.marker)

    async def detect_language(self, source_text: str, candidate_tags: Iterable[str]) -> str:
        """Ask which language the source's user-facing strings are written in.

        Args:
            source_text: Content of a source file
            candidate_tags: Language tags of the existing bundles

        Returns:
            A sanitized language tag

        Raises:
            InvalidModelResponse: If the answer has no marker or no usable tag
        """
        candidates = list(candidate_tags)
        answer = await self._run(
            self.DETECT_LANGUAGE,
            {"languages": ", ".join(candidates), "source": source_text},
        )

        tag = sanitize_tag(answer)
        if not tag:
            raise InvalidModelResponse("Detected language tag is empty", answer)
        if candidates and tag not in candidates:
            logger.warning(f"Detected language {tag} has no existing bundle among {candidates}")
        return tag

    async def extract(
        self,
        source_text: str,
        existing_bundle_json: str,
        language_tag: str,
        package_name: str,
    ) -> str:
        """Ask for new localization keys and a rewritten source file.

        Returns:
            The final answer: a JSON block optionally followed by the source
            separator and the rewritten source (see ``split_extraction``)

        Raises:
            InvalidModelResponse: If the answer has no final-answer marker
        """
        return await self._run(
            self.EXTRACT,
            {
                "source": source_text,
                "bundle": existing_bundle_json,
                "language": language_tag,
                "package_name": package_name,
            },
        )

    async def translate(self, source_bundle_json: str, target_language_tag: str) -> str:
        """Translate every value of a bundle into another language.

        Returns:
            The translated bundle JSON text, wrappers and code fences removed

        Raises:
            InvalidModelResponse: If the answer has no final-answer marker
        """
        answer = await self._run(
            self.TRANSLATE,
            {"bundle": source_bundle_json, "language": target_language_tag},
        )
        return strip_wrappers(answer)
