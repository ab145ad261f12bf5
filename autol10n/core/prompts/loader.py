"""Prompt template loader and renderer.

Each model operation has a system/user prompt pair stored as markdown files:

    prompts/<operation>/system.<template_name>.md
    prompts/<operation>/user.<template_name>.md

Supports:
- Packaged default templates (autol10n/prompts/)
- An override directory with the same layout, searched first
- Named templates falling back to ``default``
- Variables: {{var}}
- Fallback values: {{var | default:"value"}}
"""

import logging
import re
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel

from autol10n.exceptions import MissingPromptTemplate

logger = logging.getLogger(__name__)


class PromptTemplate(BaseModel):
    """A loaded system/user prompt pair."""

    name: str
    system_prompt: str
    user_prompt_template: str
    variables: list[str]
    template_name: str = "default"
    source_dir: Path


class PromptLoader:
    """Load and render prompt templates from .md files."""

    # Packaged templates
    PROMPTS_DIR = Path(__file__).parent.parent.parent / "prompts"

    # Variable pattern: {{variable_name}}
    VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")

    # Fallback pattern: {{var | default:"value"}} or {{var | default:'value'}}
    FALLBACK_PATTERN = re.compile(
        r"\{\{(\w+)\s*\|\s*default:\s*[\"']([^\"']*)[\"']\}\}"
    )

    # Both forms in one pass: {{var | default:"value"}} or {{var}}
    RENDER_PATTERN = re.compile(
        r"\{\{(?P<fallback_name>\w+)\s*\|\s*default:\s*[\"'](?P<fallback_value>[^\"']*)[\"']\}\}"
        r"|\{\{(?P<name>\w+)\}\}"
    )

    def __init__(self, override_dir: Optional[Path] = None):
        """Initialize the loader.

        Args:
            override_dir: Optional directory searched before the packaged
                templates, using the same <operation>/<file> layout
        """
        self.override_dir = Path(override_dir) if override_dir else None

    @property
    def search_dirs(self) -> List[Path]:
        dirs = []
        if self.override_dir is not None:
            dirs.append(self.override_dir)
        dirs.append(self.PROMPTS_DIR)
        return dirs

    @staticmethod
    def get_prompt_path(
        base_dir: Path, name: str, filename: str, template_name: str = "default"
    ) -> Path:
        """Get the path to a prompt file.

        Args:
            base_dir: Root prompts directory
            name: Operation name (detect_language, extract, translate)
            filename: ``system`` or ``user``
            template_name: Template variant name

        Returns:
            Path to the prompt file
        """
        return base_dir / name / f"{filename}.{template_name}.md"

    def _find_pair(self, name: str, template_name: str) -> Optional[Path]:
        for base_dir in self.search_dirs:
            system_path = self.get_prompt_path(base_dir, name, "system", template_name)
            user_path = self.get_prompt_path(base_dir, name, "user", template_name)
            if system_path.is_file() and user_path.is_file():
                return base_dir
        return None

    def load_template(self, name: str, template_name: str = "default") -> PromptTemplate:
        """Load a system/user prompt pair.

        Priority order:
        1. Override directory, named template
        2. Packaged templates, named template
        3. Same lookup with the ``default`` template

        Raises:
            MissingPromptTemplate: If no complete pair exists
        """
        base_dir = self._find_pair(name, template_name)
        if base_dir is None and template_name != "default":
            logger.warning(f"Prompt template '{template_name}' not found for {name}, using default")
            template_name = "default"
            base_dir = self._find_pair(name, template_name)

        if base_dir is None:
            raise MissingPromptTemplate(
                name,
                self.get_prompt_path(self.search_dirs[0], name, "system", template_name),
                self.get_prompt_path(self.search_dirs[0], name, "user", template_name),
            )

        system_prompt = self.get_prompt_path(base_dir, name, "system", template_name).read_text(
            encoding="utf-8"
        )
        user_prompt = self.get_prompt_path(base_dir, name, "user", template_name).read_text(
            encoding="utf-8"
        )
        logger.debug(f"Loaded prompt {name}.{template_name} from {base_dir}")

        return PromptTemplate(
            name=name,
            system_prompt=system_prompt,
            user_prompt_template=user_prompt,
            variables=self.extract_variables(system_prompt + user_prompt),
            template_name=template_name,
            source_dir=base_dir,
        )

    @classmethod
    def extract_variables(cls, template: str) -> list[str]:
        """List the variable names a template uses."""
        names = []
        for pattern in (cls.FALLBACK_PATTERN, cls.VARIABLE_PATTERN):
            for match in pattern.finditer(template):
                if match.group(1) not in names:
                    names.append(match.group(1))
        return names

    @classmethod
    def render(cls, template: str, variables: dict[str, Any]) -> str:
        """Render a template with variables.

        Substituted values are inserted verbatim and never re-scanned, so
        source code containing braces is safe to embed. Unknown variables
        are left in place.

        Args:
            template: Template string
            variables: Variable values

        Returns:
            Rendered template string
        """

        def replace(match):
            if match.group("fallback_name") is not None:
                value = variables.get(match.group("fallback_name"))
                if value is None or value == "":
                    return match.group("fallback_value")
                return str(value)

            value = variables.get(match.group("name"))
            if value is None:
                return match.group(0)  # Keep original if not found
            return str(value)

        return cls.RENDER_PATTERN.sub(replace, template).strip()
