"""Pipeline configuration and run report."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from autol10n.core.llm.response import FINAL_ANSWER_MARKER


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for one localization run."""

    provider: str
    model: str
    api_key: str
    bundles_folder: Path
    files: Tuple[Path, ...]
    package_name: str = ""
    backup: bool = False

    # Bundle naming
    bundle_prefix: str = "app_"
    bundle_extension: str = ".arb"

    # Model options
    base_url: Optional[str] = None
    temperature: float = 0.0
    max_tokens: Optional[int] = None
    max_retries: int = 5
    retry_min_wait: float = 2.0
    retry_max_wait: float = 30.0
    final_answer_marker: str = FINAL_ANSWER_MARKER
    prompts_dir: Optional[Path] = None

    def __post_init__(self):
        # Accept any iterable of str/Path for files
        object.__setattr__(self, "bundles_folder", Path(self.bundles_folder))
        object.__setattr__(self, "files", tuple(Path(f) for f in self.files))


class KeyCollision(BaseModel):
    """Two input files extracted different values for the same key."""

    key: str
    previous_value: Any
    new_value: Any
    file: str


class PipelineReport(BaseModel):
    """Outcome of one localization run."""

    source_language: Optional[str] = None
    known_languages: List[str] = Field(default_factory=list)

    processed_files: List[str] = Field(default_factory=list)
    rewritten_files: List[str] = Field(default_factory=list)
    skipped_files: Dict[str, str] = Field(
        default_factory=dict, description="File path -> reason it was skipped"
    )

    new_keys: Dict[str, Any] = Field(
        default_factory=dict, description="Keys extracted in the source language"
    )
    key_collisions: List[KeyCollision] = Field(default_factory=list)

    translated_languages: List[str] = Field(default_factory=list)
    failed_languages: Dict[str, str] = Field(
        default_factory=dict, description="Language tag -> failure reason"
    )

    stopped: bool = False

    @property
    def has_failures(self) -> bool:
        return bool(self.skipped_files or self.failed_languages)
