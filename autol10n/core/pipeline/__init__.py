"""Localization pipeline.

This module provides:
- PipelineConfig: configuration of one run
- LocalizationPipeline: orchestrates detection, extraction, merge and translation
- PipelineReport: outcome of a run
"""

from .models import KeyCollision, PipelineConfig, PipelineReport
from .processor import LocalizationPipeline

__all__ = [
    "KeyCollision",
    "LocalizationPipeline",
    "PipelineConfig",
    "PipelineReport",
]
