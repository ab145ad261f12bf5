"""
Pytest configuration and shared fixtures.
"""
import json
from pathlib import Path

import pytest

from autol10n.core.llm import ModelGateway
from autol10n.core.pipeline import LocalizationPipeline, PipelineConfig

from .helpers import ScriptedBackend


@pytest.fixture
def bundles_dir(tmp_path):
    """Empty l10n folder inside a fake Flutter project"""
    folder = tmp_path / "lib" / "l10n"
    folder.mkdir(parents=True)
    return folder


@pytest.fixture
def write_bundle(bundles_dir):
    """Write app_<tag>.arb with the given content"""

    def _write(tag: str, content):
        path = bundles_dir / f"app_{tag}.arb"
        text = content if isinstance(content, str) else json.dumps(content, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def read_bundle(bundles_dir):
    """Load app_<tag>.arb as a dict"""

    def _read(tag: str) -> dict:
        return json.loads((bundles_dir / f"app_{tag}.arb").read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def source_file(tmp_path):
    """Create a Dart source file under lib/"""

    def _create(name: str, content: str = "Text('Hello')") -> Path:
        path = tmp_path / "lib" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _create


@pytest.fixture
def make_pipeline(bundles_dir):
    """Build a pipeline driven by scripted model answers"""

    def _make(files, responses, **options):
        backend = ScriptedBackend(responses)
        config = PipelineConfig(
            provider="fake",
            model="fake-model",
            api_key="",
            bundles_folder=options.pop("bundles_folder", bundles_dir),
            files=tuple(files),
            package_name=options.pop("package_name", "my_app"),
            **options,
        )
        pipeline = LocalizationPipeline(config, gateway=ModelGateway(backend))
        return pipeline, backend

    return _make
