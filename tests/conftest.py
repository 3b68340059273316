"""Shared fixtures: a recording stand-in for the model and a wired app."""

from pathlib import Path

import pytest

from edsfix.app_context import AppContext
from edsfix.config.models import BehaviorConfig
from edsfix.llm.azure_openai import GenerationResult


class StubGenerationClient:
    """Records every chat() call and answers with a canned result."""

    def __init__(self, result=None, raises=None):
        self.result = result or GenerationResult(success=True, content="stub answer")
        self.raises = raises
        self.calls = []

    def chat(self, user_message, system_message="You are a helpful AI assistant.", **options):
        self.calls.append({"message": user_message, "system": system_message, "options": options})
        if self.raises is not None:
            raise self.raises
        return self.result


def write(root: Path, rel: str, text: str) -> Path:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture
def stub_llm():
    return StubGenerationClient()


@pytest.fixture
def blocks_root(tmp_path):
    root = tmp_path / "blocks"
    root.mkdir()
    return root


@pytest.fixture
def make_app(tmp_path, blocks_root):
    def _make(llm, **overrides):
        behavior = BehaviorConfig(blocks_root=blocks_root, **overrides)
        return AppContext.build(cwd=tmp_path, behavior=behavior, llm=llm)
    return _make
