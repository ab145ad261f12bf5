"""Scripted model backend and answer builders for tests."""

import json
from typing import Callable, List, Tuple, Union

from autol10n.core.llm import ChatBackend, FINAL_ANSWER_MARKER

Scripted = Union[str, Exception, Callable[[], str]]


class ScriptedBackend(ChatBackend):
    """Returns queued answers in call order and records every prompt pair."""

    def __init__(self, responses: List[Scripted]):
        self.responses = list(responses)
        self.calls: List[Tuple[str, str]] = []

    @property
    def provider(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if not self.responses:
            raise AssertionError("Unexpected model call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item()
        return item


def answer(payload: str) -> str:
    """A model reply with some reasoning before the final answer."""
    return f"Let me think about it.\n{FINAL_ANSWER_MARKER}\n{payload}"


def extraction(keys: dict, source: str = "") -> str:
    """An extraction reply with a keys block and a rewritten source block."""
    return answer(
        f"<JSON>\n{json.dumps(keys, ensure_ascii=False)}\n</JSON>\n<dart>\n{source}\n</dart>"
    )


def translation(keys: dict) -> str:
    return answer(json.dumps(keys, ensure_ascii=False, indent=2))
