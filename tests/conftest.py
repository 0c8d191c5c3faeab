import copy
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from uiagent.config.settings import Settings
from uiagent.errors import ModelError


_BUTTON_PLAN = {
    "kind": "plan",
    "layout": "Header with a content section.",
    "components": ["Button", "Card"],
    "tree": {
        "id": "root",
        "type": "div",
        "props": {},
        "children": [
            {"id": "node-2", "type": "section", "props": {}, "children": [
                {"id": "text-1", "type": "text", "text": "Workspace Overview"},
            ]},
            {"id": "node-8", "type": "section", "props": {}, "children": [
                {"id": "node-7", "type": "Card", "props": {"title": "Highlights"}, "children": [
                    {"id": "text-3", "type": "text", "text": "Latest activity."},
                    {"id": "node-9", "type": "Button", "props": {}, "children": [
                        {"id": "text-4", "type": "text", "text": "Primary Action"},
                    ]},
                ]},
            ]},
        ],
    },
}


class FakeComplete:
    """Deterministic stand-in for the model client; replies are consumed in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def __call__(self, prompt, model, temperature):
        self.calls.append({"prompt": prompt, "model": model, "temperature": temperature})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def button_plan():
    return copy.deepcopy(_BUTTON_PLAN)


@pytest.fixture
def fallback_settings():
    return Settings(openai_api_key=None, mock_agent=True)


@pytest.fixture
def model_settings():
    return Settings(openai_api_key=None, mock_agent=False, model="test-model")


@pytest.fixture
def fake_complete_factory():
    return FakeComplete


@pytest.fixture
def model_error():
    return ModelError
