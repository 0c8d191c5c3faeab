"""Prompt template loading and placeholder filling."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Mapping, Optional


def find_prompts_dir() -> Path:
    """Locate the templates shipped inside the package."""
    packaged = Path(__file__).resolve().parents[1] / "prompts"
    if packaged.is_dir():
        return packaged
    raise FileNotFoundError("Could not find the 'prompts' directory.")


class PromptCache:
    """Read-through cache of template text keyed by template name.

    Entries are loaded on first use and never invalidated; the template set is
    fixed for the life of the process, so concurrent readers need no locking
    once an entry exists.
    """

    def __init__(self, directory: Optional[Path] = None):
        self._directory = directory
        self._templates: Dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def directory(self) -> Path:
        if self._directory is None:
            self._directory = find_prompts_dir()
        return self._directory

    def load(self, name: str) -> str:
        cached = self._templates.get(name)
        if cached is not None:
            return cached
        with self._lock:
            if name not in self._templates:
                self._templates[name] = (self.directory / name).read_text(encoding="utf-8")
            return self._templates[name]

    def __contains__(self, name: str) -> bool:
        return name in self._templates


def fill_prompt(template: str, variables: Mapping[str, Optional[str]]) -> str:
    """Replace each ``{{NAME}}`` token; ``None`` values become empty strings."""
    output = template
    for key, value in variables.items():
        output = output.replace("{{" + key + "}}", "" if value is None else str(value))
    return output
