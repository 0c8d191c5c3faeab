"""LLM client factory package."""

from __future__ import annotations

from .client import CompleteFn, complete, get_chat_model, make_complete

__all__ = ["CompleteFn", "complete", "get_chat_model", "make_complete"]
