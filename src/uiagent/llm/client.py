from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from uiagent.config.settings import Settings, get_settings
from uiagent.errors import ModelError

logger = logging.getLogger(__name__)

CompleteFn = Callable[[str, str, float], str]


def _callbacks(cfg: Settings) -> List[Any]:
    if not cfg.tracing_enabled:
        return []
    from langfuse.langchain import CallbackHandler

    return [CallbackHandler()]


def get_chat_model(settings: Optional[Settings] = None, **overrides: Any) -> ChatOpenAI:
    cfg = settings or get_settings()
    params = {
        "model": cfg.model,
        "api_key": cfg.openai_api_key or "dummy",
        "timeout": cfg.llm_timeout,
        "max_retries": 0,
    }

    if cfg.openai_base_url:
        params["base_url"] = cfg.openai_base_url

    params.update(overrides)
    return ChatOpenAI(**params)


def complete(prompt: str, model: str, temperature: float, settings: Optional[Settings] = None) -> str:
    """Send a single human prompt and return the text of the reply.

    Any failure from the client is raised as :class:`ModelError`; no retry is
    attempted.
    """

    cfg = settings or get_settings()
    try:
        llm = get_chat_model(cfg, model=model, temperature=temperature)
        response = llm.invoke([HumanMessage(prompt)], config={"callbacks": _callbacks(cfg)})
    except Exception as exc:
        raise ModelError(str(exc) or exc.__class__.__name__) from exc

    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return str(content)


def make_complete(settings: Settings) -> CompleteFn:
    """Bind :func:`complete` to ``settings``."""

    def _complete(prompt: str, model: str, temperature: float) -> str:
        return complete(prompt, model, temperature, settings=settings)

    return _complete
