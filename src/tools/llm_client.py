"""
LLM client factory for photo analysis.

Perplexity is used when its key is set, OpenAI otherwise. Both are reached
through the OpenAI-compatible chat completions API, so a single ChatOpenAI
client type covers them.

Usage:
    from src.tools.llm_client import get_llm

    llm = get_llm()
"""

from __future__ import annotations

from typing import Literal

from langchain_openai import ChatOpenAI

from src.config import config
from src.utils.logging_config import logger

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


def get_llm(
    provider: Literal["auto", "perplexity", "openai"] = "auto",
    temperature: float = 0.0,
    timeout: int = 30,
) -> ChatOpenAI:
    """
    Get an LLM client with automatic provider fallback.

    Args:
        provider: "auto" (Perplexity first, then OpenAI), "perplexity" or
                 "openai".
        temperature: Sampling temperature. Photo analysis wants repeatable
                    output, hence the 0.0 default.
        timeout: Request timeout in seconds.

    Returns:
        ChatOpenAI: Configured client.

    Raises:
        ValueError: If no provider is configured or the requested one has
                   no API key.
    """

    if provider == "auto":
        if config.PERPLEXITY_API_KEY:
            logger.debug("Using Perplexity as LLM provider (primary)")
            return _create_client("perplexity", temperature, timeout)
        if config.OPENAI_API_KEY:
            logger.debug("Perplexity API key not set; using OpenAI")
            return _create_client("openai", temperature, timeout)
        raise ValueError(
            "No LLM provider configured. "
            "Set either PERPLEXITY_API_KEY or OPENAI_API_KEY in .env"
        )

    if provider in ("perplexity", "openai"):
        return _create_client(provider, temperature, timeout)

    raise ValueError(f"Unknown provider: {provider}. Use 'auto', 'perplexity', or 'openai'")


def _create_client(
    provider: Literal["perplexity", "openai"], temperature: float, timeout: int
) -> ChatOpenAI:
    """Build a ChatOpenAI client for the given provider."""

    if provider == "perplexity":
        if not config.PERPLEXITY_API_KEY:
            raise ValueError(
                "Perplexity provider requested but PERPLEXITY_API_KEY not set in .env"
            )
        return ChatOpenAI(
            api_key=config.PERPLEXITY_API_KEY,
            model=config.PERPLEXITY_MODEL,
            base_url=PERPLEXITY_BASE_URL,
            temperature=temperature,
            timeout=timeout,
        )

    if not config.OPENAI_API_KEY:
        raise ValueError(
            "OpenAI provider requested but OPENAI_API_KEY not set in .env"
        )
    return ChatOpenAI(
        api_key=config.OPENAI_API_KEY,
        model=config.OPENAI_MODEL,
        temperature=temperature,
        timeout=timeout,
    )


def is_llm_configured() -> bool:
    """True when at least one provider key is set."""

    return bool(config.PERPLEXITY_API_KEY or config.OPENAI_API_KEY)
