"""LLM client configuration.

Every generation call in the chat graph goes through get_llm(). Two
interchangeable providers are configured, both OpenAI-compatible, so
LangChain's ChatOpenAI talks to either one:

  1. compute → decentralised compute-network endpoint serving
               llama-3.3-70b-instruct (preferred)
  2. groq    → Groq's hosted llama-3.3-70b-versatile (fallback)

Providers are tried in PROVIDER_ORDER. A provider whose configuration is
missing or whose client fails to construct is skipped with a *_fallback
log, and the next one is used. The routing logic never sees which one
answered.

The chosen client is cached per temperature, so the chain is walked (and
any fallback logged) once per process rather than on every call. Call
get_llm.cache_clear() after changing provider configuration.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from langchain_openai import ChatOpenAI

from src.utils.logging import log, get_logger

MODULE = "llm"
logger = get_logger()

# Primary: OpenAI-compatible compute-network endpoint
COMPUTE_LLM_URL = os.getenv("COMPUTE_LLM_URL", "")
COMPUTE_LLM_MODEL = os.getenv("COMPUTE_LLM_MODEL", "llama-3.3-70b-instruct")
COMPUTE_LLM_API_KEY = os.getenv("COMPUTE_LLM_API_KEY", "not-needed")

# Fallback: Groq
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")

DEFAULT_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))


class ProviderUnavailableError(Exception):
    """Raised when a provider cannot be initialised, or when none can."""


@dataclass(frozen=True)
class Provider:
    name: str
    base_url: str
    api_key: str
    model: str


def compute_provider() -> Provider:
    if not COMPUTE_LLM_URL:
        raise ProviderUnavailableError("COMPUTE_LLM_URL is not set")
    return Provider(
        name="compute",
        base_url=f"{COMPUTE_LLM_URL.rstrip('/')}/v1",
        api_key=COMPUTE_LLM_API_KEY,
        model=COMPUTE_LLM_MODEL,
    )


def groq_provider() -> Provider:
    if not GROQ_API_KEY:
        raise ProviderUnavailableError("GROQ_API_KEY is not set")
    return Provider(
        name="groq",
        base_url=GROQ_BASE_URL,
        api_key=GROQ_API_KEY,
        model=GROQ_MODEL,
    )


PROVIDER_ORDER: tuple[Callable[[], Provider], ...] = (compute_provider, groq_provider)


@lru_cache(maxsize=8)
def get_llm(temperature: float = DEFAULT_TEMPERATURE) -> ChatOpenAI:
    """Get a chat client from the first provider that initialises.

    Args:
        temperature: 0.0 = deterministic, 1.0 = creative.
            Default 0.7: chat answers are conversational, and escrow
            contracts benefit from some variation between attempts.

    Raises:
        ProviderUnavailableError: if no provider in PROVIDER_ORDER initialises.
    """
    failures = []
    for factory in PROVIDER_ORDER:
        try:
            provider = factory()
            client = ChatOpenAI(
                base_url=provider.base_url,
                api_key=provider.api_key,
                model=provider.model,
                temperature=temperature,
                max_tokens=4096,
            )
        except Exception as e:
            failures.append(f"{factory.__name__}: {e}")
            log.warning(logger, MODULE, "provider_fallback",
                        "Provider unavailable, trying next",
                        provider=factory.__name__, error=str(e))
            continue

        log.debug(logger, MODULE, "llm_init", "LLM client created",
                  provider=provider.name, base_url=provider.base_url,
                  model=provider.model, temperature=temperature)
        return client

    log.error(logger, MODULE, "provider_failed", "No LLM provider could be initialised",
              error="; ".join(failures))
    raise ProviderUnavailableError("No LLM provider could be initialised: " + "; ".join(failures))
