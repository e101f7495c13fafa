"""LLM invocation package.

  from src.llm import LLMGenerator, extract_contract_code

  generator = LLMGenerator()
  answer = await generator.generate(ESCROW_SYSTEM, history, "Sell my NFT for 2 0G")
  extraction = extract_contract_code(answer)

Architecture:
  client.py   → provider fallback (compute network first, Groq second)
  invoker.py  → message assembly + one chat-completion call
  parser.py   → JSON and fenced-Solidity extraction from raw output
"""

from src.llm.client import get_llm, ProviderUnavailableError
from src.llm.invoker import invoke_llm_raw, build_messages, LLMGenerator
from src.llm.parser import (
    extract_json,
    extract_contract_code,
    JSONExtractionError,
)

__all__ = [
    "get_llm",
    "ProviderUnavailableError",
    "invoke_llm_raw",
    "build_messages",
    "LLMGenerator",
    "extract_json",
    "extract_contract_code",
    "JSONExtractionError",
]
