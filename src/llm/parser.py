"""Extraction of structured content from raw LLM answers.

Two kinds of payload are pulled out of free text here:

  extract_json()           → the contribution report the contribute node
                             asks for (models wrap it in prose, ``` fences,
                             or <think> tags)
  extract_contract_code()  → the Solidity contract the escrow node asks for,
                             separated from the explanation around it
"""

import json
import re
from typing import Any, Optional

from src.schemas.conversation import ContractExtraction
from src.utils.logging import log, get_logger

MODULE = "llm.parser"
logger = get_logger()

# First ```solidity fenced block, non-greedy so a later block is never swallowed
SOLIDITY_BLOCK = re.compile(r"```solidity(.*?)```", re.DOTALL | re.IGNORECASE)

JSON_BLOCK = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)


class JSONExtractionError(Exception):
    """Raised when JSON cannot be extracted from LLM output."""

    def __init__(self, message: str, raw_output: str):
        super().__init__(message)
        self.raw_output = raw_output


def extract_contract_code(text: str) -> ContractExtraction:
    """Split a model answer into the first Solidity block and the prose around it.

    Only the first ```solidity block counts as the contract; any later fenced
    block stays in the remainder untouched. Without a Solidity block the
    answer comes back unchanged as the remainder.

    >>> extract_contract_code("Here you go:\\n```solidity\\ncontract X {}\\n```\\nEnjoy.")
    ContractExtraction(code='contract X {}', remainder='Here you go:\\n\\nEnjoy.')
    """
    match = SOLIDITY_BLOCK.search(text)
    if not match:
        return ContractExtraction(code=None, remainder=text)

    code = match.group(1).strip()
    remainder = (text[:match.start()] + text[match.end():]).strip()

    log.debug(logger, MODULE, "contract_extracted", "Extracted Solidity block",
              code_length=len(code), remainder_length=len(remainder))
    return ContractExtraction(code=code, remainder=remainder)


def strip_think_tags(raw: str) -> tuple[str, Optional[str]]:
    """Strip a <think>...</think> block from reasoning-model output.

    Returns (content_after_think, thinking), or (raw, None) when there is
    no block.
    """
    think_match = re.search(r"<think>(.*?)</think>", raw, re.DOTALL)
    if think_match:
        thinking = think_match.group(1)
        after = raw[think_match.end():].strip()
        return after, thinking
    return raw, None


def extract_json(raw: str) -> Any:
    """Extract JSON from LLM output, handling common wrapper formats.

    Handles:
    - Raw JSON: {"key": "value"}
    - Markdown blocks: ```json\\n{"key": "value"}\\n```
    - <think> tags: <think>...</think>{"key": "value"}
    - Preamble / trailing text around a single object

    Raises:
        JSONExtractionError: If no valid JSON can be extracted
    """
    original_raw = raw
    raw, thinking = strip_think_tags(raw.strip())
    if thinking:
        log.debug(logger, MODULE, "stripped_think", "Stripped <think> tags from response")

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    block = JSON_BLOCK.search(raw)
    if block:
        try:
            return json.loads(block.group(1).strip())
        except json.JSONDecodeError:
            pass

    start = raw.find("{")
    if start != -1:
        candidate = _extract_balanced(raw[start:], "{", "}")
        if candidate:
            try:
                return json.loads(candidate)
            except json.JSONDecodeError:
                pass

    raise JSONExtractionError(
        f"Could not extract valid JSON from LLM output ({len(raw)} chars)",
        raw_output=original_raw,
    )


def _extract_balanced(text: str, open_char: str, close_char: str) -> Optional[str]:
    """Return the bracket expression that opens at text[0], or None if unbalanced."""
    if not text or text[0] != open_char:
        return None

    depth = 0
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if char == "\\" and in_string:
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[:i + 1]

    return None
