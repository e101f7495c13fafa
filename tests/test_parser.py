"""Tests for extraction of contracts and JSON from raw LLM output."""

import pytest

from src.llm.parser import JSONExtractionError, extract_contract_code, extract_json


def test_scenario_single_block():
    result = extract_contract_code("Here you go:\n```solidity\ncontract X {}\n```\nEnjoy.")
    assert result.code == "contract X {}"
    assert result.remainder == "Here you go:\n\nEnjoy."


def test_no_block_returns_text_unchanged():
    text = "  No contract yet, which NFT do you want to sell?\n"
    result = extract_contract_code(text)
    assert result.code is None
    assert result.remainder == text


def test_untagged_fence_is_not_a_contract():
    text = "Example:\n```\ncontract X {}\n```"
    result = extract_contract_code(text)
    assert result.code is None
    assert result.remainder == text


def test_only_first_solidity_block_is_taken():
    text = (
        "First:\n```solidity\ncontract A {}\n```\n"
        "Second:\n```solidity\ncontract B {}\n```"
    )
    result = extract_contract_code(text)
    assert result.code == "contract A {}"
    assert "contract B {}" in result.remainder
    assert "contract A" not in result.remainder


def test_block_interior_is_trimmed_but_kept_intact():
    code = "pragma solidity ^0.8.20;\n\ncontract Escrow {\n    uint256 amount;\n}"
    result = extract_contract_code(f"```solidity\n\n{code}\n\n```")
    assert result.code == code
    assert result.remainder == ""


def test_extract_json_plain():
    assert extract_json('{"type": "error_report"}') == {"type": "error_report"}


def test_extract_json_from_markdown_block():
    raw = 'Sure!\n```json\n{"priority": "low"}\n```\nAnything else?'
    assert extract_json(raw) == {"priority": "low"}


def test_extract_json_after_think_tags():
    raw = '<think>they reported a bug</think>\nReport: {"type": "error_report", "details": "a } brace"}'
    assert extract_json(raw) == {"type": "error_report", "details": "a } brace"}


def test_extract_json_failure():
    with pytest.raises(JSONExtractionError):
        extract_json("I could not produce a report.")
