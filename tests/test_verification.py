"""Tests for verification request parsing and result formatting."""

import pytest

from src.agent.verification import format_verification_result, parse_verification_input
from src.schemas.verification import VerificationResult


@pytest.mark.parametrize("text", [
    "Create an escrow with https://app.vercel.app",
    "https://github.com/acme/app https://app.vercel.app",
    "",
])
def test_non_verification_requests_return_none(text):
    assert parse_verification_input(text) is None


def test_scenario_repo_url_and_branch():
    params = parse_verification_input(
        "verify https://github.com/acme/app deployment at https://app.vercel.app branch: dev"
    )
    assert params.repo_url == "https://github.com/acme/app"
    assert params.deployed_url == "https://app.vercel.app"
    assert params.branch == "dev"
    assert params.file_to_check is None
    assert params.owner is None and params.repo is None


def test_first_non_github_url_wins():
    params = parse_verification_input(
        "CHECK https://first.example.com then https://github.com/acme/app and https://second.example.com"
    )
    assert params.deployed_url == "https://first.example.com"
    assert params.repo_url == "https://github.com/acme/app"


def test_missing_deployed_url_returns_none():
    assert parse_verification_input("verify https://github.com/acme/app") is None


def test_owner_repo_from_text():
    params = parse_verification_input("check deployment https://app.netlify.app/docs for acme/web-app")
    assert params.owner == "acme"
    assert params.repo == "web-app"
    assert params.repo_url is None


def test_github_url_takes_precedence_over_owner_repo():
    params = parse_verification_input(
        "verify other/thing at https://github.com/acme/app deployed on https://acme.dev"
    )
    assert params.repo_url == "https://github.com/acme/app"
    assert params.owner is None


def test_no_repo_reference_leaves_owner_unset():
    params = parse_verification_input("verify https://acme.dev please")
    assert params.deployed_url == "https://acme.dev"
    assert not params.has_repo_reference


def test_file_and_branch_keywords():
    params = parse_verification_input(
        "Verify acme/app on https://acme.dev File: manifest.json Branch release-1"
    )
    assert params.file_to_check == "manifest.json"
    assert params.branch == "release-1"


def _result(**overrides):
    data = {
        "verified": True,
        "commit_sha": "abc1234def",
        "deployed_url": "https://acme.dev",
        "file_match": True,
        "message": "✅ Deployment matches repo code at commit abc1234",
    }
    data.update(overrides)
    return VerificationResult(**data)


def test_format_verified():
    text = format_verification_result(_result())
    assert text.startswith("## GitHub Deployment Verification\n\n")
    assert "**Status:** ✅ VERIFIED" in text
    assert "**Commit SHA:** `abc1234def`" in text
    assert "**File Match:** ✅ Yes" in text
    assert "🎉 **The deployment matches the GitHub repository!**" in text
    assert "Differences detected" not in text


def test_format_is_pure():
    result = _result()
    assert format_verification_result(result) == format_verification_result(result)


def test_format_mismatch_shows_previews():
    text = format_verification_result(_result(
        verified=False, file_match=False, message="❌ mismatch",
        repo_file='{"version": "1.0.0"}', deployed_file='{"version": "0.9.0"}',
    ))
    assert "**Status:** ❌ NOT VERIFIED" in text
    assert "**File Match:** ❌ No" in text
    assert "**Differences detected:**" in text
    assert '- Repo file preview: `{"version": "1.0.0"}`' in text
    assert "- The deployment is from a different commit" in text


def test_format_error_replaces_file_match_line():
    text = format_verification_result(_result(
        verified=False, file_match=False, commit_sha="", message="❌ failed",
        error="Failed to get commit",
    ))
    assert "**Error:** Failed to get commit" in text
    assert "File Match" not in text
    assert "Commit SHA" not in text
