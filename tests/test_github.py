"""Tests for the GitHub deployment verifier against a mocked HTTP transport."""

import base64

import httpx
import pytest

from src.schemas.verification import VerificationParams
from src.tools.github import GitHubDeploymentVerifier, VerificationError, parse_github_url

PACKAGE_JSON = '{\n  "name": "app",\n  "version": "1.2.0"\n}\n'
SHA = "0123456789abcdef0123456789abcdef01234567"


def _transport(deployed_body=PACKAGE_JSON, branch_status=200, deployed_status=200, seen=None,
               repo_content=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        url = str(request.url)
        if request.url.host == "api.github.com" and "/branches/" in url:
            if branch_status != 200:
                return httpx.Response(branch_status, json={"message": "Branch not found"})
            return httpx.Response(200, json={"commit": {"sha": SHA}})
        if request.url.host == "api.github.com" and "/contents/" in url:
            content = repo_content or base64.b64encode(PACKAGE_JSON.encode()).decode()
            return httpx.Response(200, json={"type": "file", "content": content})
        return httpx.Response(deployed_status, text=deployed_body)

    return httpx.MockTransport(handler)


@pytest.mark.parametrize("url,expected", [
    ("https://github.com/acme/app", ("acme", "app")),
    ("https://github.com/acme/app.git", ("acme", "app")),
    ("https://github.com/acme/app/tree/main", ("acme", "app")),
])
def test_parse_github_url(url, expected):
    assert parse_github_url(url) == expected


def test_parse_github_url_rejects_other_hosts():
    with pytest.raises(VerificationError):
        parse_github_url("https://gitlab.com/acme")


@pytest.mark.asyncio
async def test_matching_deployment_is_verified():
    seen = []
    verifier = GitHubDeploymentVerifier(token="t0k", transport=_transport(seen=seen))
    result = await verifier.verify(VerificationParams(
        repo_url="https://github.com/acme/app", deployed_url="https://app.vercel.app/",
    ))

    assert result.verified is True
    assert result.file_match is True
    assert result.commit_sha == SHA
    assert result.message.endswith("0123456")
    assert result.error is None
    # defaults: main branch, package.json, trailing slash collapsed
    assert seen[0].url.path == "/repos/acme/app/branches/main"
    assert seen[0].headers["Authorization"] == "Bearer t0k"
    assert seen[1].url.params["ref"] == SHA
    assert str(seen[2].url) == "https://app.vercel.app/package.json"


@pytest.mark.asyncio
async def test_mismatch_reports_previews():
    deployed = '{"name": "app", "version": "1.1.0"}' + "x" * 600
    verifier = GitHubDeploymentVerifier(transport=_transport(deployed_body=deployed))
    result = await verifier.verify(VerificationParams(
        owner="acme", repo="app", deployed_url="https://acme.dev", branch="dev",
    ))

    assert result.verified is False
    assert result.file_match is False
    assert "does NOT match" in result.message
    assert result.repo_file == PACKAGE_JSON.strip()
    assert result.deployed_file.endswith("...")
    assert len(result.deployed_file) == 503


@pytest.mark.asyncio
async def test_missing_branch_becomes_error_result():
    verifier = GitHubDeploymentVerifier(transport=_transport(branch_status=404))
    result = await verifier.verify(VerificationParams(
        owner="acme", repo="app", deployed_url="https://acme.dev",
    ))

    assert result.verified is False
    assert result.commit_sha == ""
    assert "Failed to get commit for acme/app@main" in result.error


@pytest.mark.asyncio
async def test_unreachable_deployment_becomes_error_result():
    verifier = GitHubDeploymentVerifier(transport=_transport(deployed_status=404))
    result = await verifier.verify(VerificationParams(
        owner="acme", repo="app", deployed_url="https://acme.dev",
    ))

    assert result.error.startswith("Failed to fetch deployed file from https://acme.dev/package.json")


@pytest.mark.asyncio
async def test_binary_repo_file_is_compared_not_raised():
    png = base64.b64encode(b"\x89PNG\xff\xfe").decode()
    verifier = GitHubDeploymentVerifier(transport=_transport(repo_content=png))
    result = await verifier.verify(VerificationParams(
        owner="acme", repo="app", deployed_url="https://acme.dev", file_to_check="logo.png",
    ))

    assert result.error is None
    assert result.commit_sha == SHA
    assert result.file_match is False
    assert "�" in result.repo_file


@pytest.mark.asyncio
async def test_corrupt_repo_content_becomes_error_result():
    verifier = GitHubDeploymentVerifier(transport=_transport(repo_content="abc"))
    result = await verifier.verify(VerificationParams(
        owner="acme", repo="app", deployed_url="https://acme.dev",
    ))

    assert result.verified is False
    assert "undecodable content" in result.error


@pytest.mark.asyncio
async def test_params_without_repo_are_rejected():
    verifier = GitHubDeploymentVerifier(transport=_transport())
    with pytest.raises(VerificationError):
        await verifier.verify(VerificationParams(deployed_url="https://acme.dev"))
