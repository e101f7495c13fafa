"""GitHub deployment verifier.

Answers "is the site at <deployed_url> built from <owner>/<repo>@<branch>?"
by comparing one file:

  1. Resolve the branch head commit via the GitHub REST API
  2. Read <file_to_check> from the repo at that commit
  3. Fetch <deployed_url>/<file_to_check> from the live deployment
  4. Compare both after trimming surrounding whitespace

GITHUB_TOKEN is optional: public repositories work unauthenticated, with
GitHub's lower rate limit.
"""

import base64
import binascii
import os
import re
from typing import Optional

import httpx

from src.schemas.verification import (
    DEFAULT_BRANCH,
    DEFAULT_FILE_TO_CHECK,
    VerificationParams,
    VerificationResult,
)
from src.utils.logging import log, get_logger

MODULE = "github"
logger = get_logger()

GITHUB_TOKEN = os.getenv("GITHUB_TOKEN", "")
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")

# Deployed artifacts are small config files; give up quickly
FETCH_TIMEOUT = 10

# Characters of each file shown back to the user
PREVIEW_LENGTH = 500

USER_AGENT = "Trakt-GitHub-Verifier/1.0"

GITHUB_URL_PATTERN = re.compile(r"github\.com/([^/]+)/([^/]+)")


class VerificationError(Exception):
    """Raised when a verification step cannot complete."""


def parse_github_url(repo_url: str) -> tuple[str, str]:
    """Split https://github.com/<owner>/<repo>[.git] into (owner, repo)."""
    match = GITHUB_URL_PATTERN.search(repo_url)
    if not match:
        raise VerificationError(
            "Invalid GitHub URL format. Expected: https://github.com/owner/repo"
        )
    owner, repo = match.group(1), match.group(2)
    repo = re.sub(r"\.git$", "", repo)
    return owner, repo


def _preview(content: str) -> str:
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + "..."
    return content


class GitHubDeploymentVerifier:
    """Deployment verifier collaborator for the chat graph.

    `transport` is handed to every httpx.AsyncClient the verifier opens;
    tests pass an httpx.MockTransport.
    """

    def __init__(
        self,
        token: str = GITHUB_TOKEN,
        api_url: str = GITHUB_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            timeout=FETCH_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    def _api_headers(self) -> dict:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def get_repo_commit(self, owner: str, repo: str, branch: str = DEFAULT_BRANCH) -> str:
        """Head commit SHA of a branch."""
        async with self._client() as client:
            try:
                resp = await client.get(
                    f"{self.api_url}/repos/{owner}/{repo}/branches/{branch}",
                    headers=self._api_headers(),
                )
                resp.raise_for_status()
                return resp.json()["commit"]["sha"]
            except (httpx.HTTPError, KeyError, ValueError) as e:
                raise VerificationError(
                    f"Failed to get commit for {owner}/{repo}@{branch}: {e}"
                ) from e

    async def get_file_content_at_commit(
        self, owner: str, repo: str, commit_sha: str, path: str,
    ) -> str:
        """Decoded content of a file at a given commit."""
        async with self._client() as client:
            try:
                resp = await client.get(
                    f"{self.api_url}/repos/{owner}/{repo}/contents/{path}",
                    params={"ref": commit_sha},
                    headers=self._api_headers(),
                )
                resp.raise_for_status()
                data = resp.json()
            except (httpx.HTTPError, ValueError) as e:
                raise VerificationError(f"Failed to get file content for {path}: {e}") from e

        if isinstance(data, list):
            raise VerificationError(f"Path {path} is a directory, not a file")
        if "content" not in data:
            raise VerificationError(f"File {path} not found or is not a regular file")
        try:
            raw = base64.b64decode(data["content"])
        except (binascii.Error, TypeError) as e:
            raise VerificationError(f"File {path} has undecodable content: {e}") from e
        # Binary files still compare; invalid bytes become U+FFFD
        return raw.decode("utf-8", errors="replace")

    async def fetch_deployed_file(self, url: str) -> str:
        """Raw body of a file served by the deployment."""
        async with self._client() as client:
            try:
                resp = await client.get(url)
                resp.raise_for_status()
                return resp.text
            except httpx.HTTPError as e:
                raise VerificationError(f"Failed to fetch deployed file from {url}: {e}") from e

    async def verify_repo_deployment(
        self,
        owner: str,
        repo: str,
        deployed_url: str,
        branch: str = DEFAULT_BRANCH,
        file_to_check: str = DEFAULT_FILE_TO_CHECK,
    ) -> VerificationResult:
        """Compare one file between the repo branch head and the deployment.

        Step failures come back as an unverified result with `error` set.
        """
        log.info(logger, MODULE, "verify_start", "Starting deployment verification",
                 repo=f"{owner}/{repo}", branch=branch,
                 deployed_url=deployed_url, file=file_to_check)
        try:
            commit_sha = await self.get_repo_commit(owner, repo, branch)
            repo_content = await self.get_file_content_at_commit(
                owner, repo, commit_sha, file_to_check,
            )
            deployed_file_url = f"{deployed_url.rstrip('/')}/{file_to_check}"
            deployed_content = await self.fetch_deployed_file(deployed_file_url)
        except VerificationError as e:
            log.warning(logger, MODULE, "verify_failed", "Deployment verification failed",
                        repo=f"{owner}/{repo}", error=str(e))
            return VerificationResult(
                verified=False,
                commit_sha="",
                deployed_url=deployed_url,
                file_match=False,
                message=f"❌ Verification failed: {e}",
                error=str(e),
            )

        repo_content = repo_content.strip()
        deployed_content = deployed_content.strip()
        file_match = repo_content == deployed_content
        short_sha = commit_sha[:7]

        result = VerificationResult(
            verified=file_match,
            commit_sha=commit_sha,
            deployed_url=deployed_url,
            file_match=file_match,
            message=(
                f"✅ Deployment matches repo code at commit {short_sha}"
                if file_match
                else f"❌ Deployment does NOT match repo code at commit {short_sha}"
            ),
            repo_file=_preview(repo_content),
            deployed_file=_preview(deployed_content),
        )
        log.info(logger, MODULE, "verify_done", "Deployment verification complete",
                 repo=f"{owner}/{repo}", commit=short_sha, verified=file_match)
        return result

    async def verify_deployment_from_url(
        self,
        repo_url: str,
        deployed_url: str,
        branch: str = DEFAULT_BRANCH,
        file_to_check: str = DEFAULT_FILE_TO_CHECK,
    ) -> VerificationResult:
        owner, repo = parse_github_url(repo_url)
        return await self.verify_repo_deployment(
            owner, repo, deployed_url, branch=branch, file_to_check=file_to_check,
        )

    async def verify(self, params: VerificationParams) -> VerificationResult:
        """Verify a deployment from parsed chat parameters."""
        if not params.has_repo_reference:
            raise VerificationError(
                "No repository given. Include a GitHub URL or an owner/repo name."
            )

        branch = params.branch or DEFAULT_BRANCH
        file_to_check = params.file_to_check or DEFAULT_FILE_TO_CHECK

        if params.repo_url:
            return await self.verify_deployment_from_url(
                params.repo_url, params.deployed_url,
                branch=branch, file_to_check=file_to_check,
            )
        return await self.verify_repo_deployment(
            params.owner, params.repo, params.deployed_url,
            branch=branch, file_to_check=file_to_check,
        )
