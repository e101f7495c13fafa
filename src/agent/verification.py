"""Parsing of deployment-verification requests and formatting of their results.

parse_verification_input() turns a chat message such as

    verify https://github.com/acme/app deployment at https://app.vercel.app branch: dev

into VerificationParams for the GitHub verifier. format_verification_result()
renders the verifier's answer as the Markdown reply shown in the chat.
"""

import re
from typing import Optional

from src.schemas.verification import VerificationParams, VerificationResult

REQUEST_KEYWORDS = ("verify", "check", "deployment")

URL_PATTERN = re.compile(r"https?://\S+")
OWNER_REPO_PATTERN = re.compile(r"([A-Za-z0-9_-]+)/([A-Za-z0-9_-]+)")
BRANCH_PATTERN = re.compile(r"\bbranch[:\s]+(\S+)", re.IGNORECASE)
FILE_PATTERN = re.compile(r"\bfile[:\s]+(\S+)", re.IGNORECASE)


def parse_verification_input(text: str) -> Optional[VerificationParams]:
    """Extract verification parameters from free text.

    Returns None when the text is not a verification request or names no
    deployed URL. Without a GitHub URL, the first `owner/repo` token outside
    of any URL names the repository; if there is none, the params carry no
    repo reference and the verifier rejects them.
    """
    lowered = text.lower()
    if not any(keyword in lowered for keyword in REQUEST_KEYWORDS):
        return None

    github_url = None
    deployed_url = None
    for url in URL_PATTERN.findall(text):
        if "github.com" in url:
            if github_url is None:
                github_url = url
        elif deployed_url is None:
            deployed_url = url

    if deployed_url is None:
        return None

    branch_match = BRANCH_PATTERN.search(text)
    file_match = FILE_PATTERN.search(text)

    params = {
        "deployed_url": deployed_url,
        "branch": branch_match.group(1) if branch_match else None,
        "file_to_check": file_match.group(1) if file_match else None,
    }

    if github_url:
        params["repo_url"] = github_url
    else:
        without_urls = URL_PATTERN.sub(" ", text)
        owner_repo = OWNER_REPO_PATTERN.search(without_urls)
        if owner_repo:
            params["owner"], params["repo"] = owner_repo.group(1), owner_repo.group(2)

    return VerificationParams(**params)


def format_verification_result(result: VerificationResult) -> str:
    """Render a verification outcome as Markdown for the chat."""
    output = "## GitHub Deployment Verification\n\n"

    output += f"**Status:** {'✅ VERIFIED' if result.verified else '❌ NOT VERIFIED'}\n"
    output += f"**Message:** {result.message}\n\n"

    if result.commit_sha:
        output += f"**Commit SHA:** `{result.commit_sha}`\n"

    output += f"**Deployed URL:** {result.deployed_url}\n"

    if result.error:
        output += f"**Error:** {result.error}\n"
    else:
        output += f"**File Match:** {'✅ Yes' if result.file_match else '❌ No'}\n"

        if not result.file_match and result.repo_file and result.deployed_file:
            output += "\n**Differences detected:**\n"
            output += f"- Repo file preview: `{result.repo_file}`\n"
            output += f"- Deployed file preview: `{result.deployed_file}`\n"

    if result.verified:
        output += (
            "\n🎉 **The deployment matches the GitHub repository!** This means the deployed code "
            "is authentic and matches the source code in the repository."
        )
    else:
        output += "\n⚠️ **The deployment does not match the GitHub repository.** This could indicate:"
        output += "\n- The deployment is from a different commit"
        output += "\n- Local changes were made that aren't in the repo"
        output += "\n- The file doesn't exist at the deployed URL"
        output += "\n- There's a configuration or build process difference"

    return output
