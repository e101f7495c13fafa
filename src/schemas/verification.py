"""Pydantic schemas for GitHub deployment verification."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

DEFAULT_BRANCH = "main"
DEFAULT_FILE_TO_CHECK = "package.json"


class VerificationParams(BaseModel):
    """Parameters parsed out of a free-text verification request.

    Either `repo_url` or `owner` + `repo` identify the repository; a GitHub
    URL always wins over a bare `owner/repo` token. `branch` and
    `file_to_check` stay None when the user did not say, and the verifier
    falls back to DEFAULT_BRANCH / DEFAULT_FILE_TO_CHECK.
    """
    deployed_url: str
    repo_url: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: Optional[str] = None
    file_to_check: Optional[str] = None

    @model_validator(mode="after")
    def repo_url_excludes_owner_repo(self) -> "VerificationParams":
        if self.repo_url and (self.owner or self.repo):
            raise ValueError("repo_url and owner/repo are mutually exclusive")
        return self

    @property
    def has_repo_reference(self) -> bool:
        return bool(self.repo_url) or bool(self.owner and self.repo)


class VerificationResult(BaseModel):
    """Outcome of comparing a deployed artifact against the repository."""
    verified: bool
    commit_sha: str = ""
    deployed_url: str
    file_match: bool
    message: str
    repo_file: Optional[str] = Field(default=None, description="Truncated preview of the repo file")
    deployed_file: Optional[str] = Field(default=None, description="Truncated preview of the deployed file")
    error: Optional[str] = None
