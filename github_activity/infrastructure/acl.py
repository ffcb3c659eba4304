from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field

from github_activity.domain.models import RepositorySummary, CommitRecord

# GitHub returns far more fields than we consume; unknown ones are dropped.
_PAYLOAD_CONFIG = ConfigDict(extra="ignore")


class OwnerPayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    login: str


class RepositoryPayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    name: str
    full_name: str
    owner: OwnerPayload
    is_private: bool = Field(False, alias="private")


class CommitAuthorPayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    name: str
    date: datetime


class CommitDetailsPayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    message: str
    author: CommitAuthorPayload


class CommitNodePayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    sha: str
    commit: CommitDetailsPayload


class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub REST JSON objects into domain models.
    """

    @staticmethod
    def to_repository_summary(raw_repo: Dict[str, Any]) -> RepositorySummary:
        """
        Transforms one element of a repository listing page into a RepositorySummary.

        Args:
            raw_repo (Dict[str, Any]): The raw JSON object from /users/{name}/repos or /orgs/{name}/repos.

        Returns:
            RepositorySummary: The domain model instance representing the repository.

        Raises:
            pydantic.ValidationError: If a required field is missing or has the wrong type.
        """
        payload = RepositoryPayload.model_validate(raw_repo)

        return RepositorySummary(
            name=payload.name,
            full_name=payload.full_name,
            owner_login=payload.owner.login,
            is_private=payload.is_private,
        )

    @staticmethod
    def to_commit_record(raw_commit: Dict[str, Any]) -> CommitRecord:
        """
        Transforms one element of a commit listing into a CommitRecord,
        keeping only the first line of the commit message.
        """
        payload = CommitNodePayload.model_validate(raw_commit)
        details = payload.commit

        return CommitRecord(
            sha=payload.sha,
            summary_line=details.message.split("\n", 1)[0],
            author_name=details.author.name,
            author_timestamp=details.author.date,
        )
