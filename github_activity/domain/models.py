from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

# Shared configuration: immutable, snake_case in Python, camelCase on the wire.
_DOMAIN_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class RepositorySummary(BaseModel):
    """
    Minimal metadata about one repository, enough to decide visibility
    and to address it when fetching commits.
    """
    model_config = _DOMAIN_CONFIG

    name: str = Field(..., description="Name of the repository")
    full_name: str = Field(..., description="owner/name slug")
    owner_login: str = Field(..., description="Login name of the repository owner")
    is_private: bool = Field(False, description="Whether the repository is private")


class CommitRecord(BaseModel):
    """A single commit reduced to what the activity report shows."""
    model_config = _DOMAIN_CONFIG

    sha: str
    summary_line: str = Field(..., description="First line of the commit message")
    author_name: str
    author_timestamp: datetime


class RepositoryActivity(BaseModel):
    """
    Recent commits of one non-private repository.
    This is the unit of the activity report.
    """
    model_config = _DOMAIN_CONFIG

    repository_name: str
    owner_login: str
    recent_commits: Tuple[CommitRecord, ...] = Field(
        default_factory=tuple,
        description="Commits in the order GitHub returned them",
    )


ActivityReport = List[RepositoryActivity]

_REPORT_ADAPTER = TypeAdapter(ActivityReport)


def report_to_json(report: ActivityReport, indent: Optional[int] = None) -> str:
    """Serializes an activity report using the camelCase wire names."""
    return _REPORT_ADAPTER.dump_json(report, by_alias=True, indent=indent).decode("utf-8")


def report_to_jsonable(report: ActivityReport) -> List[dict]:
    return _REPORT_ADAPTER.dump_python(report, mode="json", by_alias=True)
