"""
Tracker-agnostic models for issue-style (Jira) and board-style (Trello) data.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TrackerPlatform = Literal["jira", "trello"]


class TrackerCredentials(BaseModel):
    """Everything an adapter needs to authenticate against a tracker."""

    platform: TrackerPlatform
    api_key: str = Field("", description="Trello API key or Jira API token.")
    token: str = Field("", description="Trello member token; unused for Jira.")
    email: Optional[str] = Field(None, description="Jira account email.")
    domain: Optional[str] = Field(
        None, description="Jira site, e.g. your-company.atlassian.net."
    )


class TrackerUser(BaseModel):
    """The identity the credentials authenticate as."""

    id: str
    username: str = ""
    display_name: str = ""


class TrackerIssue(BaseModel):
    id: str
    key: str
    title: str
    description: str = ""
    status: str = "Unknown"
    created: Optional[str] = None
    updated: Optional[str] = None
    project_key: str = ""
    project_name: str = ""
    assigned_to_caller: bool = False


class TrackerProject(BaseModel):
    id: str
    key: str
    name: str
    issues: List[TrackerIssue] = Field(default_factory=list)


class IssueTrackerData(BaseModel):
    """Full graph fetched from an issue-style tracker."""

    model_config = ConfigDict(extra="forbid")

    user: TrackerUser
    projects: List[TrackerProject] = Field(default_factory=list)
    issues: List[TrackerIssue] = Field(default_factory=list)


class TrackerCard(BaseModel):
    id: str
    name: str
    description: str = ""
    url: Optional[str] = None
    completed: bool = False
    due_date: Optional[str] = None
    list_name: str = ""
    assigned_to_caller: bool = False


class TrackerList(BaseModel):
    id: str
    name: str
    cards: List[TrackerCard] = Field(default_factory=list)


class TrackerBoard(BaseModel):
    id: str
    name: str
    url: Optional[str] = None
    lists: List[TrackerList] = Field(default_factory=list)


class BoardTrackerData(BaseModel):
    """Full graph fetched from a board-style tracker.

    ``cards`` holds every fetched card; ``assigned_to_caller`` marks the ones
    the authenticated member belongs to.
    """

    model_config = ConfigDict(extra="forbid")

    user: TrackerUser
    boards: List[TrackerBoard] = Field(default_factory=list)
    cards: List[TrackerCard] = Field(default_factory=list)


TrackerData = Union[IssueTrackerData, BoardTrackerData]


class BoardStatus(BaseModel):
    total_cards: int
    completed_cards: int
    total_boards: int


class BoardStyleSummary(BaseModel):
    """Board-style tracker data classified for report synthesis."""

    type: Literal["boardStyle"] = "boardStyle"
    cards: List[TrackerCard] = Field(default_factory=list)
    boards: List[TrackerBoard] = Field(default_factory=list)
    status: BoardStatus


class IssueStats(BaseModel):
    total_issues: int
    completed_issues: int
    total_projects: int


class IssueStyleSummary(BaseModel):
    """Issue-style tracker data classified for report synthesis."""

    type: Literal["issueStyle"] = "issueStyle"
    issues: List[TrackerIssue] = Field(default_factory=list)
    projects: List[TrackerProject] = Field(default_factory=list)
    stats: IssueStats


ProcessedTrackerData = Annotated[
    Union[BoardStyleSummary, IssueStyleSummary], Field(discriminator="type")
]


__all__ = [
    "BoardStatus",
    "BoardStyleSummary",
    "BoardTrackerData",
    "IssueStats",
    "IssueStyleSummary",
    "IssueTrackerData",
    "ProcessedTrackerData",
    "TrackerBoard",
    "TrackerCard",
    "TrackerCredentials",
    "TrackerData",
    "TrackerIssue",
    "TrackerList",
    "TrackerPlatform",
    "TrackerProject",
    "TrackerUser",
]
