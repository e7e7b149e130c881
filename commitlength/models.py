"""Shared models for commitlength."""
from typing import List
from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

WARNING_PREFIX = "(W) "


class RejectTooLong(str, Enum):
    """Policy for turning too-long findings into rejections."""

    ALWAYS = "Always"
    FOR_REVIEW_ONLY = "ForReviewOnly"
    NEVER = "Never"


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class CommitMessage:
    short_message: str
    full_message: str
    footer_line_count: int
    commit_id: str


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    severity: Severity

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def render(self) -> str:
        """Text shown to the submitter; warnings carry the (W) marker."""
        if self.is_error:
            return self.text
        return WARNING_PREFIX + self.text


class ValidationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    findings: List[Finding] = Field(default_factory=list, description="Findings in check order")
    rejected: bool = Field(default=False, description="Whether the commit must be refused")

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.is_error]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if not f.is_error]
