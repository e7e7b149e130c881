"""Commit message checks using Chain of Responsibility pattern.

Unlike a fail-fast chain, every handler runs: each one contributes at most
one finding and the chain returns them in handler order.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..config import Config
from ..models import CommitMessage, Finding, RejectTooLong, Severity

BRANCH_REF_PREFIX = "refs/heads/"


def is_branch_ref(ref_name: Optional[str]) -> bool:
    """True for durable branch refs; review refs and malformed names are not."""
    return bool(ref_name) and ref_name.startswith(BRANCH_REF_PREFIX)


def too_long_severity(policy: RejectTooLong, ref_name: Optional[str]) -> Severity:
    """Resolve the severity of a too-long finding for the target ref."""
    if policy is RejectTooLong.ALWAYS:
        return Severity.ERROR
    elif policy is RejectTooLong.FOR_REVIEW_ONLY:
        return Severity.WARNING if is_branch_ref(ref_name) else Severity.ERROR
    elif policy is RejectTooLong.NEVER:
        return Severity.WARNING
    raise ValueError(f"Unknown reject policy: {policy!r}")


@dataclass(frozen=True)
class LineStats:
    non_empty: int
    subject_lines: int
    long_lines: int


def classify_lines(commit: CommitMessage, max_line_length: int) -> LineStats:
    """Count non-empty, subject and over-long lines of the full message."""
    non_empty = subject_lines = long_lines = 0
    for line in commit.full_message.split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            # subject can span multiple lines
            if line in commit.short_message:
                subject_lines += 1
            non_empty += 1
        if len(line) > max_line_length:
            long_lines += 1
    return LineStats(non_empty=non_empty, subject_lines=subject_lines, long_lines=long_lines)


@dataclass(frozen=True)
class ValidationContext:
    commit: CommitMessage
    ref_name: Optional[str]
    stats: LineStats


class ValidationHandler(ABC):
    """Abstract base class for validation handlers."""

    def __init__(self, config: Config, next_handler: Optional['ValidationHandler'] = None):
        self.config = config
        self.next_handler = next_handler

    def handle(self, context: ValidationContext) -> List[Finding]:
        """Run this check, then the rest of the chain."""
        findings = []
        message = self.validate(context)
        if message is not None:
            findings.append(Finding(
                text=f"{context.commit.commit_id}: {message}",
                severity=self.severity(context.ref_name),
            ))
        if self.next_handler:
            findings.extend(self.next_handler.handle(context))
        return findings

    @abstractmethod
    def validate(self, context: ValidationContext) -> Optional[str]:
        """Return the violation message, or None when the check passes."""
        pass

    @abstractmethod
    def severity(self, ref_name: Optional[str]) -> Severity:
        pass


class TooLongHandler(ValidationHandler):
    """Base for checks governed by the reject-too-long policy."""

    def severity(self, ref_name: Optional[str]) -> Severity:
        return too_long_severity(self.config.reject_too_long, ref_name)


class SubjectLengthHandler(TooLongHandler):
    """Validates the subject line length."""

    def validate(self, context: ValidationContext) -> Optional[str]:
        limit = self.config.max_subject_length
        if len(context.commit.short_message) > limit:
            return f"commit subject >{limit} characters; use shorter first paragraph"
        return None


class MissingBodyHandler(ValidationHandler):
    """Validates that something besides subject and footers is present."""

    def validate(self, context: ValidationContext) -> Optional[str]:
        stats = context.stats
        body_lines = stats.non_empty - context.commit.footer_line_count - stats.subject_lines
        if body_lines <= 0:
            return "Commit message is missing a body"
        return None

    def severity(self, ref_name: Optional[str]) -> Severity:
        return Severity.ERROR if self.config.reject_no_msg_body else Severity.WARNING


class LongLinesHandler(TooLongHandler):
    """Validates the share of lines longer than max_line_length."""

    def validate(self, context: ValidationContext) -> Optional[str]:
        stats = context.stats
        if stats.non_empty == 0:
            return None
        allowed = (self.config.long_lines_threshold * stats.non_empty) // 100
        if stats.long_lines > allowed:
            return (f"too many commit message lines longer than "
                    f"{self.config.max_line_length} characters; manually wrap lines")
        return None


def create_validation_chain(config: Config) -> ValidationHandler:
    """Create the default validation chain."""
    long_lines = LongLinesHandler(config)
    missing_body = MissingBodyHandler(config, long_lines)
    subject_length = SubjectLengthHandler(config, missing_body)

    return subject_length
