"""Commit message length checks for pre-receive and commit-msg hooks."""

__version__ = "0.1.0"

from .models import CommitMessage, Finding, RejectTooLong, Severity, ValidationOutcome
from .config import Config
from .commit_message import CommitMessageValidator, validate

__all__ = [
    "CommitMessage",
    "Finding",
    "RejectTooLong",
    "Severity",
    "ValidationOutcome",
    "Config",
    "CommitMessageValidator",
    "validate",
]
