"""Commit message validation package."""

from .validation import (
    ValidationHandler,
    SubjectLengthHandler,
    MissingBodyHandler,
    LongLinesHandler,
    create_validation_chain,
)
from .validator import CommitMessageValidator, validate

__all__ = [
    'ValidationHandler',
    'SubjectLengthHandler',
    'MissingBodyHandler',
    'LongLinesHandler',
    'create_validation_chain',
    'CommitMessageValidator',
    'validate',
]
