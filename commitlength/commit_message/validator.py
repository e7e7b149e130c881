"""Commit message validation."""
from typing import Optional

from ..config import Config
from ..models import CommitMessage, ValidationOutcome
from .validation import ValidationContext, classify_lines, create_validation_chain


class CommitMessageValidator:
    """Validates commit messages against a fixed configuration.

    Holds no per-call state, so one instance can serve concurrent checks.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.validation_chain = create_validation_chain(self.config)

    def validate(self, commit: CommitMessage, ref_name: Optional[str]) -> ValidationOutcome:
        """Validate a commit message for an update of ref_name."""
        stats = classify_lines(commit, self.config.max_line_length)
        context = ValidationContext(commit=commit, ref_name=ref_name, stats=stats)
        findings = self.validation_chain.handle(context)
        return ValidationOutcome(findings=findings, rejected=any(f.is_error for f in findings))


def validate(commit: CommitMessage, ref_name: Optional[str], config: Config) -> ValidationOutcome:
    """Check a commit message against the configured length rules.

    Pure function: no I/O and no shared state. Never raises for well-typed
    input, including empty messages and empty ref names.
    """
    return CommitMessageValidator(config).validate(commit, ref_name)
