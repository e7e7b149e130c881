"""Observer pattern for validation reporting."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .models import CommitMessage, ValidationOutcome


class ValidationObserver(ABC):
    """Abstract base class for validation observers."""

    @abstractmethod
    def on_commit_checked(
        self, commit: CommitMessage, outcome: ValidationOutcome, ref_name: Optional[str]
    ) -> None:
        """Called after a single commit message was validated."""
        pass

    @abstractmethod
    def on_update_checked(self, ref_name: str, rejected: bool) -> None:
        """Called after every commit of a ref update was validated."""
        pass


class ConsoleLogObserver(ValidationObserver):
    """Observer that reports findings on the console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def on_commit_checked(
        self, commit: CommitMessage, outcome: ValidationOutcome, ref_name: Optional[str]
    ) -> None:
        for finding in outcome.findings:
            color = "red" if finding.is_error else "yellow"
            self.console.print(f"[{color}]{escape(finding.render())}[/{color}]", soft_wrap=True)

    def on_update_checked(self, ref_name: str, rejected: bool) -> None:
        if rejected:
            self.console.print(
                f"[red]Commit message validation failed for {escape(ref_name)}[/red]", soft_wrap=True
            )


class FileLogObserver(ValidationObserver):
    """Observer that logs validation results to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a") as f:
            f.write(f"{timestamp} - {message}\n")

    def on_commit_checked(
        self, commit: CommitMessage, outcome: ValidationOutcome, ref_name: Optional[str]
    ) -> None:
        status = "rejected" if outcome.rejected else "accepted"
        self._log(f"{commit.commit_id} {status} for {ref_name or '-'}")
        for finding in outcome.findings:
            self._log(finding.render())

    def on_update_checked(self, ref_name: str, rejected: bool) -> None:
        status = "Rejected" if rejected else "Accepted"
        self._log(f"{status} update of {ref_name}")
