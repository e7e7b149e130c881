"""Checking pushed commits for commitlength."""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from git import Repo

from .commit_message import CommitMessageValidator
from .commits import commit_message_from_git, commits_for_revision, commits_for_update
from .config import Config
from .models import CommitMessage, ValidationOutcome
from .observers import ValidationObserver

CheckResult = Tuple[CommitMessage, ValidationOutcome]


@dataclass(frozen=True)
class RefUpdate:
    old_sha: str
    new_sha: str
    ref_name: str


def parse_ref_updates(lines: Iterable[str]) -> List[RefUpdate]:
    """Parse `<old> <new> <ref>` lines as fed to a pre-receive hook."""
    updates = []
    for line in lines:
        parts = line.split()
        if not parts:
            continue
        if len(parts) != 3:
            raise ValueError(f"Malformed ref update line: {line.strip()!r}")
        updates.append(RefUpdate(*parts))
    return updates


class PushValidator:
    """Validates the commit messages a push introduces."""

    def __init__(self, repo_path: str, config: Optional[Config] = None):
        """Initialize the validator with a Git repository."""
        self.repo = Repo(repo_path)
        self.repo_path = repo_path
        self.validator = CommitMessageValidator(config)
        self.observers: List[ValidationObserver] = []

    @property
    def config(self) -> Config:
        return self.validator.config

    def add_observer(self, observer: ValidationObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        self.observers.remove(observer)

    def _check_commits(self, commits, ref_name: str) -> List[CheckResult]:
        results = []
        for git_commit in commits:
            commit = commit_message_from_git(git_commit)
            outcome = self.validator.validate(commit, ref_name)
            for observer in self.observers:
                observer.on_commit_checked(commit, outcome, ref_name)
            results.append((commit, outcome))
        return results

    def check_update(self, old_sha: str, new_sha: str, ref_name: str) -> List[CheckResult]:
        """Validate every commit a single ref update introduces."""
        commits = commits_for_update(self.repo, old_sha, new_sha)
        results = self._check_commits(commits, ref_name)
        rejected = any(outcome.rejected for _, outcome in results)
        for observer in self.observers:
            observer.on_update_checked(ref_name, rejected)
        return results

    def check_push(self, lines: Iterable[str]) -> bool:
        """Validate all ref updates of a push.

        Returns:
            bool: True if the push may proceed, False if any commit is rejected
        """
        accepted = True
        for update in parse_ref_updates(lines):
            results = self.check_update(update.old_sha, update.new_sha, update.ref_name)
            if any(outcome.rejected for _, outcome in results):
                accepted = False
        return accepted

    def check_revision(self, revision: str, ref_name: str) -> List[CheckResult]:
        """Validate existing commits, e.g. `HEAD` or `main..feature`."""
        return self._check_commits(commits_for_revision(self.repo, revision), ref_name)
