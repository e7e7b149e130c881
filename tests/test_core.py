"""Tests for checking pushed commits."""
from pathlib import Path

import pytest
from rich.console import Console

from commitlength.commits import ZERO_SHA
from commitlength.config import Config
from commitlength.core import PushValidator, RefUpdate, parse_ref_updates
from commitlength.models import RejectTooLong
from commitlength.observers import ConsoleLogObserver, FileLogObserver, ValidationObserver


class RecordingObserver(ValidationObserver):
    def __init__(self):
        self.commits = []
        self.updates = []

    def on_commit_checked(self, commit, outcome, ref_name):
        self.commits.append((commit.short_message, outcome.rejected, ref_name))

    def on_update_checked(self, ref_name, rejected):
        self.updates.append((ref_name, rejected))


def test_parse_ref_updates():
    updates = parse_ref_updates([
        f"{ZERO_SHA} {'a' * 40} refs/heads/feature\n",
        "\n",
        f"{'b' * 40} {'c' * 40} refs/for/main\n",
    ])
    assert updates == [
        RefUpdate(ZERO_SHA, "a" * 40, "refs/heads/feature"),
        RefUpdate("b" * 40, "c" * 40, "refs/for/main"),
    ]


def test_parse_ref_updates_malformed():
    with pytest.raises(ValueError, match="Malformed ref update line"):
        parse_ref_updates(["only-one-field"])


def test_check_update_warnings_only(repo_with_history):
    repo_path, base, head = repo_with_history
    validator = PushValidator(repo_path)

    results = validator.check_update(base, head, "refs/heads/main")

    assert len(results) == 2
    (_, first), (_, second) = results
    assert first.findings == []
    assert len(second.findings) == 1
    assert second.findings[0].render().startswith(f"(W) {head[:7]}: commit subject >65")
    assert not any(outcome.rejected for _, outcome in results)


@pytest.mark.parametrize(
    "policy, ref_name, rejected",
    [
        (RejectTooLong.ALWAYS, "refs/heads/main", True),
        (RejectTooLong.FOR_REVIEW_ONLY, "refs/heads/main", False),
        (RejectTooLong.FOR_REVIEW_ONLY, "refs/for/main", True),
        (RejectTooLong.NEVER, "refs/for/main", False),
    ],
)
def test_check_push(repo_with_history, policy, ref_name, rejected):
    repo_path, base, head = repo_with_history
    validator = PushValidator(repo_path, Config(reject_too_long=policy))
    observer = RecordingObserver()
    validator.add_observer(observer)

    accepted = validator.check_push([f"{base} {head} {ref_name}\n"])

    assert accepted is not rejected
    assert observer.commits == [
        ("Update test content", False, ref_name),
        ("Refactor the commit message validator so the subject gets very long!", rejected, ref_name),
    ]
    assert observer.updates == [(ref_name, rejected)]


def test_check_push_deleted_ref(repo_with_history):
    repo_path, base, head = repo_with_history
    validator = PushValidator(repo_path, Config(reject_too_long="Always"))

    assert validator.check_push([f"{head} {ZERO_SHA} refs/heads/old"])


def test_check_revision(repo_with_history):
    repo_path, base, head = repo_with_history
    validator = PushValidator(repo_path, Config(reject_too_long="Always"))

    results = validator.check_revision("HEAD", "refs/heads/main")

    assert len(results) == 1
    commit, outcome = results[0]
    assert commit.commit_id == head[:7]
    assert outcome.rejected


def test_remove_observer(temp_git_repo):
    validator = PushValidator(temp_git_repo)
    observer = RecordingObserver()
    validator.add_observer(observer)
    validator.remove_observer(observer)

    validator.check_revision("HEAD", "refs/heads/main")

    assert observer.commits == []


def test_console_log_observer(repo_with_history):
    repo_path, base, head = repo_with_history
    console = Console(record=True, width=200)
    validator = PushValidator(repo_path, Config(reject_too_long="ForReviewOnly"))
    validator.add_observer(ConsoleLogObserver(console))

    validator.check_update(base, head, "refs/for/main")

    output = console.export_text()
    assert f"{head[:7]}: commit subject >65 characters" in output
    assert "(W)" not in output
    assert "Commit message validation failed for refs/for/main" in output


def test_file_log_observer(repo_with_history, tmp_path):
    repo_path, base, head = repo_with_history
    log_file = tmp_path / "logs" / "commitlength.log"
    validator = PushValidator(repo_path)
    validator.add_observer(FileLogObserver(str(log_file)))

    validator.check_update(base, head, "refs/heads/main")

    lines = log_file.read_text().splitlines()
    assert len(lines) == 4
    assert lines[0].endswith("accepted for refs/heads/main")
    assert lines[2].endswith("(W) " + head[:7] + ": commit subject >65 characters; use shorter first paragraph")
    assert lines[3].endswith("Accepted update of refs/heads/main")
    assert Path(log_file).parent.is_dir()
