import pytest
import tempfile
from pathlib import Path
from git import Repo

from commitlength.commits import count_footer_lines, short_message
from commitlength.models import CommitMessage

LONG_SUBJECT = "Refactor the commit message validator so the subject gets very long!"
BODY = "Explain what changed and why it was needed."

ENV_VARS = (
    "COMMITLENGTH_MAX_SUBJECT_LENGTH",
    "COMMITLENGTH_MAX_LINE_LENGTH",
    "COMMITLENGTH_LONG_LINES_THRESHOLD",
    "COMMITLENGTH_REJECT_TOO_LONG",
    "COMMITLENGTH_REJECT_NO_MSG_BODY",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep COMMITLENGTH_* variables of the developer's shell out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


def _make_commit(full_message, short=None, footers=None, commit_id="abc1234"):
    return CommitMessage(
        short_message=short_message(full_message) if short is None else short,
        full_message=full_message,
        footer_line_count=count_footer_lines(full_message) if footers is None else footers,
        commit_id=commit_id,
    )


@pytest.fixture
def make_commit():
    """Build a CommitMessage the way a host would."""
    return _make_commit


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        # Initialize git repo
        repo = Repo.init(tmp_dir)

        # Create a test file
        test_file = Path(tmp_dir) / "test.txt"
        test_file.write_text("Initial content")

        # Initial commit
        repo.index.add(["test.txt"])
        repo.index.commit("Initial commit\n\nCreate the repository with a test file.")

        yield tmp_dir


@pytest.fixture
def repo_with_history(temp_git_repo):
    """Repository with one well formed and one badly formed commit on top of the initial one.

    Yields the repo path, the initial commit sha and the final commit sha.
    """
    repo = Repo(temp_git_repo)
    base = repo.head.commit.hexsha
    test_file = Path(temp_git_repo) / "test.txt"

    test_file.write_text("Second content")
    repo.index.add(["test.txt"])
    repo.index.commit("Update test content\n\n" + BODY)

    test_file.write_text("Third content")
    repo.index.add(["test.txt"])
    repo.index.commit(LONG_SUBJECT + "\n\n" + BODY)

    yield temp_git_repo, base, repo.head.commit.hexsha
