"""Build CommitMessage values from git commits and raw message text."""
import re
from typing import List, Union

from git import Repo
from git.objects import Commit

from .models import CommitMessage

ZERO_SHA = "0" * 40
DEFAULT_ABBREV = 7

PARAGRAPH_BREAK = re.compile(r"\r?\n[ \t]*\r?\n")
LINE_BREAK = re.compile(r"\r?\n")
FOOTER_KEY = re.compile(r"^[A-Za-z0-9-]+:")
# `git commit -v` puts the diff below this line
SCISSORS = re.compile(r"^# -+ >8 -+\s*$", re.MULTILINE)


def _decode(message: Union[str, bytes]) -> str:
    if isinstance(message, bytes):
        return message.decode("utf-8", errors="replace")
    return message


def short_message(full_message: str) -> str:
    """First paragraph of a message, joined into one line."""
    paragraph = PARAGRAPH_BREAK.split(full_message.lstrip("\r\n"), maxsplit=1)[0]
    return LINE_BREAK.sub(" ", paragraph).rstrip()


def count_footer_lines(full_message: str) -> int:
    """Count `Key: value` lines in the trailing paragraph.

    The first line of the message is never a footer. Lines in the last
    paragraph that are not well formed footers are skipped.
    """
    lines = LINE_BREAK.split(full_message.rstrip("\r\n"))
    count = 0
    for line in reversed(lines[1:]):
        if not line.strip():
            break
        if FOOTER_KEY.match(line):
            count += 1
    return count


def strip_comments(text: str) -> str:
    """Drop `#` comment lines and surrounding blank lines, as git does.

    Everything from a scissors line on is dropped too.
    """
    scissors = SCISSORS.search(text)
    if scissors:
        text = text[:scissors.start()]
    lines = [line for line in LINE_BREAK.split(text) if not line.startswith("#")]
    return "\n".join(lines).strip("\n")


def commit_message_from_text(text: str, commit_id: str = "0" * DEFAULT_ABBREV) -> CommitMessage:
    """Build a CommitMessage from a message file, e.g. in a commit-msg hook."""
    full_message = strip_comments(text)
    return CommitMessage(
        short_message=short_message(full_message),
        full_message=full_message,
        footer_line_count=count_footer_lines(full_message),
        commit_id=commit_id,
    )


def commit_message_from_git(commit: Commit, abbrev: int = DEFAULT_ABBREV) -> CommitMessage:
    """Build a CommitMessage from a GitPython commit."""
    full_message = _decode(commit.message)
    return CommitMessage(
        short_message=short_message(full_message),
        full_message=full_message,
        footer_line_count=count_footer_lines(full_message),
        commit_id=commit.hexsha[:abbrev],
    )


def commits_for_update(repo: Repo, old_sha: str, new_sha: str) -> List[Commit]:
    """New commits introduced by a ref update, oldest first.

    A deleted ref introduces nothing. For a newly created ref, only commits
    not yet reachable from any existing ref are returned.
    """
    if new_sha == ZERO_SHA:
        return []
    if old_sha == ZERO_SHA:
        output = repo.git.rev_list(new_sha, "--not", "--all", reverse=True)
        return [repo.commit(sha) for sha in output.split()]
    return list(repo.iter_commits(f"{old_sha}..{new_sha}", reverse=True))


def commits_for_revision(repo: Repo, revision: str) -> List[Commit]:
    """Commits named by a single revision or an `a..b` range, oldest first."""
    if ".." in revision:
        return list(repo.iter_commits(revision, reverse=True))
    return [repo.commit(revision)]
