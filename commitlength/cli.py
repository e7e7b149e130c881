#!/usr/bin/env python3
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console

from .commit_message import CommitMessageValidator
from .commits import commit_message_from_text
from .config import DEFAULT_CONFIG_FILENAME, Config, describe
from .core import CheckResult, PushValidator
from .observers import ConsoleLogObserver, FileLogObserver, ValidationObserver

console = Console()


def load_config(repo_path: Path, config_file: Optional[Path]) -> Config:
    """Load settings from a git-config style file, or the repository's TOML file."""
    if config_file is not None:
        return Config.from_git_config(config_file)
    return Config.load(repo_path)


def build_observers(log_file: Optional[Path]) -> List[ValidationObserver]:
    observers: List[ValidationObserver] = [ConsoleLogObserver(console)]
    if log_file is not None:
        observers.append(FileLogObserver(str(log_file)))
    return observers


def print_config(config: Config, source: str) -> None:
    console.print("\n[bold]Current Configuration Settings:[/bold]")
    console.print(f"[dim]{source}[/dim]")
    console.print(f"\n{'Setting':<20} {'Value':<20}")
    console.print("-" * 40)
    for name, value in describe(config).items():
        console.print(f"{name:<20} {value:<20}")


def check_message_file(
    message_file: Path, ref_name: str, config: Config, observers: List[ValidationObserver]
) -> bool:
    """Validate a commit message file, as a commit-msg hook does."""
    commit = commit_message_from_text(message_file.read_text(encoding="utf-8", errors="replace"))
    outcome = CommitMessageValidator(config).validate(commit, ref_name)
    for observer in observers:
        observer.on_commit_checked(commit, outcome, ref_name)
    return not outcome.rejected


def summarize(results: List[CheckResult]) -> bool:
    rejected = [commit.commit_id for commit, outcome in results if outcome.rejected]
    if rejected:
        console.print(
            f"[red]Commit message validation failed: {', '.join(rejected)}[/red]", soft_wrap=True
        )
        return False
    console.print(f"[green]Checked {len(results)} commit(s)[/green]")
    return True


@click.command()
@click.argument(
    "message_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"git-config style file with a [commitmessage] section (defaults to {DEFAULT_CONFIG_FILENAME} in the repository)",
)
@click.option(
    "--ref",
    "ref_name",
    default="refs/heads/main",
    help="Target ref the commits are pushed to; review refs are checked more strictly",
)
@click.option(
    "--pre-receive",
    is_flag=True,
    help="Read '<old> <new> <ref>' lines from stdin and check every new commit",
)
@click.option(
    "--rev",
    "revision",
    help="Check an existing commit or range, e.g. HEAD or main..feature",
)
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log validation results to",
)
@click.option(
    "--config-list", is_flag=True, help="Display current configuration settings"
)
@click.option("--version", is_flag=True, help="Display version information and exit")
def main(
    message_file: Optional[Path],
    path: Path,
    config_file: Optional[Path],
    ref_name: str,
    pre_receive: bool,
    revision: Optional[str],
    log_file: Optional[Path],
    config_list: bool,
    version: bool,
):
    """
    Check commit message subject length, line wrapping and body presence.

    Run it as a commit-msg hook with MESSAGE_FILE, as a pre-receive hook
    with --pre-receive, or against existing commits with --rev.

    Settings are read from the [commitmessage] section of
    .commitlength.toml in the repository root, or of --config-file.
    Exits with status 1 when a commit is rejected.
    """
    if not (version or config_list or pre_receive or revision or message_file):
        raise click.UsageError("Nothing to check: pass MESSAGE_FILE, --rev or --pre-receive")

    accepted = True
    try:
        if version:
            from .version import display_version_info

            display_version_info()
            return

        repo_path = path.absolute()
        config = load_config(repo_path, config_file)

        if config_list:
            if config_file is not None:
                source = f"Config file: {config_file}"
            elif (repo_path / DEFAULT_CONFIG_FILENAME).exists():
                source = f"Config file: {repo_path / DEFAULT_CONFIG_FILENAME}"
            else:
                source = "Using default values (no config file found)"
            print_config(config, source)
            return

        observers = build_observers(log_file)

        if message_file is not None:
            accepted = check_message_file(message_file, ref_name, config, observers)
            if not accepted:
                console.print("[red]Commit message validation failed[/red]")
        else:
            validator = PushValidator(str(repo_path), config)
            for observer in observers:
                validator.add_observer(observer)

            if pre_receive:
                with click.open_file("-") as stdin:
                    accepted = validator.check_push(stdin.readlines())
            else:
                accepted = summarize(validator.check_revision(revision, ref_name))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise click.Abort()
    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise click.Abort()

    if not accepted:
        sys.exit(1)


if __name__ == "__main__":
    main()
