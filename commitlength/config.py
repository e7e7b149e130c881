"""Configuration management for commitlength."""
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from git.config import GitConfigParser
import tomli
import tomli_w
import configparser
import os

from .models import RejectTooLong

DEFAULT_CONFIG_FILENAME = ".commitlength.toml"
COMMIT_MESSAGE_SECTION = "commitmessage"

# Keys as they appear in a config source, mapped to field names
CONFIG_KEYS = {
    "maxSubjectLength": "max_subject_length",
    "maxLineLength": "max_line_length",
    "longLinesThreshold": "long_lines_threshold",
    "rejectTooLong": "reject_too_long",
    "rejectNoMsgBody": "reject_no_msg_body",
}

BOOLEAN_KEYS = ("rejecttoolong", "rejectnomsgbody")

TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0")


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase or snake_case keys, in any case, to field names."""
    lookup = {}
    for key, field_name in CONFIG_KEYS.items():
        lookup[key.lower()] = field_name
        lookup[field_name] = field_name
    normalized = {}
    for key, value in data.items():
        field_name = lookup.get(str(key).lower())
        if field_name is not None:
            normalized[field_name] = value
    return normalized


class Config(BaseModel):
    """Commit message style thresholds and rejection policy.

    Values come from a `[commitmessage]` section of either the repository's
    `.commitlength.toml` or a git-config style server file. Invalid values
    never raise: each one falls back to its default.
    """

    model_config = ConfigDict(frozen=True)

    max_subject_length: int = Field(
        default=65,
        description="Maximum length of the commit subject"
    )

    max_line_length: int = Field(
        default=70,
        description="Maximum length of a single commit message line"
    )

    long_lines_threshold: int = Field(
        default=33,
        description="Percentage of non-empty lines allowed to exceed max_line_length"
    )

    reject_too_long: RejectTooLong = Field(
        default=RejectTooLong.NEVER,
        description="Whether too-long subjects or lines reject the commit (Always, ForReviewOnly, Never)"
    )

    reject_no_msg_body: bool = Field(
        default=False,
        description="Whether a commit without a message body is rejected"
    )

    @field_validator("max_subject_length", "max_line_length", "long_lines_threshold", mode="before")
    @classmethod
    def non_negative_int(cls, value: Any, info: ValidationInfo) -> int:
        default = cls.model_fields[info.field_name].default
        if isinstance(value, bool):
            return default
        try:
            number = int(str(value).strip()) if isinstance(value, str) else int(value)
        except (TypeError, ValueError):
            return default
        if number < 0:
            return default
        if info.field_name == "long_lines_threshold" and number > 100:
            return default
        return number

    @field_validator("reject_too_long", mode="before")
    @classmethod
    def parse_reject_policy(cls, value: Any) -> RejectTooLong:
        if isinstance(value, RejectTooLong):
            return value
        # Boolean values are the deprecated form of this setting
        if isinstance(value, bool):
            return RejectTooLong.ALWAYS if value else RejectTooLong.NEVER
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "").replace("-", "")
            if key in ("always",) + TRUE_VALUES:
                return RejectTooLong.ALWAYS
            if key in ("forreviewonly", "forreview"):
                return RejectTooLong.FOR_REVIEW_ONLY
            if key in ("never",) + FALSE_VALUES:
                return RejectTooLong.NEVER
        return RejectTooLong.NEVER

    @field_validator("reject_no_msg_body", mode="before")
    @classmethod
    def parse_boolean(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in TRUE_VALUES
        if isinstance(value, int):
            return value != 0
        return False

    @classmethod
    def load(cls, repo_path: Path) -> 'Config':
        """Load configuration from the repository's config file.

        Args:
            repo_path: Path to the git repository

        Returns:
            Config: Configuration object with values from file or defaults
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            print(f"Warning: Error reading config file: {e}")
            return cls()

        section = config_data.get(COMMIT_MESSAGE_SECTION, {})
        if not isinstance(section, dict):
            print(f"Warning: [{COMMIT_MESSAGE_SECTION}] in {config_path} is not a table, using defaults")
            return cls()
        return cls(**section)

    @classmethod
    def from_git_config(cls, config_path: Path) -> 'Config':
        """Load configuration from a git-config style file.

        This is the format review servers keep their site configuration in,
        e.g. a `[commitmessage]` section inside `gerrit.config`.
        """
        config_path = Path(config_path)
        if not config_path.exists() or config_path.stat().st_size == 0:
            print(f"Warning: Config file {config_path} does not exist or is empty; using default values")
            return cls()

        parser = GitConfigParser(str(config_path), read_only=True)
        try:
            parser.read()
        except (OSError, configparser.Error) as e:
            print(f"Warning: Config file {config_path} is invalid: {e}")
            return cls()

        if not parser.has_section(COMMIT_MESSAGE_SECTION):
            return cls()
        section = {}
        for name, value in parser.items(COMMIT_MESSAGE_SECTION):
            # A key without a value is true in git config
            if value in ("", None) and name.lower() in BOOLEAN_KEYS:
                value = "true"
            section[name] = value
        return cls(**section)

    def save(self, repo_path: Path) -> None:
        """Save configuration to the repository's config file.

        Args:
            repo_path: Path to the git repository
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME
        section = self.to_config_section()

        try:
            with config_path.open('wb') as f:
                tomli_w.dump({COMMIT_MESSAGE_SECTION: section}, f)
        except OSError as e:
            print(f"Error saving config file: {e}")

    def to_config_section(self) -> Dict[str, Any]:
        """Settings keyed the way they appear in a config file."""
        values = self.model_dump()
        section = {key: values[field_name] for key, field_name in CONFIG_KEYS.items()}
        section["rejectTooLong"] = self.reject_too_long.value
        return section

    def __init__(self, **data):
        """Initialize config with environment variable support."""
        env_data = {}

        env_mapping = {
            'COMMITLENGTH_MAX_SUBJECT_LENGTH': 'max_subject_length',
            'COMMITLENGTH_MAX_LINE_LENGTH': 'max_line_length',
            'COMMITLENGTH_LONG_LINES_THRESHOLD': 'long_lines_threshold',
            'COMMITLENGTH_REJECT_TOO_LONG': 'reject_too_long',
            'COMMITLENGTH_REJECT_NO_MSG_BODY': 'reject_no_msg_body',
        }

        for env_var, field_name in env_mapping.items():
            if env_var in os.environ:
                env_data[field_name] = os.environ[env_var]

        merged_data = {**env_data, **_normalize_keys(data)}

        super().__init__(**merged_data)


def describe(config: Optional[Config] = None) -> Dict[str, str]:
    """Effective settings as display strings, keyed by config file name."""
    config = config or Config()
    return {key: str(value) for key, value in config.to_config_section().items()}
