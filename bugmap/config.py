"""Configuration loading from YAML, environment and .env.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(ValueError):
    """Raised when the configuration file or a secret cannot be loaded."""

    pass


class BugListError(ValueError):
    """Raised when the bug identifier file cannot be interpreted."""

    pass


def _read_secret(env_key: str, file_env_key: str, env: Mapping[str, str] | None = None) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    env = os.environ if env is None else env
    value = env.get(env_key)
    if value:
        return value.strip()
    file_path = env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


class GitHubConfig(BaseSettings):
    """GitHub API access and target repository."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", env_file=".env", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    personal_access_token: str | None = Field(
        default=None, description="Alternative token variable (GITHUB_PERSONAL_ACCESS_TOKEN)"
    )
    owner: str = Field(default="", description="Repository owner (user or organization)")
    repo: str = Field(default="", description="Repository name")
    api_url: str = Field(default="https://api.github.com", description="API base URL")

    @property
    def repository(self) -> str:
        """owner/repo as used in API paths."""
        return f"{self.owner}/{self.repo}"


class ScanConfig(BaseSettings):
    """Pagination, retention and output settings."""

    model_config = SettingsConfigDict(env_prefix="SCAN_", env_file=".env", extra="ignore")

    start_page: int = Field(default=1, ge=1, description="First page of pull requests to fetch")
    page_size: int = Field(default=100, ge=1, le=100, description="Pull requests per page")
    files_page_size: int = Field(default=100, ge=1, le=100, description="Files per page for each pull request")
    state: str = Field(default="closed", description="Pull request state filter: closed, open, all")
    # Pull requests merged before now minus this many months end the walk
    retention_months: int = Field(default=6, ge=0, description="Retention window in calendar months")
    bug_prefix: str | None = Field(
        default=None, description="Restrict bug identifiers to one project prefix, e.g. PROJECT"
    )
    bugs_file: Path = Field(default=Path("bugs.yaml"), description="Allow-list of bug identifiers")
    output: Path = Field(default=Path("output.json"), description="Output JSON document")
    merged_only: bool = Field(default=False, description="Skip pull requests closed without merge")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_requests: bool = Field(
        default=False, description="Log every HTTP request, including urllib3 connection details"
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        return self.resolve_github_token()

    def resolve_github_token(self, env: Mapping[str, str] | None = None) -> str | None:
        """Token from config (GITHUB_TOKEN, GITHUB_PERSONAL_ACCESS_TOKEN) or GITHUB_TOKEN_FILE.

        Raises:
            ConfigError: If GITHUB_TOKEN_FILE points to an unreadable file
        """
        for t in (self.github.token, self.github.personal_access_token):
            if t and not t.startswith("${"):
                return t
        try:
            return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE", env)
        except OSError as e:
            raise ConfigError(f"Cannot read GitHub token file: {e}") from e


def _substitute_env(value: Any, env: Mapping[str, str]) -> Any:
    """Replace ${VAR} and $VAR in strings with values from env."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v, env) for v in value]
    return value


def load_config(config_path: Path | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Without a YAML file every value comes from the environment (GITHUB_*,
    SCAN_*, LOGGING_*) or defaults. ``env`` (default os.environ) feeds the
    ${VAR} substitution in the YAML file.

    Raises:
        ConfigError: If the YAML is malformed or a value fails validation
    """
    env = os.environ if env is None else env
    path = config_path or Path("config.yaml")
    try:
        if not path.is_file():
            return AppConfig()
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping of sections")
    raw = _substitute_env(raw, env)
    sections = {}
    for name in ("github", "scan", "logging"):
        section = raw.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Config section '{name}' in {path} must be a mapping")
        sections[name] = section

    try:
        return AppConfig(
            github=GitHubConfig(**sections["github"]),
            scan=ScanConfig(**sections["scan"]),
            logging=LoggingConfig(**sections["logging"]),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def load_bug_ids(path: Path) -> frozenset[str]:
    """Load the allow-list of bug identifiers.

    Accepted formats:
    - .yaml/.yml/.json: a list of ids, or a mapping with a ``bug_ids`` (or ``bugs``) list
    - anything else: one id per line, blank lines and ``#`` comments ignored

    Raises:
        FileNotFoundError: If path does not exist
        BugListError: If the structured file has an unexpected shape
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() not in (".yaml", ".yml", ".json"):
        ids = [line.split("#", 1)[0].strip() for line in text.splitlines()]
        return frozenset(i for i in ids if i)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise BugListError(f"Invalid bug list {path}: {e}") from e
    if data is None:
        return frozenset()
    if isinstance(data, dict):
        data = data.get("bug_ids", data.get("bugs"))
    if not isinstance(data, list):
        raise BugListError(f"Bug list {path} must be a list or contain a 'bug_ids' list")
    return frozenset(str(i).strip() for i in data if str(i).strip())
