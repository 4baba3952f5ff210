import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

import yaml

from actionbot_core.errors import ConfigurationError

DEFAULT_CONFIG: dict = {
    "repo": None,  # owner/name; GITHUB_REPOSITORY wins when set
    "verbose": False,
    "actor_fallback": "UNKNOWN",
}


class Source(str, Enum):
    """Where the current invocation runs."""

    INTERACTIVE = "CLI"
    AUTOMATED = "GHA"

    @classmethod
    def detect(cls, environ: Optional[Mapping[str, str]] = None) -> "Source":
        environ = os.environ if environ is None else environ
        if environ.get("GITHUB_ACTIONS") == "true":
            return cls.AUTOMATED
        return cls.INTERACTIVE


def load_config(config_path: str = ".actionbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .actionbot.yml in the current directory
      3. CLI argument overrides
      4. Ambient GitHub values from the environment
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["github_actor"] = os.environ.get("GITHUB_ACTOR")
    if os.environ.get("GITHUB_REPOSITORY"):
        config["repo"] = os.environ["GITHUB_REPOSITORY"]

    return config


@dataclass(frozen=True)
class ContextConfig:
    """Ambient values the execution context needs, resolved once at startup."""

    github_token: Optional[str] = None
    repository: Optional[str] = None
    actor: str = "UNKNOWN"

    @classmethod
    def from_config(cls, config: dict) -> "ContextConfig":
        return cls(
            github_token=config.get("github_token") or None,
            repository=config.get("repo") or None,
            actor=config.get("github_actor") or config.get("actor_fallback") or "UNKNOWN",
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ContextConfig":
        environ = os.environ if environ is None else environ
        return cls(
            github_token=environ.get("GITHUB_TOKEN") or None,
            repository=environ.get("GITHUB_REPOSITORY") or None,
            actor=environ.get("GITHUB_ACTOR") or "UNKNOWN",
        )

    def owner_and_name(self) -> tuple[str, str]:
        """Split the repository identifier into (owner, name)."""
        if not self.repository:
            raise ConfigurationError("No repository configured. Set GITHUB_REPOSITORY or pass --repo owner/name.")
        owner, sep, name = self.repository.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ConfigurationError(f"Repository must be in owner/name format, got {self.repository!r}.")
        return owner, name
