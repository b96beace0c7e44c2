from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError
from .exemptions import AuthorizationConfig
from .retry import RetryPolicy

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class AutoMergeConfig:
    github_token: str
    registry: str
    whoami: str
    auth: AuthorizationConfig
    api_url: str = "https://api.github.com"
    suggest_onepointzero: bool = True
    retry_policy: RetryPolicy = RetryPolicy()


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _require(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigError(f"{name} is not set. Set it in the environment or in a .env file.")
    return value


def load_config(env_file: Path | str | None = None) -> AutoMergeConfig:
    """Read configuration from the environment, after loading ``env_file`` (or ``./.env``)."""
    if env_file is not None:
        if not Path(env_file).exists():
            raise ConfigError(f"env file not found: {env_file}")
        load_dotenv(env_file)
    else:
        load_dotenv()

    auth = AuthorizationConfig.from_lists(
        _split_list(_require("AUTOMERGE_AUTHORIZED_AUTHORS")),
        _split_list(os.environ.get("AUTOMERGE_AUTOGENERATED_AUTHORS", "")),
    )

    raw_attempts = os.environ.get("AUTOMERGE_MAX_ATTEMPTS", "").strip()
    try:
        retry_policy = RetryPolicy(max_attempts=int(raw_attempts)) if raw_attempts else RetryPolicy()
    except ValueError as exc:
        raise ConfigError(f"AUTOMERGE_MAX_ATTEMPTS must be an integer >= 1, got {raw_attempts!r}") from exc

    return AutoMergeConfig(
        github_token=_require("AUTOMERGE_GITHUB_TOKEN"),
        registry=_require("AUTOMERGE_REGISTRY"),
        whoami=_require("AUTOMERGE_WHOAMI"),
        auth=auth,
        api_url=os.environ.get("AUTOMERGE_API_URL", "").strip() or "https://api.github.com",
        suggest_onepointzero=os.environ.get("AUTOMERGE_SUGGEST_ONEPOINTZERO", "true").strip().lower() in _TRUTHY,
        retry_policy=retry_policy,
    )
