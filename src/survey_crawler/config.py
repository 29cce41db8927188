"""
Runtime configuration for the survey crawler.

Each setting is resolved from an explicit argument first, then from an
environment variable, then from the default:

- SURVEY_RELAY_URL: Relay endpoint that performs requests on our behalf.
  When unset, requests go straight to the survey host.
- SURVEY_REQUEST_DELAY_MS: Pause between pages (default: 300).
- SURVEY_REQUEST_TIMEOUT_MS: Per-request timeout (default: 30000).
- SURVEY_MAX_REQUESTS: Request budget for one run (default: 200).
- SURVEY_USER_AGENT: User-Agent for direct requests.

Example Usage:
    >>> from survey_crawler.config import CrawlerConfig
    >>>
    >>> config = CrawlerConfig.from_env(request_delay_ms=0)
    >>> config.uses_relay
    False
"""
from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field


__all__ = [
    "CrawlerConfig",
    "DEFAULT_REQUEST_DELAY_MS",
    "DEFAULT_REQUEST_TIMEOUT_MS",
    "DEFAULT_MAX_REQUESTS",
    "DEFAULT_USER_AGENT",
]


DEFAULT_REQUEST_DELAY_MS = 300
DEFAULT_REQUEST_TIMEOUT_MS = 30000
DEFAULT_MAX_REQUESTS = 200
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class CrawlerConfig(BaseModel):
    """
    Settings for one crawler run.

    Attributes:
        relay_url: Relay endpoint, or None for direct requests.
        request_delay_ms: Pause between pages in milliseconds.
        request_timeout_ms: Timeout for a single request in milliseconds.
        max_requests: Requests allowed before the run is abandoned.
        user_agent: User-Agent header for direct requests.
    """
    relay_url: Optional[str] = Field(default=None, description="Relay endpoint URL")
    request_delay_ms: int = Field(
        default=DEFAULT_REQUEST_DELAY_MS, ge=0, description="Delay between pages (ms)"
    )
    request_timeout_ms: int = Field(
        default=DEFAULT_REQUEST_TIMEOUT_MS, gt=0, description="Per-request timeout (ms)"
    )
    max_requests: int = Field(
        default=DEFAULT_MAX_REQUESTS, gt=0, description="Request budget per run"
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header")

    @property
    def uses_relay(self) -> bool:
        """Whether requests are sent through a relay."""
        return bool(self.relay_url)

    @property
    def request_delay_seconds(self) -> float:
        return self.request_delay_ms / 1000

    @classmethod
    def from_env(
        cls,
        relay_url: Optional[str] = None,
        request_delay_ms: Optional[int] = None,
        request_timeout_ms: Optional[int] = None,
        max_requests: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> "CrawlerConfig":
        """
        Build a config from arguments with environment fallbacks.

        Args:
            relay_url: Relay endpoint. Env: SURVEY_RELAY_URL
            request_delay_ms: Delay between pages. Env: SURVEY_REQUEST_DELAY_MS
            request_timeout_ms: Request timeout. Env: SURVEY_REQUEST_TIMEOUT_MS
            max_requests: Request budget. Env: SURVEY_MAX_REQUESTS
            user_agent: User-Agent header. Env: SURVEY_USER_AGENT

        Returns:
            Resolved CrawlerConfig.
        """
        return cls(
            relay_url=cls._get_str_config(relay_url, "SURVEY_RELAY_URL", default=None),
            request_delay_ms=cls._get_int_config(
                request_delay_ms, "SURVEY_REQUEST_DELAY_MS", default=DEFAULT_REQUEST_DELAY_MS
            ),
            request_timeout_ms=cls._get_int_config(
                request_timeout_ms, "SURVEY_REQUEST_TIMEOUT_MS", default=DEFAULT_REQUEST_TIMEOUT_MS
            ),
            max_requests=cls._get_int_config(
                max_requests, "SURVEY_MAX_REQUESTS", default=DEFAULT_MAX_REQUESTS
            ),
            user_agent=cls._get_str_config(
                user_agent, "SURVEY_USER_AGENT", default=DEFAULT_USER_AGENT
            ) or DEFAULT_USER_AGENT,
        )

    @staticmethod
    def _get_int_config(
        value: Optional[int],
        env_var: str,
        default: int
    ) -> int:
        """Get integer config from parameter, env var, or default."""
        if value is not None:
            return value
        env_value = os.environ.get(env_var, "").strip()
        if env_value.isdigit():
            return int(env_value)
        return default

    @staticmethod
    def _get_str_config(
        value: Optional[str],
        env_var: str,
        default: Optional[str]
    ) -> Optional[str]:
        """Get string config from parameter, env var, or default."""
        if value:
            return value
        env_value = os.environ.get(env_var, "").strip()
        return env_value or default
