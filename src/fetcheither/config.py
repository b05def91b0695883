"""Runtime settings for the default transports."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class FetchSettings(BaseSettings):
    """
    Settings for the shared httpx client and requests session.

    Loaded from ``FETCHEITHER_*`` environment variables, e.g.
    ``FETCHEITHER_TIMEOUT=5``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FETCHEITHER_",
        case_sensitive=False,
        extra="ignore",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )

    follow_redirects: bool = Field(
        default=True,
        description="Follow 3xx redirects before classifying the response",
    )

    user_agent: str = Field(
        default=f"fetcheither/{__version__}",
        description="User-Agent header sent by the default transports",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level used by the CLI",
    )


def get_settings() -> FetchSettings:
    return FetchSettings()
