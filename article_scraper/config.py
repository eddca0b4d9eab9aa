"""
Runtime configuration for the article scraper.

Values come from keyword arguments or from the environment (the runner
scripts call dotenv.load_dotenv() first, so a local .env file works too):

  ARTICLE_SCRAPER_USER_AGENT       browser User-Agent sent with every fetch
  ARTICLE_SCRAPER_TIMEOUT          fetch timeout in seconds (default 20)
  ARTICLE_SCRAPER_ACCEPT_LANGUAGE  Accept-Language header
"""

import os

from pydantic import BaseModel, Field


# Many sites answer headless/bot agents with 403 or an empty shell page,
# so the default identifies as a desktop Chrome.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

ENV_PREFIX = "ARTICLE_SCRAPER_"


class ScraperConfig(BaseModel):
    """Fetch settings shared by every scrape call."""
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    timeout: float = Field(default=20.0, gt=0, le=120)
    accept_language: str = "en-US,en;q=0.9"

    @classmethod
    def from_env(cls, **overrides) -> "ScraperConfig":
        """
        Build a config from ARTICLE_SCRAPER_* environment variables.

        Explicit keyword overrides win over the environment.  Invalid values
        (e.g. a non-numeric timeout) raise pydantic.ValidationError.
        """
        values = {}
        for field_name in cls.model_fields:
            env_value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if env_value:
                values[field_name] = env_value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def request_headers(self) -> dict:
        """Headers a desktop browser would send for a top-level navigation."""
        return {
            "User-Agent": self.user_agent,
            "Accept": (
                "text/html,application/xhtml+xml,"
                "application/xml;q=0.9,image/webp,*/*;q=0.8"
            ),
            "Accept-Language": self.accept_language,
        }
