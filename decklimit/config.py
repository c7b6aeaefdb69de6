from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKLIMIT_")

    app_name: str = "DeckLimit"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./decklimit.db"

    # Single price source; listing pages live under this host
    price_source_url: str = "http://magic.tcgplayer.com"
    user_agent: str = "DeckLimit/1.0"
    http_timeout_seconds: float = 30.0

    # When False the API starts without the background price scraper
    run_scheduler: bool = True


settings = Settings()


# =============================================================================
# PRICE SCRAPER SCHEDULE
# =============================================================================

# Prices are considered stale once the last scrape is older than this
REFRESH_WINDOW_HOURS = 24

# How often the scheduler wakes up to check staleness
CHECK_INTERVAL_SECONDS = 30.0

# Pause before every listing page fetch so the source is not hammered
SCRAPE_DELAY_SECONDS = 1.0
