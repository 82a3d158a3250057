"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from funding_crawler.models import DEFAULT_START_MS, Exchange


class CrawlerSettings(BaseSettings):
    """Crawl scope and persistence location."""

    model_config = SettingsConfigDict(env_prefix="CRAWLER_")

    data_dir: str = "data"
    exchanges: list[Exchange] = [
        Exchange.BINANCE,
        Exchange.BITMEX,
        Exchange.HUOBI,
        Exchange.OKEX,
    ]
    default_start_ms: int = DEFAULT_START_MS  # 2019-09-10T08:00:00.000Z
    max_pages: int = 10_000  # per market crawl, guards against a source that never ends


class RetrySettings(BaseSettings):
    """Per-market retry policy.

    max_attempts=None means never give up: a persistently failing source
    keeps retrying its own market while the others complete.
    """

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    delay_seconds: float = 5.0
    max_attempts: int | None = None


class EndpointSettings(BaseSettings):
    """Base URLs of the public market-data REST APIs."""

    model_config = SettingsConfigDict(env_prefix="ENDPOINT_")

    binance_url: str = "https://fapi.binance.com"
    bitmex_url: str = "https://www.bitmex.com"
    huobi_url: str = "https://api.hbdm.com"
    okex_url: str = "https://www.okex.com"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"  # or "json"
    crawler: CrawlerSettings = CrawlerSettings()
    retry: RetrySettings = RetrySettings()
    endpoints: EndpointSettings = EndpointSettings()
