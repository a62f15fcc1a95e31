from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    comment_scraper_api_token: str = ""
    comment_scraper_headless: bool = True
    comment_scraper_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    comment_scraper_accept_language: str = "en-US,en;q=0.9"
    comment_scraper_locale: str = "en-US"
    comment_scraper_browser_args: str = (
        "--no-sandbox,"
        "--disable-setuid-sandbox,"
        "--disable-dev-shm-usage,"
        "--disable-blink-features=AutomationControlled"
    )
    comment_scraper_log_level: str = "INFO"
    comment_scraper_log_file: str = ""

    def browser_args(self) -> list[str]:
        return [item.strip() for item in self.comment_scraper_browser_args.split(",") if item.strip()]


settings = Settings()
