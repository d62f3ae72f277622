from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Brightlight Job Application Form"
    environment: str = "dev"
    debug: bool = True
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "*"

    # Hosted form backend that receives the final multipart submission.
    submission_endpoint: str = "https://usebasin.com/f/cab5adc1635c"
    # "http" posts to the endpoint, "mock" accepts locally without touching the network.
    submission_mode: str = "http"
    # Unset means the HTTP client's own default timeout applies.
    submission_timeout_seconds: float | None = None

    max_attachment_bytes: int = 10 * 1024 * 1024
    # Comma separated, e.g. ".pdf,.doc,.docx".
    allowed_attachment_extensions: str = ".pdf,.doc,.docx"

    # Idle sessions (and the files they hold) are dropped after this long.
    session_ttl_seconds: float = 60 * 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def attachment_extensions(self) -> tuple[str, ...]:
        """Lowercased extensions, each with its leading dot."""
        extensions = []
        for item in self.allowed_attachment_extensions.split(","):
            item = item.strip().lower()
            if item:
                extensions.append(item if item.startswith(".") else f".{item}")
        return tuple(extensions)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
