from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./library.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Path to a JSON file of type descriptors. Unset means the bundled
    # library_api/descriptors/type_descriptors.json.
    TYPE_DESCRIPTORS_PATH: Optional[str] = None

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://library.example.com,https://admin.example.com"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
