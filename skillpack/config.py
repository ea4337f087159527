from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_SKILLS_DIR = Path(__file__).parent / "skills"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    skills_dir: Path = BUNDLED_SKILLS_DIR

    @field_validator("skills_dir", mode="after")
    @classmethod
    def expand_skills_dir(cls, value: Path) -> Path:
        return value.expanduser()

    log_level: str = "INFO"

    sentry_dsn: str = ""

    environment: str = "development"
    allowed_origins: str = ""


settings = Settings()
