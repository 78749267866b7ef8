from pydantic_settings import BaseSettings
from typing import Optional

from pydantic import field_validator

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


class Settings(BaseSettings):
    # App settings
    app_name: str = "Global API Exceptions"
    version: str = "1.0.0"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Translator
    catch_unfiltered_exceptions: bool = False

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in LOG_LEVELS:
                raise ValueError(f"Unknown log level: {v}")
        return v

    class Config:
        env_file = ".env"
        env_prefix = "GLOBAL_API_EXCEPTIONS_"


settings = Settings()
