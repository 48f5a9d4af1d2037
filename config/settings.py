import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")
    LOCAL_NAMESPACE: str = Field(default="marginalia", validation_alias="LOCAL_NAMESPACE")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_ENABLED: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    RATE_LIMIT_TIMES: int = Field(..., validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(..., validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(..., validation_alias="TRUST_PROXY")

    # Remote note store (Supabase)
    SUPABASE_URL: str = Field(..., validation_alias="SUPABASE_URL")
    SUPABASE_ANON_KEY: str = Field(..., validation_alias="SUPABASE_ANON_KEY")
    REMOTE_NOTES_TABLE: str = "notes"
    REMOTE_INDEX_FUNCTION: str = "get-index"
    REMOTE_TIMEOUT_SECONDS: float = Field(
        default=10.0, validation_alias="REMOTE_TIMEOUT_SECONDS"
    )
    INDEX_CACHE_TTL_SECONDS: float = Field(
        default=30.0, gt=0, validation_alias="INDEX_CACHE_TTL_SECONDS"
    )

    # Note limits
    CONTENT_MAX_LENGTH: int = Field(default=2000, validation_alias="CONTENT_MAX_LENGTH")
    PAGE_URL_MAX_LENGTH: int = Field(
        default=2048, validation_alias="PAGE_URL_MAX_LENGTH"
    )
    SELECTOR_MAX_LENGTH: int = Field(
        default=500, validation_alias="SELECTOR_MAX_LENGTH"
    )

    # Logging knobs
    LOGGER_NAME: str = "marginalia"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
