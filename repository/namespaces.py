from typing import Final
from config.settings import settings

ROOT: Final[str] = settings.LOCAL_NAMESPACE

LOCAL_NOTES: Final[str] = f"{ROOT}:notes"  # one JSON list per page url
LOCAL_INDEX: Final[str] = f"{ROOT}:index"  # single JSON mapping authorId -> pages
