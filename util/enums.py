from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class NoteTarget(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    CONTENT_TOO_LONG = ErrorInfo(
        "Content exceeds {limit} character limit",
        status.HTTP_422_UNPROCESSABLE_CONTENT,
    )
    PAGE_URL_TOO_LONG = ErrorInfo(
        "Page URL exceeds {limit} character limit",
        status.HTTP_422_UNPROCESSABLE_CONTENT,
    )
    SELECTOR_TOO_LONG = ErrorInfo(
        "Element selector exceeds {limit} character limit",
        status.HTTP_422_UNPROCESSABLE_CONTENT,
    )
    NOT_AUTHENTICATED = ErrorInfo(
        "Publishing notes requires a signed-in user", status.HTTP_401_UNAUTHORIZED
    )
    NOTE_NOT_FOUND = ErrorInfo("Note {note_id} not found", status.HTTP_404_NOT_FOUND)
    STORAGE_FAILURE = ErrorInfo("Note storage failed", status.HTTP_502_BAD_GATEWAY)
