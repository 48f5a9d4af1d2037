from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)

    @property
    def message(self) -> str:
        return str(self.detail)


class NoteValidationError(AppError):
    """A note field exceeds its configured maximum; nothing was written."""

    def __init__(self, error: ErrorMessage, limit: int) -> None:
        super().__init__(
            error.value.message.format(limit=limit), error.value.http_status
        )


class NotAuthenticatedError(AppError):
    """Remote write attempted without a user; rejected before any network call."""

    def __init__(self) -> None:
        info = ErrorMessage.NOT_AUTHENTICATED.value
        super().__init__(info.message, info.http_status)


class NoteNotFoundError(AppError):
    def __init__(self, note_id: str) -> None:
        info = ErrorMessage.NOTE_NOT_FOUND.value
        super().__init__(info.message.format(note_id=note_id), info.http_status)


class TransportError(AppError):
    """Storage or network failure on a write path."""

    def __init__(self, message: str = ErrorMessage.STORAGE_FAILURE.value.message) -> None:
        super().__init__(message, ErrorMessage.STORAGE_FAILURE.value.http_status)
