"""Tests for the typed application errors."""

import warnings

import pytest
from fastapi import status

from util.enums import ErrorMessage
from util.errors import (
    NoteNotFoundError,
    NoteValidationError,
    NotAuthenticatedError,
    TransportError,
)


class TestErrorStatuses:
    """Each error carries its HTTP status and a formatted message."""

    @pytest.mark.parametrize(
        "error",
        [
            ErrorMessage.CONTENT_TOO_LONG,
            ErrorMessage.PAGE_URL_TOO_LONG,
            ErrorMessage.SELECTOR_TOO_LONG,
        ],
    )
    def test_validation_errors_are_422(self, error):
        exc = NoteValidationError(error, 10)

        assert exc.status_code == 422
        assert "10" in exc.message

    def test_unprocessable_status_constant_is_current(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert status.HTTP_422_UNPROCESSABLE_CONTENT == 422

    def test_other_statuses(self):
        assert NotAuthenticatedError().status_code == 401
        assert NoteNotFoundError("n1").status_code == 404
        assert "n1" in NoteNotFoundError("n1").message
        assert TransportError().status_code == 502
