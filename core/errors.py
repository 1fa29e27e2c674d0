"""Доменные ошибки движка свайпов.

Сервисы бросают эти исключения, роутеры переводят их в HTTPException.
"""
from typing import Optional

from fastapi import HTTPException
from starlette import status


class MatchingError(Exception):
    """Базовая ошибка движка."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.__class__.__doc__)
        self.detail = detail or self.__class__.__doc__


class NotFoundError(MatchingError):
    """Referenced profile or entry not found"""


class SelfActionError(MatchingError):
    """Action targets the actor's own profile"""


class DuplicateActionError(MatchingError):
    """Action already recorded for this pair"""


class ValidationError(MatchingError):
    """Invalid request parameters"""


class InvalidFilterError(ValidationError):
    """Latitude and longitude are required"""


class InvalidDirectionError(ValidationError):
    """Invalid swipe direction"""


class NoRecentActionError(MatchingError):
    """No recent swipe to undo"""


class UndoExpiredError(MatchingError):
    """Undo window has expired"""


class NotMatchedError(MatchingError):
    """Users are not matched"""


_STATUS_CODES = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    SelfActionError: status.HTTP_400_BAD_REQUEST,
    DuplicateActionError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NoRecentActionError: status.HTTP_404_NOT_FOUND,
    UndoExpiredError: status.HTTP_410_GONE,
    NotMatchedError: status.HTTP_403_FORBIDDEN,
}


def to_http_exception(exc: MatchingError) -> HTTPException:
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_CODES:
            return HTTPException(status_code=_STATUS_CODES[error_type], detail=exc.detail)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.detail)
