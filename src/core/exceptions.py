from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, status


@dataclass(eq=False)
class BlogException(Exception):
    message: str
    code: str = "error"
    details: dict | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ValidationError(BlogException):
    code: str = "validation_error"


@dataclass(eq=False)
class NotFoundError(BlogException):
    code: str = "not_found"


@dataclass(eq=False)
class DatabaseError(BlogException):
    code: str = "database_error"


EXC_TO_STATUS: dict[type[BlogException], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DatabaseError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def map_exception_to_http(exc: BlogException) -> HTTPException:
    status_code = status.HTTP_400_BAD_REQUEST
    for typ, st in EXC_TO_STATUS.items():
        if isinstance(exc, typ):
            status_code = st
            break

    return HTTPException(status_code=status_code, detail=exc.message)
