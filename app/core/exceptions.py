from typing import Any, Optional
from fastapi import HTTPException, status


class InvalidRequestError(HTTPException):
    """Missing identifiers, malformed payloads, unusable spreadsheet rows."""

    def __init__(self, detail: Any = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: Any = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: Any = "Already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class GoneError(HTTPException):
    def __init__(self, detail: Any = "Already deleted"):
        super().__init__(status_code=status.HTTP_410_GONE, detail=detail)


class UnprocessableError(HTTPException):
    def __init__(self, detail: Any = "Unprocessable entity"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class InternalError(HTTPException):
    def __init__(self, detail: Any = "Internal server error", cause: Optional[BaseException] = None):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
        self.cause = cause


class TransactionTimeoutError(InternalError):
    def __init__(self, detail: Any = "Transaction exceeded its time budget"):
        super().__init__(detail=detail)
