"""Errors carrying an HTTP status code.

Models and services raise these; the resource handler is the single
place that turns them into JSON responses of the form
``{"statusCode": <int>, "message": <str>}``.
"""

from http import HTTPStatus

SUCCESS = "Success"
NOT_FOUND = "Not Found"
NOT_ALLOWED = "Method Not Allowed"
TYPE_MISMATCH = "Type mismatch"


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


class HTTPError(Exception):
    """An error with an HTTP status code and a human-readable message.

    Attributes:
        status_code: HTTP status code sent to the client
        message: Message sent to the client (defaults to the status phrase)
    """

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str | None = None

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        if status_code is not None:
            self.status_code = status_code
        self.message = message or self.default_message or _phrase(self.status_code)
        super().__init__(f"{int(self.status_code)}: {self.message}")

    def to_dict(self) -> dict:
        """Return the wire representation of the error."""
        return {"statusCode": int(self.status_code), "message": self.message}


class BadRequestError(HTTPError):
    status_code = HTTPStatus.BAD_REQUEST


class TypeMismatchError(BadRequestError):
    default_message = TYPE_MISMATCH


class NotFoundError(HTTPError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = NOT_FOUND


class MethodNotAllowedError(HTTPError):
    status_code = HTTPStatus.METHOD_NOT_ALLOWED
    default_message = NOT_ALLOWED


class NotAcceptableError(HTTPError):
    status_code = HTTPStatus.NOT_ACCEPTABLE
    default_message = "Supported Content-Type: application/json"


class ConflictError(HTTPError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Already exists"


class InternalError(HTTPError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class CacheError(Exception):
    """Raised by cache stores when the backend cannot be reached.

    Never sent to clients: the service logs it and carries on uncached.
    """
