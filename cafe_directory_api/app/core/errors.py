"""
Domain exceptions raised by the service layer.

Both subclass ``ValueError`` so callers that only care about "bad
input or missing record" can catch the base class.  Endpoints map
them to HTTP status codes; database errors (``sqlite3.Error``) are
not wrapped and are turned into a generic 500 by the handler
registered in ``main.create_app``.
"""


class CafeNotFoundError(ValueError):
    """Raised when no cafe exists for the requested identifier."""

    def __init__(self, cafe_id: int) -> None:
        self.cafe_id = cafe_id
        super().__init__(f"Cafe {cafe_id} not found")


class InvalidTagFilterError(ValueError):
    """Raised when a tag filter request is malformed."""
