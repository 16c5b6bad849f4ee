class KnowledgeHubError(Exception):
    """Base error; carries the HTTP status the API reports it with."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, payload: dict | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def to_dict(self) -> dict:
        rv = dict(self.payload or ())
        rv["detail"] = self.message
        return rv


class ValidationError(KnowledgeHubError):
    """Malformed, missing or out-of-range input."""

    status_code = 400


class AuthenticationError(KnowledgeHubError):
    """Bad credentials or a missing/expired session."""

    status_code = 401


class NotFoundError(KnowledgeHubError):
    status_code = 404


class ConflictError(KnowledgeHubError):
    """Duplicate unique value, or a delete blocked by referencing rows."""

    status_code = 409


class StoreError(KnowledgeHubError):
    """The backing store was unreachable or rejected a write."""

    status_code = 500
