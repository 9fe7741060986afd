"""Service-level exceptions, rendered as ``{"message": ...}`` by the API."""


class ServiceError(Exception):
    """Base class for errors a service surfaces to its caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed input. Nothing was written."""

    status_code = 400


class ConflictError(ServiceError):
    """The write would break a uniqueness rule (e.g. duplicate email)."""

    status_code = 400


class EligibilityDenied(ServiceError):
    """The user may not submit this review right now."""

    status_code = 403

    def __init__(self, message: str, reason: str, required_minutes: int | None = None):
        super().__init__(message)
        self.reason = reason
        self.required_minutes = required_minutes


class NotFoundError(ServiceError):
    status_code = 404


class AggregationFailure(ServiceError):
    """Recomputing a game's rating failed; the triggering write stays committed."""

    def __init__(self, game_id: int, message: str):
        super().__init__(f"Rating recompute for game {game_id} failed: {message}")
        self.game_id = game_id
