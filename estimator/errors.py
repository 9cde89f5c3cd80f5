"""Domain errors raised by services and the estimation engine."""


class EstimatorError(Exception):
    """Base class; status_code is the HTTP status the API maps it to."""

    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(EstimatorError):
    """Missing/empty required field, bad hours value or malformed version number."""

    status_code = 422


class NotFoundError(EstimatorError):
    """A referenced project, screen, complexity or screen type does not exist."""

    status_code = 404


class MappingMissingError(EstimatorError):
    """No hour mapping row for a complexity/screen type pair (reject policy only)."""

    status_code = 422

    def __init__(self, complexity_name: str, screen_type_name: str) -> None:
        super().__init__(
            f"No hour mapping for complexity '{complexity_name}' and screen type '{screen_type_name}'"
        )
        self.complexity_name = complexity_name
        self.screen_type_name = screen_type_name


class ConflictError(EstimatorError):
    """Unique name clash, or deletion of a row still referenced by estimations."""

    status_code = 409
