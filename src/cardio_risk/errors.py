"""Error taxonomy surfaced by the client."""


class CardioRiskError(Exception):
    """Base class for all client errors."""


class NetworkError(CardioRiskError):
    """The service could not be reached at all (DNS, refused connection, CORS, timeout)."""


class ServiceError(CardioRiskError):
    """The service answered with a non-success status or an unusable body."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.message} (code={self.code}, status={self.status_code})"


class NotFoundError(CardioRiskError):
    """A requested history record does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, prediction_id: str):
        super().__init__(f"Prediction not found: {prediction_id}")
        self.prediction_id = prediction_id
