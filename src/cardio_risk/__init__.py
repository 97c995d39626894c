"""Client-side data pipeline for cardiovascular risk predictions."""

from cardio_risk.client.api import ApiClient, build_client
from cardio_risk.errors import CardioRiskError, NetworkError, NotFoundError, ServiceError

__version__ = "1.0.0"

__all__ = [
    "ApiClient",
    "build_client",
    "CardioRiskError",
    "NetworkError",
    "NotFoundError",
    "ServiceError",
]
