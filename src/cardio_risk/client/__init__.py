"""Service gateway and client facade."""

from cardio_risk.client.api import ApiClient, build_client
from cardio_risk.client.gateway import RequestGateway

__all__ = ["ApiClient", "build_client", "RequestGateway"]
