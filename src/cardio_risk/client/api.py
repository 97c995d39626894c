"""Client facade combining the transformer, gateway and history store."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import numpy as np
import requests
from pydantic import ValidationError

from cardio_risk.client.gateway import RequestGateway
from cardio_risk.data.export import export_history
from cardio_risk.data.history import HistoryStore
from cardio_risk.data.loader import process_upload
from cardio_risk.data.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from cardio_risk.errors import CardioRiskError, ServiceError
from cardio_risk.features.engineering import to_service_input
from cardio_risk.models.metrics import accuracy_history, dataset_samples, reported_metrics
from cardio_risk.models.scoring import build_prediction_result
from cardio_risk.schemas import (
    AccuracyPoint,
    DatasetSample,
    ExportPayload,
    HistoryFilters,
    LoginResponse,
    MLMetrics,
    PaginatedResponse,
    PredictionInput,
    PredictionResult,
    ServiceOutput,
    UploadSummary,
    User,
)
from cardio_risk.utils.config import ClientSettings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApiClient:
    """Public surface used by the front end.

    All collaborators are injected so several independently configured
    clients can coexist (e.g. one per test).

    Parameters
    ----------
    settings : ClientSettings or None
        Endpoint, history and model settings; defaults if None.
    storage : KeyValueStorage or None
        Holds the session token and the history; in-memory if None.
    clock : callable or None
        Returns the current timezone-aware time.
    rng : np.random.Generator or None
        Source of the placeholder scores and synthetic series.
    session : requests.Session or None
        HTTP session passed to the gateway.
    base_url : str or None
        Overrides ``settings.base_url``.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        storage: KeyValueStorage | None = None,
        clock: Clock | None = None,
        rng: np.random.Generator | None = None,
        session: requests.Session | None = None,
        base_url: str | None = None,
    ):
        self.settings = settings or ClientSettings()
        self.storage = storage if storage is not None else InMemoryStorage()
        self.clock = clock or utc_now
        self.rng = rng or np.random.default_rng()

        self.gateway = RequestGateway(
            base_url=base_url or self.settings.base_url,
            token_provider=lambda: self.storage.get(self.settings.token_key),
            session=session,
            timeout=self.settings.timeout,
        )
        self.history = HistoryStore(
            self.storage,
            key=self.settings.storage_key,
            max_entries=self.settings.max_entries,
            default_limit=self.settings.default_limit,
        )

    def close(self) -> None:
        """Release the gateway's HTTP session."""
        self.gateway.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Auth (mock: any credentials are accepted, not a security boundary)
    # ------------------------------------------------------------------

    def _mock_user(self, email: str, name: str) -> User:
        return User(
            id=self.settings.user_id,
            email=email,
            name=name,
            role="doctor",
            created_at=self.clock(),
        )

    def login(self, email: str, password: str) -> LoginResponse:
        logger.info("Login attempt: %s", email)
        now = self.clock()
        token = f"demo-token-{int(now.timestamp() * 1000)}"
        self.storage.set(self.settings.token_key, token)
        return LoginResponse(token=token, user=self._mock_user(email, email.split("@")[0]))

    def logout(self) -> None:
        """Clear the local session; remote failures are logged and ignored."""
        try:
            self.remote_logout()
        except CardioRiskError as e:
            logger.warning("Ignoring logout failure: %s", e)
        finally:
            self.storage.remove(self.settings.token_key)

    def remote_logout(self) -> None:
        """Invalidate the session server-side. The mock backend keeps no sessions."""

    def get_current_user(self) -> User:
        return self._mock_user("doctor@hospital.com", "Dr. John Doe")

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def create_prediction(self, data: PredictionInput) -> PredictionResult:
        """Run the full pipeline: transform, classify, explain, record.

        History is only written after a successful round trip.

        Raises
        ------
        NetworkError
            If the classifier is unreachable.
        ServiceError
            If the classifier rejects the request or answers with an invalid body.
        """
        service_input = to_service_input(data)
        raw = self.gateway.post(self.settings.predict_path, service_input.model_dump())

        try:
            output = ServiceOutput.model_validate(raw)
        except ValidationError as e:
            raise ServiceError(
                message=f"Unexpected classifier response: {raw!r}",
                code="INVALID_RESPONSE",
            ) from e

        result = build_prediction_result(
            output,
            data,
            rng=self.rng,
            created_at=self.clock(),
            user_id=self.settings.user_id,
            model_version=self.settings.model_version,
        )
        self.history.insert(result)
        logger.info(
            "Created prediction %s: risk=%d score=%d level=%s",
            result.id,
            output.risk,
            result.risk_score,
            result.risk_level,
        )
        return result

    def get_prediction_history(
        self, filters: HistoryFilters | None = None
    ) -> PaginatedResponse[PredictionResult]:
        return self.history.list(filters)

    def get_prediction(self, prediction_id: str) -> PredictionResult:
        return self.history.get(prediction_id)

    def delete_prediction(self, prediction_id: str) -> None:
        self.history.delete(prediction_id)

    def export_history(self, fmt: str = "csv") -> ExportPayload:
        return export_history(self.history.all(), fmt=fmt, date_format=self.settings.date_format)

    # ------------------------------------------------------------------
    # Metrics and datasets
    # ------------------------------------------------------------------

    def get_metrics(self) -> MLMetrics:
        return reported_metrics(self.settings.model_version, last_updated=self.clock())

    def get_accuracy_history(self, days: int = 30) -> list[AccuracyPoint]:
        return accuracy_history(self.clock().date(), self.rng, days=days)

    def get_dataset_samples(self, limit: int = 100) -> list[DatasetSample]:
        return dataset_samples(self.rng, limit=limit)

    def upload_dataset(self, path: str | Path) -> UploadSummary:
        return process_upload(path)


def build_client(settings: ClientSettings, session: requests.Session | None = None) -> ApiClient:
    """Create a client whose state is persisted at ``settings.storage_path`` when set."""
    storage = JsonFileStorage(settings.storage_path) if settings.storage_path else InMemoryStorage()
    return ApiClient(settings=settings, storage=storage, session=session)
