"""Capped, newest-first history of prediction results."""

import json
import logging
import threading

from pydantic import TypeAdapter, ValidationError

from cardio_risk.data.storage import KeyValueStorage
from cardio_risk.errors import NotFoundError
from cardio_risk.schemas import HistoryFilters, PaginatedResponse, PredictionResult

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "predictionHistory"
DEFAULT_MAX_ENTRIES = 50
DEFAULT_PAGE_LIMIT = 10

_history_adapter = TypeAdapter(list[PredictionResult])


def encode_history(history: list[PredictionResult]) -> str:
    """Serialize results to the persisted JSON form (camelCase keys)."""
    return json.dumps([r.model_dump(mode="json", by_alias=True) for r in history])


class HistoryStore:
    """Ordered log of past assessments kept in a key-value storage.

    Entries are kept newest first. Inserting beyond ``max_entries`` evicts
    the oldest ones. Every read-modify-write cycle holds the store lock, so
    a store shared across threads keeps its cap and ordering.

    Parameters
    ----------
    storage : KeyValueStorage
        Backend holding the encoded history.
    key : str
        Storage key of the history list.
    max_entries : int
        Maximum number of retained results.
    default_limit : int
        Page size used when a query does not set one.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        default_limit: int = DEFAULT_PAGE_LIMIT,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.storage = storage
        self.key = key
        self.max_entries = max_entries
        self.default_limit = default_limit
        self._lock = threading.RLock()

    def _load(self) -> list[PredictionResult]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            return _history_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable history under %r: %s", self.key, e)
            return []

    def _save(self, history: list[PredictionResult]) -> None:
        self.storage.set(self.key, encode_history(history))

    def all(self) -> list[PredictionResult]:
        """Return every stored result, newest first."""
        with self._lock:
            return self._load()

    def insert(self, result: PredictionResult) -> None:
        """Prepend ``result`` and evict entries beyond the cap."""
        with self._lock:
            history = self._load()
            history.insert(0, result)
            evicted = len(history) - self.max_entries
            if evicted > 0:
                logger.debug("History cap reached, evicting %d oldest entries", evicted)
            self._save(history[: self.max_entries])

    def list(self, filters: HistoryFilters | None = None) -> PaginatedResponse[PredictionResult]:
        """Filter by risk level, then paginate.

        ``total`` is the filtered count, so ``has_more`` and ``total`` agree.
        """
        filters = filters or HistoryFilters()
        history = self.all()

        if filters.risk_level and filters.risk_level != "all":
            history = [r for r in history if r.risk_level == filters.risk_level]

        limit = filters.limit or self.default_limit
        start = (filters.page - 1) * limit
        end = start + limit

        return PaginatedResponse[PredictionResult](
            data=history[start:end],
            total=len(history),
            page=filters.page,
            limit=limit,
            has_more=end < len(history),
        )

    def get(self, prediction_id: str) -> PredictionResult:
        for result in self.all():
            if result.id == prediction_id:
                return result
        raise NotFoundError(prediction_id)

    def delete(self, prediction_id: str) -> None:
        """Remove the result with ``prediction_id``; unknown ids are ignored."""
        with self._lock:
            history = self._load()
            remaining = [r for r in history if r.id != prediction_id]
            if len(remaining) != len(history):
                self._save(remaining)
                logger.info("Deleted prediction %s", prediction_id)

    def clear(self) -> None:
        with self._lock:
            self.storage.remove(self.key)

    def __len__(self) -> int:
        return len(self.all())
