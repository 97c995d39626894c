"""History storage, export and dataset utilities."""

from cardio_risk.data.export import export_history, to_csv, to_json
from cardio_risk.data.history import HistoryStore
from cardio_risk.data.storage import InMemoryStorage, JsonFileStorage

__all__ = ["export_history", "to_csv", "to_json", "HistoryStore", "InMemoryStorage", "JsonFileStorage"]
