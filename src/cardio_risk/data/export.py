"""Export serializers for prediction history."""

import json
import logging

import pandas as pd

from cardio_risk.schemas import ExportPayload, PredictionResult

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Date", "Age", "Gender", "Risk Score", "Risk Level"]
DEFAULT_DATE_FORMAT = "%m/%d/%Y"

MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
}


def to_csv(history: list[PredictionResult], date_format: str = DEFAULT_DATE_FORMAT) -> bytes:
    """Render history as CSV, one row per result in store order.

    Dates are the creation date in the local timezone. Fields containing
    delimiters or quotes are quoted.
    """
    rows = [
        [
            r.created_at.astimezone().strftime(date_format),
            r.input.age,
            r.input.gender,
            r.risk_score,
            r.risk_level,
        ]
        for r in history
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False, lineterminator="\n").encode("utf-8")


def to_json(history: list[PredictionResult]) -> bytes:
    """Render history as a pretty-printed JSON list (camelCase keys)."""
    payload = [r.model_dump(mode="json", by_alias=True) for r in history]
    return json.dumps(payload, indent=2).encode("utf-8")


def export_history(
    history: list[PredictionResult],
    fmt: str = "csv",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> ExportPayload:
    """Serialize history in the requested format.

    Parameters
    ----------
    history : list[PredictionResult]
        Results, newest first.
    fmt : str
        ``"csv"`` or ``"json"``.
    date_format : str
        ``strftime`` format of the CSV date column.

    Returns
    -------
    ExportPayload
        Content bytes with their media type and a suggested filename.

    Raises
    ------
    ValueError
        If ``fmt`` is not a supported format.
    """
    if fmt not in MEDIA_TYPES:
        raise ValueError(f"Unsupported export format: {fmt!r}. Choose from {sorted(MEDIA_TYPES)}.")

    content = to_json(history) if fmt == "json" else to_csv(history, date_format=date_format)
    logger.info("Exported %d predictions as %s (%d bytes)", len(history), fmt, len(content))

    return ExportPayload(
        content=content,
        media_type=MEDIA_TYPES[fmt],
        filename=f"prediction-history.{fmt}",
    )
