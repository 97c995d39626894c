"""Dataset upload handling."""

import logging
from pathlib import Path

import pandas as pd

from cardio_risk.schemas import UploadSummary

logger = logging.getLogger(__name__)


def load_dataset(path: str | Path) -> pd.DataFrame:
    """Load an uploaded cardiovascular dataset as a pandas DataFrame.

    The classifier's training data is ``;``-separated; comma-separated files
    are accepted as well.

    Parameters
    ----------
    path : str or Path
        Local path to the CSV.

    Returns
    -------
    pd.DataFrame
        The loaded dataset.

    Raises
    ------
    FileNotFoundError
        If the dataset file does not exist at the given path.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Dataset not found at {path}.")

    df = pd.read_csv(path, sep=None, engine="python")
    logger.info("Loaded dataset from %s: %d rows, %d columns.", path, len(df), len(df.columns))

    return df


def process_upload(path: str | Path) -> UploadSummary:
    df = load_dataset(path)
    return UploadSummary(message="Dataset processed successfully", processed=len(df))
