import logging
import pathlib
import zipfile

import pandas as pd

from openpyxl.utils.exceptions import InvalidFileException

from .errors import IngestionError

logger = logging.getLogger(__name__)

# Friendly column names → canonical record columns
RENAME_MAP = {
    # demographics
    "id": "subject_id",
    "subject": "subject_id",
    "gender": "gender_factor",
    "race": "race_factor",
    "ethnicity": "ethnicity_factor",
    "payer": "payer_factor",
    "cohort": "atopic_march_cohort",
    "age_start": "age_start_years",
    "age_end": "age_end_years",
    # allergy markers spelled out in full
    "pistachio_alg_start": "pistach_alg_start",
    "pistachio_alg_end": "pistach_alg_end",
}

CSV_SUFFIXES = {".csv", ".txt"}
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize headers to snake_case lowercase and apply RENAME_MAP.
    """
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)"
        .str.replace(r"\s+", "_", regex=True)  # spaces → underscore
        .str.replace(":", "", regex=False)  # drop colons
        .str.lower()
    )
    return df.rename(
        columns={orig: target for orig, target in RENAME_MAP.items() if orig in df.columns}
    )


def load_records_table(path: str) -> pd.DataFrame:
    """
    Read a subject table into a DataFrame:
      - CSV (.csv, .txt) or Excel (.xlsx, .xlsm; first worksheet), chosen by file suffix
      - first row = header, every cell read as a string
      - normalize headers and apply renames from RENAME_MAP
    Raises IngestionError if the file cannot be opened or parsed.
    """
    source = pathlib.Path(path)
    suffix = source.suffix.lower()
    try:
        if suffix in CSV_SUFFIXES:
            df = pd.read_csv(source, header=0, dtype=str, keep_default_na=False)
        elif suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(source, sheet_name=0, header=0, dtype=str, engine="openpyxl")
        else:
            raise IngestionError(f"Unsupported record source {str(source)!r}: expected CSV or Excel")
    except IngestionError:
        raise
    except (OSError, ValueError, pd.errors.ParserError, zipfile.BadZipFile, InvalidFileException) as e:
        raise IngestionError(f"Failed to read {str(source)!r}: {e}") from e

    df = normalize_columns(df)
    logger.debug(f"Loaded {len(df)} rows with columns {list(df.columns)} from '{source}'")
    return df
