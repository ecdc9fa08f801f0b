import logging
import typing

import pandas as pd

from collections import Counter
from stairval.notepad import Notepad

from .allergy import AllergyCategory
from .errors import IngestionError
from .record import Record

logger = logging.getLogger(__name__)

# Minimal required columns (after renaming) for a record table
RECORD_KEY_COLUMNS = {
    "subject_id",
    "birth_year",
    "gender_factor",
    "race_factor",
    "ethnicity_factor",
    "payer_factor",
    "atopic_march_cohort",
    "age_start_years",
    "age_end_years",
}

TRUE_LABELS = {"1", "true", "t", "yes", "y"}
FALSE_LABELS = {"0", "false", "f", "no", "n"}
# Placeholders that R and spreadsheet exports write for empty cells
MISSING_LABELS = {"na", "nan", "n/a", "null", "none"}


class RecordMapper:
    """
    Maps a normalized record table onto Record objects.

    Demographic strings and identifiers are copied verbatim; only the
    numeric and boolean columns are coerced. Every coercion failure is
    recorded on the notepad, and a single IngestionError is raised once the
    whole table has been scanned.
    """

    def apply_mapping(self, df: pd.DataFrame, notepad: Notepad) -> list[Record]:
        """
        Process:
        1) check required columns
        2) warn about absent allergy columns (treated as never diagnosed)
        3) parse every row into a Record, recording issues on the notepad
        4) abort with IngestionError if the notepad has any error
        """
        have = set(df.columns)
        missing = sorted(RECORD_KEY_COLUMNS - have)
        if missing:
            notepad.add_error(f"Record table is missing required columns: {missing}")
        else:
            for category in AllergyCategory:
                if category.onset_column not in have:
                    notepad.add_warning(
                        f"Column {category.onset_column!r} not found; no subject will be linked to {category}"
                    )

        records: list[Record] = []
        if not missing:
            for index, row in df.iterrows():
                record = self.parse_record_row(row, index, notepad)
                if record is not None:
                    records.append(record)

        if notepad.has_errors(include_subsections=True):
            issues = [str(error) for error in notepad.errors()]
            raise IngestionError(f"{len(issues)} problem(s) found in record table", issues)

        self._log_duplicate_subjects(records)
        logger.info(f"Mapped {len(records)} records")
        return records

    @staticmethod
    def parse_record_row(row: pd.Series, index: typing.Any, notepad: Notepad) -> typing.Optional[Record]:
        """
        Parse a single row into a Record.
        Returns None if any value could not be coerced; each failure is added to the notepad.
        """
        failed = False

        def coerce(column: str, convert: typing.Callable[[typing.Any], typing.Any]) -> typing.Any:
            nonlocal failed
            try:
                return convert(row.get(column))
            except (ValueError, TypeError) as e:
                notepad.add_error(f"Row {index}, column {column!r}: {e}")
                failed = True
                return None

        birth_year = coerce("birth_year", RecordMapper._to_int)
        age_start = coerce("age_start_years", RecordMapper._to_float)
        age_end = coerce("age_end_years", RecordMapper._to_float)
        cohort = coerce("atopic_march_cohort", RecordMapper._to_bool)

        onsets: dict[AllergyCategory, typing.Optional[float]] = {}
        resolutions: dict[AllergyCategory, typing.Optional[float]] = {}
        for category in AllergyCategory:
            onsets[category] = coerce(category.onset_column, RecordMapper._to_optional_float)
            resolutions[category] = coerce(category.resolution_column, RecordMapper._to_optional_float)

        if failed:
            return None

        return Record(
            subject_id=RecordMapper._to_text(row.get("subject_id")),
            birth_year=birth_year,
            gender=RecordMapper._to_text(row.get("gender_factor")),
            race=RecordMapper._to_text(row.get("race_factor")),
            ethnicity=RecordMapper._to_text(row.get("ethnicity_factor")),
            payer=RecordMapper._to_text(row.get("payer_factor")),
            atopic_march_cohort=cohort,
            age_start_years=age_start,
            age_end_years=age_end,
            onsets=onsets,
            resolutions=resolutions,
        )

    @staticmethod
    def _is_missing(value: typing.Any) -> bool:
        # Handle None, NaN, pandas NA, and empty/whitespace-only strings
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip() or value.strip().lower() in MISSING_LABELS
        return bool(pd.isna(value))

    @staticmethod
    def _to_text(value: typing.Any) -> str:
        """Verbatim string copy; missing cells become the empty string."""
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        return str(value)

    @staticmethod
    def _to_optional_float(value: typing.Any) -> typing.Optional[float]:
        """
        Allergy markers: blank/NaN -> None (absent), anything else must be numeric.
        """
        if RecordMapper._is_missing(value):
            return None
        return float(str(value).strip())

    @staticmethod
    def _to_float(value: typing.Any) -> float:
        if RecordMapper._is_missing(value):
            raise ValueError("value is required")
        return float(str(value).strip())

    @staticmethod
    def _to_int(value: typing.Any) -> int:
        """
        Integers may arrive as '2000' or, from Excel, '2000.0'.
        """
        number = RecordMapper._to_float(value)
        if not number.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(number)

    @staticmethod
    def _to_bool(value: typing.Any) -> bool:
        """
        Strict boolean parsing:
        - True for: 1, '1', 'true', 't', 'yes', 'y' (case-insensitive)
        - False for: 0, '0', 'false', 'f', 'no', 'n'
        - anything else (including blanks) is rejected
        """
        if isinstance(value, bool):
            return value
        if RecordMapper._is_missing(value):
            raise ValueError("value is required")
        s = str(value).strip().lower()
        if s in TRUE_LABELS:
            return True
        if s in FALSE_LABELS:
            return False
        raise ValueError(f"expected a boolean, got {value!r}")

    @staticmethod
    def _log_duplicate_subjects(records: list[Record]) -> None:
        # duplicates are kept as separate individuals; just make them visible
        counts = Counter(record.subject_id for record in records)
        for subject_id, count in counts.items():
            if count > 1:
                logger.debug(f"Subject {subject_id!r} appears {count} times; each occurrence is a separate individual")
