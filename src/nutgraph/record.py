"""
Subject record domain model.

Defines the Record dataclass for one subject row: demographics, cohort
membership, the observation age window and per-category allergy markers.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from .allergy import AllergyCategory


@dataclass(frozen=True)
class Record:
    """
    Represents one subject row from the record source.

    Attributes:
        subject_id: Subject identifier (expected unique, not validated).
        birth_year: Year of birth.
        gender: Gender factor, copied verbatim.
        race: Race factor, copied verbatim.
        ethnicity: Ethnicity factor, copied verbatim.
        payer: Payer category factor, copied verbatim.
        atopic_march_cohort: True if the subject belongs to the atopic march cohort.
        age_start_years: Start of the observation window, in years.
        age_end_years: End of the observation window, in years.
        onsets: Onset marker per category; None (or a missing key) means not diagnosed.
        resolutions: Resolution marker per category; informational only.
    """

    subject_id: str
    birth_year: int
    gender: str
    race: str
    ethnicity: str
    payer: str
    atopic_march_cohort: bool
    age_start_years: float
    age_end_years: float
    onsets: Mapping[AllergyCategory, Optional[float]] = field(default_factory=dict)
    resolutions: Mapping[AllergyCategory, Optional[float]] = field(default_factory=dict)

    def has_onset(self, category: AllergyCategory) -> bool:
        # presence is what counts, not the value (0.0 is still a diagnosis)
        return self.onsets.get(category) is not None

    def diagnosed_categories(self) -> list[AllergyCategory]:
        return [category for category in AllergyCategory if self.has_onset(category)]

    @property
    def mean_age(self) -> float:
        """Midpoint of the observation window."""
        return (self.age_start_years + self.age_end_years) / 2.0
