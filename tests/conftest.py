import os
import typing

import pytest

from nutgraph.allergy import AllergyCategory
from nutgraph.record import Record


@pytest.fixture(scope="session")
def fpath_test_dir() -> str:
    """
    Path to `tests/data/` folder.
    """
    return os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture(scope="session")
def fpath_sample_csv(fpath_test_dir: str) -> str:
    """
    Four subjects with degrees 1, 3, 2 and 0:
      205650 M  White  Not Hispanic Medicaid true  -> Peanut
      205651 F  Black  Not Hispanic Private  false -> Peanut, Treenut, Cashew
      205652 F  White  Hispanic     Private  true  -> Brazil, Hazelnut
      205653 M  Asian  Not Hispanic Medicaid false -> (none)
    """
    return os.path.join(fpath_test_dir, "nut_allergy_sample.csv")


@pytest.fixture
def make_record() -> typing.Callable[..., Record]:
    """
    Factory for Records; `diagnosed` lists the categories with an onset marker.
    """

    def _make(
        subject_id: str = "S1",
        diagnosed: typing.Iterable[AllergyCategory] = (),
        gender: str = "F",
        race: str = "White",
        ethnicity: str = "Not Hispanic",
        payer: str = "Private",
        atopic_march_cohort: bool = False,
        onset_value: float = 1.0,
    ) -> Record:
        diagnosed = set(diagnosed)
        return Record(
            subject_id=subject_id,
            birth_year=2000,
            gender=gender,
            race=race,
            ethnicity=ethnicity,
            payer=payer,
            atopic_march_cohort=atopic_march_cohort,
            age_start_years=1.0,
            age_end_years=5.0,
            onsets={c: (onset_value if c in diagnosed else None) for c in AllergyCategory},
        )

    return _make
