"""
Allergy category domain model.

Defines the fixed, ordered set of nut-allergy diagnosis categories shared by
graph construction and centrality analysis.
"""

from enum import Enum


class AllergyCategory(Enum):
    """
    Enumeration of nut-allergy diagnosis categories, in declaration order.

    Each member carries:
        label: Display name ("Peanut", "Treenut", ...).
        column_prefix: Stem of the tabular columns for this category; the onset
            marker lives in `<prefix>_alg_start`, the resolution in `<prefix>_alg_end`.
        analyzed: Whether the category is part of the default analysis set.
            Brazil and Hazelnut are graphed but excluded from category degree reporting.
    """

    PEANUT = ("Peanut", "peanut", True)
    TREENUT = ("Treenut", "treenut", True)
    WALNUT = ("Walnut", "walnut", True)
    PECAN = ("Pecan", "pecan", True)
    PISTACHIO = ("Pistachio", "pistach", True)
    ALMOND = ("Almond", "almond", True)
    BRAZIL = ("Brazil", "brazil", False)
    HAZELNUT = ("Hazelnut", "hazelnut", False)
    CASHEW = ("Cashew", "cashew", True)

    def __init__(self, label: str, column_prefix: str, analyzed: bool):
        self.label = label
        self.column_prefix = column_prefix
        self.analyzed = analyzed

    @property
    def onset_column(self) -> str:
        return f"{self.column_prefix}_alg_start"

    @property
    def resolution_column(self) -> str:
        return f"{self.column_prefix}_alg_end"

    @classmethod
    def from_label(cls, label: str) -> "AllergyCategory":
        """
        Convert a human-readable label (or column prefix) into the corresponding enum.
        Matching ignores surrounding whitespace and casing.
        """
        key = label.strip().lower()
        for category in cls:
            if key in (category.label.lower(), category.column_prefix, category.name.lower()):
                return category
        raise ValueError(f"Unknown allergy category label: {label!r}")

    @classmethod
    def analyzed_members(cls) -> tuple["AllergyCategory", ...]:
        """Categories included in analysis by default, in declaration order."""
        return tuple(category for category in cls if category.analyzed)

    def __str__(self) -> str:
        return self.label
