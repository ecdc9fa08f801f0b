"""
Degree-centrality aggregation over the subject/allergy graph.

Individual degrees are averaged per demographic value; category degrees are
reported raw for the analyzed subset of categories.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .allergy import AllergyCategory
from .record import Record
from .graph import AllergyCategoryNode, AllergyGraph, GraphBuilder, IndividualNode

logger = logging.getLogger(__name__)


class Dimension(Enum):
    """Demographic dimensions individual degrees are bucketed by."""

    GENDER = "gender"
    RACE = "race"
    ETHNICITY = "ethnicity"
    PAYER = "payer factor"
    COHORT = "atopic march cohort"

    @property
    def label(self) -> str:
        return self.value

    def key_for(self, individual: IndividualNode) -> str:
        if self is Dimension.GENDER:
            return individual.gender
        if self is Dimension.RACE:
            return individual.race
        if self is Dimension.ETHNICITY:
            return individual.ethnicity
        if self is Dimension.PAYER:
            return individual.payer
        # cohort flag rendered as a two-valued key
        return "true" if individual.atopic_march_cohort else "false"


@dataclass
class DegreeBucket:
    """Running sum of degrees and member count for one demographic value."""

    total_degree: float = 0.0
    member_count: int = 0

    def add(self, degree: int) -> None:
        self.total_degree += degree
        self.member_count += 1

    @property
    def average(self) -> float:
        # buckets only exist once a member is added; the fallback keeps lookups total
        return self.total_degree / (self.member_count or 1)


@dataclass(frozen=True)
class IndividualDegree:
    node_id: int
    subject_id: str
    degree: int


@dataclass
class CentralityReport:
    """
    Result of one analysis pass.

    Attributes:
        buckets: Dimension -> demographic value -> DegreeBucket, in first-seen order.
        category_degrees: Raw degree per analyzed category, in declaration order.
        individual_degrees: Degree of every individual, in graph order.
    """

    buckets: dict[Dimension, dict[str, DegreeBucket]] = field(
        default_factory=lambda: {dimension: {} for dimension in Dimension}
    )
    category_degrees: dict[AllergyCategory, int] = field(default_factory=dict)
    individual_degrees: list[IndividualDegree] = field(default_factory=list)

    def averages(self, dimension: Dimension) -> dict[str, float]:
        return {value: bucket.average for value, bucket in self.buckets[dimension].items()}

    def average_for(self, dimension: Dimension, value: str) -> float:
        return self.buckets[dimension].get(value, DegreeBucket()).average

    @property
    def gender_averages(self) -> dict[str, float]:
        return self.averages(Dimension.GENDER)

    @property
    def race_averages(self) -> dict[str, float]:
        return self.averages(Dimension.RACE)

    @property
    def ethnicity_averages(self) -> dict[str, float]:
        return self.averages(Dimension.ETHNICITY)

    @property
    def payer_averages(self) -> dict[str, float]:
        return self.averages(Dimension.PAYER)

    @property
    def cohort_averages(self) -> dict[str, float]:
        return self.averages(Dimension.COHORT)


class CentralityAnalyzer:
    """
    Computes degree centrality for an AllergyGraph.

    `analyzed_categories` restricts which category degrees are reported; it
    defaults to the categories flagged `analyzed` on AllergyCategory.
    """

    def __init__(self, analyzed_categories: Optional[Iterable[AllergyCategory]] = None):
        if analyzed_categories is None:
            analyzed_categories = AllergyCategory.analyzed_members()
        self.analyzed_categories = frozenset(analyzed_categories)

    def analyze(self, graph: AllergyGraph) -> CentralityReport:
        report = CentralityReport()
        # every analyzed category is reported, even with no linked individuals
        report.category_degrees = {
            category: 0 for category in AllergyCategory if category in self.analyzed_categories
        }

        for node_id, node in graph.nodes():
            degree = graph.degree(node_id)
            if isinstance(node, IndividualNode):
                logger.debug(f"Degree centrality for node {node_id} (ID: {node.subject_id}): {degree}")
                report.individual_degrees.append(IndividualDegree(node_id, node.subject_id, degree))
                for dimension in Dimension:
                    bucket = report.buckets[dimension].setdefault(dimension.key_for(node), DegreeBucket())
                    bucket.add(degree)
            elif isinstance(node, AllergyCategoryNode):
                if node.category in self.analyzed_categories:
                    report.category_degrees[node.category] = degree
            else:
                raise TypeError(f"Unexpected node payload {node!r} at node {node_id}")

        logger.info(
            f"Analyzed {len(report.individual_degrees)} individuals and "
            f"{len(report.category_degrees)} allergy categories"
        )
        return report


def analyze_records(records: Iterable[Record], analyzed_categories: Optional[Iterable[AllergyCategory]] = None) -> CentralityReport:
    """Build the graph for `records` and analyze it in one pass."""
    graph = GraphBuilder().build(records)
    return CentralityAnalyzer(analyzed_categories).analyze(graph)
