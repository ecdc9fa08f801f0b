"""
Bipartite subject/allergy graph built with NetworkX.

Node ids are stable integers: the nine allergy categories occupy ids 0-8 in
declaration order, individuals follow in record order. Each node stores its
payload under the "node" attribute as either an IndividualNode or an
AllergyCategoryNode. Edges always run individual -> category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

import networkx as nx

from .allergy import AllergyCategory
from .record import Record

logger = logging.getLogger(__name__)

NODE_ATTRIBUTE = "node"


@dataclass(frozen=True)
class IndividualNode:
    """One subject record and the demographics carried into analysis."""

    subject_id: str
    gender: str
    race: str
    ethnicity: str
    payer: str
    atopic_march_cohort: bool

    @classmethod
    def from_record(cls, record: Record) -> IndividualNode:
        return cls(
            subject_id=record.subject_id,
            gender=record.gender,
            race=record.race,
            ethnicity=record.ethnicity,
            payer=record.payer,
            atopic_march_cohort=record.atopic_march_cohort,
        )


@dataclass(frozen=True)
class AllergyCategoryNode:
    """One of the nine fixed diagnosis categories."""

    category: AllergyCategory


Node = Union[IndividualNode, AllergyCategoryNode]


class AllergyGraph:
    """Read-only view over the frozen DiGraph produced by GraphBuilder."""

    def __init__(self, graph: nx.DiGraph, category_nodes: dict[AllergyCategory, int]):
        self.graph = graph
        self._category_nodes = dict(category_nodes)

    def node(self, node_id: int) -> Node:
        return self.graph.nodes[node_id][NODE_ATTRIBUTE]

    def category_node(self, category: AllergyCategory) -> int:
        return self._category_nodes[category]

    def nodes(self) -> Iterator[tuple[int, Node]]:
        """All nodes in creation order."""
        yield from self.graph.nodes(data=NODE_ATTRIBUTE)

    def individuals(self) -> Iterator[tuple[int, IndividualNode]]:
        for node_id, node in self.nodes():
            if isinstance(node, IndividualNode):
                yield node_id, node

    def categories(self) -> Iterator[tuple[int, AllergyCategoryNode]]:
        for node_id, node in self.nodes():
            if isinstance(node, AllergyCategoryNode):
                yield node_id, node

    def degree(self, node_id: int) -> int:
        """Number of incident edges, incoming and outgoing."""
        return self.graph.degree(node_id)

    def linked_categories(self, node_id: int) -> list[AllergyCategory]:
        return [self.node(target).category for target in self.graph.successors(node_id)]

    def number_of_nodes(self) -> int:
        return self.graph.number_of_nodes()

    def number_of_edges(self) -> int:
        return self.graph.number_of_edges()


class GraphBuilder:
    """Turns an ordered sequence of Records into an AllergyGraph."""

    def build(self, records: Iterable[Record]) -> AllergyGraph:
        """Build the subject/allergy graph for one batch of records

        1. add the nine category nodes in declaration order
        2. add one individual per record, in input order, never merged
        3. link each individual to every category whose onset marker is present
        """
        graph = nx.DiGraph()
        category_nodes: dict[AllergyCategory, int] = {}

        for category in AllergyCategory:
            node_id = graph.number_of_nodes()
            graph.add_node(node_id, **{NODE_ATTRIBUTE: AllergyCategoryNode(category)})
            category_nodes[category] = node_id

        for record in records:
            individual_id = graph.number_of_nodes()
            graph.add_node(individual_id, **{NODE_ATTRIBUTE: IndividualNode.from_record(record)})
            for category in AllergyCategory:
                if record.has_onset(category):
                    graph.add_edge(individual_id, category_nodes[category])

        logger.info(f"Graph built with {graph.number_of_nodes()} nodes and {graph.number_of_edges()} edges")

        return AllergyGraph(nx.freeze(graph), category_nodes)
