"""
Presentation helpers for CentralityReport: console lines and a tabular export.
"""

import pandas as pd

from .centrality import CentralityReport, Dimension

EXPORT_COLUMNS = ["dimension", "value", "member_count", "total_degree", "average_degree"]
CATEGORY_DIMENSION = "allergy"


def format_report(report: CentralityReport, per_individual: bool = False) -> list[str]:
    """
    One line per demographic bucket, then one per analyzed allergy category.
    With `per_individual`, the degree of every individual node comes first.
    """
    lines: list[str] = []
    if per_individual:
        for entry in report.individual_degrees:
            lines.append(f"Degree centrality for node {entry.node_id} (ID: {entry.subject_id}): {entry.degree}")

    for dimension in Dimension:
        for value, average in report.averages(dimension).items():
            lines.append(f"Average degree centrality for {dimension.label} {value}: {average}")

    for category, degree in report.category_degrees.items():
        lines.append(f"Degree centrality for allergy {category}: {degree}")
    return lines


def report_to_frame(report: CentralityReport) -> pd.DataFrame:
    """
    Flatten the report into one row per bucket; category rows carry the raw
    degree in both total and average columns with member_count left empty.
    """
    rows = []
    for dimension in Dimension:
        for value, bucket in report.buckets[dimension].items():
            rows.append({
                "dimension": dimension.label,
                "value": value,
                "member_count": bucket.member_count,
                "total_degree": bucket.total_degree,
                "average_degree": bucket.average,
            })
    for category, degree in report.category_degrees.items():
        rows.append({
            "dimension": CATEGORY_DIMENSION,
            "value": category.label,
            "member_count": None,
            "total_degree": float(degree),
            "average_degree": float(degree),
        })
    frame = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    return frame.astype({"member_count": "Int64"})
