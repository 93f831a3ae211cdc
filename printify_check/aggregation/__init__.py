# printify_check/aggregation/__init__.py
"""Parsing and aggregation of validation and compliance results."""

from .aggregator import (
    MultiStandardAggregate,
    ResultAggregator,
    SingleAggregate,
    derive_fix_types,
    map_issue_to_fix_type,
    parse_compliance_result,
    parse_multi_standard,
    parse_validation_result,
)

__all__ = [
    "ResultAggregator",
    "SingleAggregate",
    "MultiStandardAggregate",
    "derive_fix_types",
    "map_issue_to_fix_type",
    "parse_compliance_result",
    "parse_multi_standard",
    "parse_validation_result",
]
