"""Flow graph validation."""

from flowpath.validation.graph import GraphIssue, has_errors, validate_graph

__all__ = ["GraphIssue", "has_errors", "validate_graph"]
