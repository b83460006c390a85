"""Document tree and diagnostic models for yamltools."""

from yamltools.models.errors import (
    Diagnostic,
    DiagnosticKind,
    Severity,
    Statistics,
    ValidationReport,
)
from yamltools.models.nodes import Mapping, Node, Scalar, ScalarKind, Sequence, depth, from_python

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "Mapping",
    "Node",
    "Scalar",
    "ScalarKind",
    "Sequence",
    "Severity",
    "Statistics",
    "ValidationReport",
    "depth",
    "from_python",
]
