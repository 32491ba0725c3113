"""Data models for profitability snapshots.

Symbol trees come in from the symbol source, per-file counts are produced by
the aggregator, and a finished ``Snapshot`` is an immutable record that
serialises to the camelCase JSON document consumed downstream.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

INDEX_VERSION = "1.0.0"


class SymbolKind(Enum):
    """Closed set of source-construct categories.

    Order and names follow the editor document-symbol protocol; the value is
    the key used in ``documentNodes`` and ``stats``.
    """

    FILE = "file"
    MODULE = "module"
    NAMESPACE = "namespace"
    PACKAGE = "package"
    CLASS = "class"
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    CONSTRUCTOR = "constructor"
    ENUM = "enum"
    INTERFACE = "interface"
    FUNCTION = "function"
    VARIABLE = "variable"
    CONSTANT = "constant"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    KEY = "key"
    NULL = "null"
    ENUM_MEMBER = "enummember"
    STRUCT = "struct"
    EVENT = "event"
    OPERATOR = "operator"
    TYPE_PARAMETER = "typeparameter"


@dataclass(frozen=True)
class SymbolNode:
    """A named symbol with its kind and nested children."""

    kind: SymbolKind
    name: str
    children: tuple[SymbolNode, ...] = ()


@dataclass
class DocumentNodeEntry:
    """Per-file occurrence counts, keyed by ``SymbolKind.value``."""

    path: str
    document_nodes: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, path: str) -> DocumentNodeEntry:
        """Entry with every known kind present and set to zero."""
        return cls(path=path, document_nodes={kind.value: 0 for kind in SymbolKind})

    def total(self) -> int:
        return sum(self.document_nodes.values())

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "documentNodes": dict(self.document_nodes)}


# ── Halstead ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OperationCount:
    """Total/distinct counts for operators or operands of one function."""

    total: int
    distinct: int
    identifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class HalsteadMeasurement:
    """Halstead primitives for one function, as reported by an analyzer.

    Scalar fields may be NaN when the formula is undefined for the function
    (e.g. no operands at all).
    """

    length: float
    vocabulary: float
    volume: float
    difficulty: float
    effort: float
    time: float
    bugs: float
    operands: OperationCount
    operators: OperationCount
    name: str = ""


@dataclass
class MetricHalstead:
    """Halstead totals for a snapshot.

    Floats while accumulating; ``analysis.metrics.floor_halstead`` turns them
    into the integers written to the index.
    """

    length: float = 0
    vocabulary: float = 0
    volume: float = 0
    difficulty: float = 0
    effort: float = 0
    time: float = 0
    bugs_delivered: float = 0
    operands: float = 0
    operators: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "length": self.length,
            "vocabulary": self.vocabulary,
            "volume": self.volume,
            "difficulty": self.difficulty,
            "effort": self.effort,
            "time": self.time,
            "bugsDelivered": self.bugs_delivered,
            "operands": self.operands,
            "operators": self.operators,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MetricHalstead:
        return cls(
            length=data.get("length", 0),
            vocabulary=data.get("vocabulary", 0),
            volume=data.get("volume", 0),
            difficulty=data.get("difficulty", 0),
            effort=data.get("effort", 0),
            time=data.get("time", 0),
            bugs_delivered=data.get("bugsDelivered", 0),
            operands=data.get("operands", 0),
            operators=data.get("operators", 0),
        )


@dataclass(frozen=True)
class MetricGaffney:
    """Gaffney bug estimates for the three line-of-code totals."""

    bugs_including_tests: int = 0
    bugs_excluding_tests: int = 0
    bugs_tests_only: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bugsIncludingTests": self.bugs_including_tests,
            "bugsExcludingTests": self.bugs_excluding_tests,
            "bugsTestsOnly": self.bugs_tests_only,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MetricGaffney:
        return cls(
            bugs_including_tests=data.get("bugsIncludingTests", 0),
            bugs_excluding_tests=data.get("bugsExcludingTests", 0),
            bugs_tests_only=data.get("bugsTestsOnly", 0),
        )


@dataclass(frozen=True)
class Metrics:
    gaffney: MetricGaffney = field(default_factory=MetricGaffney)
    halstead: MetricHalstead = field(default_factory=MetricHalstead)

    def to_dict(self) -> Dict[str, Any]:
        return {"gaffney": self.gaffney.to_dict(), "halstead": self.halstead.to_dict()}


# ── Snapshot ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ApplicationStats:
    """Aggregate over all application (non-test) files of a snapshot."""

    documents_parsed_amount: int = 0
    loc_including_tests: int = 0
    loc_excluding_tests: int = 0
    stats: Dict[str, int] = field(default_factory=dict)
    metrics: Metrics = field(default_factory=Metrics)
    documents_parsed_paths: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.documents_parsed_paths is not None:
            data["documentsParsedPaths"] = list(self.documents_parsed_paths)
        data.update(
            {
                "documentsParsedAmount": self.documents_parsed_amount,
                "locIncludingTests": self.loc_including_tests,
                "locExcludingTests": self.loc_excluding_tests,
                "stats": dict(self.stats),
                "metrics": self.metrics.to_dict(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ApplicationStats:
        metrics = data.get("metrics", {})
        return cls(
            documents_parsed_amount=data.get("documentsParsedAmount", 0),
            loc_including_tests=data.get("locIncludingTests", 0),
            loc_excluding_tests=data.get("locExcludingTests", 0),
            stats=dict(data.get("stats", {})),
            metrics=Metrics(
                gaffney=MetricGaffney.from_dict(metrics.get("gaffney", {})),
                halstead=MetricHalstead.from_dict(metrics.get("halstead", {})),
            ),
            documents_parsed_paths=data.get("documentsParsedPaths"),
        )


@dataclass(frozen=True)
class CoverageStats:
    """Aggregate over test files: a lexical proxy for coverage."""

    documents_parsed_amount: int = 0
    loc_tests_only: int = 0
    test_case_occurrences: int = 0
    documents_parsed_paths: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.documents_parsed_paths is not None:
            data["documentsParsedPaths"] = list(self.documents_parsed_paths)
        data.update(
            {
                "documentsParsedAmount": self.documents_parsed_amount,
                "locTestsOnly": self.loc_tests_only,
                "testCaseOccurrences": self.test_case_occurrences,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CoverageStats:
        return cls(
            documents_parsed_amount=data.get("documentsParsedAmount", 0),
            loc_tests_only=data.get("locTestsOnly", 0),
            test_case_occurrences=data.get("testCaseOccurrences", 0),
            documents_parsed_paths=data.get("documentsParsedPaths"),
        )


@dataclass(frozen=True)
class Snapshot:
    """Complete, immutable measurement of the codebase at one moment."""

    snapshot_date: str
    application_stats: ApplicationStats = field(default_factory=ApplicationStats)
    snapshot_hash: Optional[str] = None
    coverage_stats: Optional[CoverageStats] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"snapshotDate": self.snapshot_date}
        if self.snapshot_hash is not None:
            data["snapshotHash"] = self.snapshot_hash
        data["applicationStats"] = self.application_stats.to_dict()
        if self.coverage_stats is not None:
            data["coverageStats"] = self.coverage_stats.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Snapshot:
        coverage = data.get("coverageStats")
        return cls(
            snapshot_date=data["snapshotDate"],
            snapshot_hash=data.get("snapshotHash"),
            application_stats=ApplicationStats.from_dict(data.get("applicationStats", {})),
            coverage_stats=CoverageStats.from_dict(coverage) if coverage is not None else None,
        )


@dataclass
class Index:
    """Top-level output document: one current state or a monthly series."""

    project_name: str
    timestamp: int
    version: str = INDEX_VERSION
    current_state: Optional[Snapshot] = None
    snap_shots: Optional[List[Snapshot]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "projectName": self.project_name,
            "timestamp": self.timestamp,
        }
        if self.current_state is not None:
            data["currentState"] = self.current_state.to_dict()
        if self.snap_shots is not None:
            data["snapShots"] = [s.to_dict() for s in self.snap_shots]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Index:
        current = data.get("currentState")
        series = data.get("snapShots")
        return cls(
            version=data.get("version", INDEX_VERSION),
            project_name=data["projectName"],
            timestamp=data["timestamp"],
            current_state=Snapshot.from_dict(current) if current is not None else None,
            snap_shots=[Snapshot.from_dict(s) for s in series] if series is not None else None,
        )
