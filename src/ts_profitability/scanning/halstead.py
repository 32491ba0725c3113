"""Per-function Halstead measurements from tree-sitter tokens.

Token classification:
    - anonymous leaves (punctuation, keywords) are operators, keyed by type
    - named leaves (identifiers, literals, ``this``...) are operands, keyed by text
    - string, template, regex and number literals count as one operand each
    - comments are ignored
    - a nested function is measured on its own and excluded from its parent

Formulas follow the escomplex conventions:
    length N = N1 + N2            vocabulary n = n1 + n2
    volume V = N * log2(n)        difficulty D = (n1 / 2) * (N2 / n2)
    effort E = D * V              time T = E / 18
    bugs B = V / 3000
Undefined values (empty vocabulary, no distinct operands) are NaN.
"""

from __future__ import annotations

import math
from collections import Counter
from pathlib import Path
from typing import Any, Iterator, Optional

from ..exceptions import FileAccessError
from ..models import HalsteadMeasurement, OperationCount
from .treesitter_parser import TreeSitterParser

FUNCTION_NODE_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

_ATOMIC_OPERAND_TYPES = frozenset(
    {"string", "template_string", "regex", "number", "predefined_type"}
)

# Stroud number used by Halstead for the time estimate (seconds)
STROUD_NUMBER = 18
BUGS_DIVISOR = 3000


class TreeSitterHalsteadAnalyzer:
    """Halstead analyzer for ``.ts``/``.tsx`` files under a project root."""

    def __init__(self, root: Path, parser: Optional[TreeSitterParser] = None) -> None:
        self.root = Path(root)
        self._parser = parser or TreeSitterParser()

    def analyze(self, path: str) -> list[HalsteadMeasurement]:
        full_path = self.root / path
        try:
            tree = self._parser.parse_file(full_path)
        except OSError as e:
            raise FileAccessError(full_path, f"Cannot read file: {e}")
        if tree is None:
            return []
        return [measure_function(node) for node in iter_functions(tree.root_node)]


def iter_functions(root_node: Any) -> Iterator[Any]:
    """Yield every function-like node in document order."""
    stack = [root_node]
    while stack:
        node = stack.pop()
        # the bare `function` keyword shares its type name with the expression node
        if node.is_named and node.type in FUNCTION_NODE_TYPES:
            yield node
        stack.extend(reversed(node.children))


def measure_function(node: Any) -> HalsteadMeasurement:
    operators: Counter[str] = Counter()
    operands: Counter[str] = Counter()
    _collect_tokens(node, operators, operands)
    name_node = node.child_by_field_name("name")
    name = name_node.text.decode("utf-8", errors="replace") if name_node is not None and name_node.text else "<anonymous>"
    return halstead_from_counts(operators, operands, name=name)


def _collect_tokens(node: Any, operators: Counter[str], operands: Counter[str]) -> None:
    stack = list(reversed(node.children))
    while stack:
        child = stack.pop()
        if child.type in FUNCTION_NODE_TYPES or child.type == "comment":
            continue
        if child.type in _ATOMIC_OPERAND_TYPES or (child.child_count == 0 and child.is_named):
            operands[_node_text(child)] += 1
            continue
        if child.child_count == 0:
            operators[child.type] += 1
            continue
        stack.extend(reversed(child.children))


def _node_text(node: Any) -> str:
    if node.text is None:
        return node.type
    return node.text.decode("utf-8", errors="replace")


def halstead_from_counts(
    operators: Counter[str], operands: Counter[str], name: str = ""
) -> HalsteadMeasurement:
    """Derive the Halstead measures from operator/operand occurrence counts."""
    n1 = len(operators)
    n2 = len(operands)
    total_operators = sum(operators.values())
    total_operands = sum(operands.values())

    length = total_operators + total_operands
    vocabulary = n1 + n2
    volume = length * math.log2(vocabulary) if vocabulary > 0 else math.nan
    difficulty = (n1 / 2) * (total_operands / n2) if n2 > 0 else math.nan
    effort = difficulty * volume
    return HalsteadMeasurement(
        length=length,
        vocabulary=vocabulary,
        volume=volume,
        difficulty=difficulty,
        effort=effort,
        time=effort / STROUD_NUMBER,
        bugs=volume / BUGS_DIVISOR,
        operands=OperationCount(total=total_operands, distinct=n2, identifiers=tuple(sorted(operands))),
        operators=OperationCount(total=total_operators, distinct=n1, identifiers=tuple(sorted(operators))),
        name=name,
    )
