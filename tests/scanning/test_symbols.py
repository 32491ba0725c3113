"""Tests for scanning/symbols.py - TypeScript outline symbols."""

import pytest

from ts_profitability.analysis import aggregate
from ts_profitability.exceptions import FileAccessError
from ts_profitability.models import SymbolKind
from ts_profitability.scanning import TreeSitterSymbolSource

SHOP = """\
import { Item } from './item';

export interface Priced {
  price: number;
  discount(rate: number): number;
}

export enum Color {
  Red,
  Green = 'green',
}

export class Shop {
  private items: Item[] = [];

  constructor(private readonly name: string) {}

  get size(): number {
    return this.items.length;
  }

  add(item: Item): void {
    const log = (msg: string) => console.log(msg);
    log(item.name);
    this.items.push(item);
  }
}

export function total(items: Item[]): number {
  let sum = 0;
  for (const item of items) {
    sum += item.price;
  }
  return sum;
}

export const double = (x: number) => x * 2;
export const LIMIT = 10;
let counter = 0;
type Id = string;
"""


@pytest.fixture
def shop(tmp_path):
    (tmp_path / "shop.ts").write_text(SHOP)
    return TreeSitterSymbolSource(tmp_path).get_symbols("shop.ts")


def by_name(symbols):
    return {s.name: s for s in symbols}


class TestTopLevel:
    def test_top_level_kinds(self, shop):
        top = by_name(shop)
        assert top["Priced"].kind is SymbolKind.INTERFACE
        assert top["Color"].kind is SymbolKind.ENUM
        assert top["Shop"].kind is SymbolKind.CLASS
        assert top["total"].kind is SymbolKind.FUNCTION
        assert top["double"].kind is SymbolKind.FUNCTION
        assert top["LIMIT"].kind is SymbolKind.CONSTANT
        assert top["counter"].kind is SymbolKind.VARIABLE
        assert top["Id"].kind is SymbolKind.TYPE_PARAMETER

    def test_imports_are_not_symbols(self, shop):
        assert "Item" not in by_name(shop)


class TestMembers:
    def test_class_members(self, shop):
        members = by_name(by_name(shop)["Shop"].children)
        assert members["items"].kind is SymbolKind.PROPERTY
        assert members["constructor"].kind is SymbolKind.CONSTRUCTOR
        assert members["size"].kind is SymbolKind.PROPERTY
        assert members["add"].kind is SymbolKind.METHOD

    def test_nested_function_in_method(self, shop):
        add = by_name(by_name(shop)["Shop"].children)["add"]
        assert [(c.name, c.kind) for c in add.children] == [("log", SymbolKind.FUNCTION)]

    def test_locals_are_not_reported(self, shop):
        assert by_name(shop)["total"].children == ()

    def test_interface_members(self, shop):
        members = by_name(by_name(shop)["Priced"].children)
        assert members["price"].kind is SymbolKind.PROPERTY
        assert members["discount"].kind is SymbolKind.METHOD

    def test_enum_members(self, shop):
        members = by_name(shop)["Color"].children
        assert [m.kind for m in members] == [SymbolKind.ENUM_MEMBER, SymbolKind.ENUM_MEMBER]
        assert members[0].name == "Red"


class TestCounts:
    def test_aggregated_counts(self, shop):
        counts = aggregate("shop.ts", shop).document_nodes
        assert counts["class"] == 1
        assert counts["interface"] == 1
        assert counts["enum"] == 1
        assert counts["enummember"] == 2
        assert counts["constructor"] == 1
        assert counts["function"] == 3
        assert counts["method"] == 2


class TestSources:
    def test_empty_file(self, tmp_path):
        (tmp_path / "empty.ts").write_text("")
        assert TreeSitterSymbolSource(tmp_path).get_symbols("empty.ts") == []

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileAccessError):
            TreeSitterSymbolSource(tmp_path).get_symbols("nope.ts")

    def test_namespace_is_module(self, tmp_path):
        (tmp_path / "ns.ts").write_text("namespace Util {\n  export function helper() {}\n}\n")
        symbols = TreeSitterSymbolSource(tmp_path).get_symbols("ns.ts")
        assert symbols[0].kind is SymbolKind.MODULE
        assert symbols[0].children[0].kind is SymbolKind.FUNCTION

    def test_deep_expression_keeps_nested_declarations(self, tmp_path):
        terms = " + ".join(["'x'"] * 800)
        (tmp_path / "deep.ts").write_text(
            "export function f() {\n"
            f"  return {terms} + (() => {{ function inner() {{}} return 'y'; }})();\n"
            "}\n"
        )
        symbols = TreeSitterSymbolSource(tmp_path).get_symbols("deep.ts")
        assert [s.name for s in symbols] == ["f"]
        assert [c.name for c in symbols[0].children] == ["inner"]
