import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from core.errors import MalformedDocument
from models import Empty, Item, ItemWithQuantity, LootEntry, LootTableReference
from services.loot_parser import parse_loot_table, try_parse_loot_table


SAMPLE = b"""
#![enable(implicit_some)]
// dungeon tier 0 boss
[
    (3.0, Item("common.items.food.apple")),
    (1, ItemQuantity("common.items.utility.coins", 10, 50)),
    /* nested tables are kept as references */
    (0.5, LootTable("common.loot_tables.dungeon.tier-0.boss")),
    (2.0, Nothing),
]
"""


def test_parse_all_tags_in_order():
    entries = parse_loot_table(SAMPLE)
    assert entries == [
        LootEntry(3.0, Item("common.items.food.apple")),
        LootEntry(1.0, ItemWithQuantity("common.items.utility.coins", 10, 50)),
        LootEntry(0.5, LootTableReference("common.loot_tables.dungeon.tier-0.boss")),
        LootEntry(2.0, Empty()),
    ]


def test_parse_empty_and_without_trailing_comma():
    assert parse_loot_table("[]") == []
    assert parse_loot_table('[(1e1, Item("a"))]') == [LootEntry(10.0, Item("a"))]


def test_string_escapes():
    entries = parse_loot_table(r'[(1.0, Item("a\"b\\c"))]')
    assert entries[0].spec == Item('a"b\\c')


@pytest.mark.parametrize(
    "doc",
    [
        "",
        "{}",
        '[(1.0, Weapon("a"))]',
        '[(1.0, Item("a")) (2.0, Nothing)]',
        '[(-1.0, Item("a"))]',
        '[(1.0, ItemQuantity("a", 5, 2))]',
        '[(1.0, ItemQuantity("a", -1, 2))]',
        '[(1.0, Item("unterminated))]',
        '[(1.0, Item("a"))] extra',
        '[(inf, Nothing)]',
    ],
)
def test_malformed_documents(doc):
    with pytest.raises(MalformedDocument):
        parse_loot_table(doc)


def test_invalid_utf8_is_malformed():
    with pytest.raises(MalformedDocument):
        parse_loot_table(b"[(1.0, Item(\"\xff\"))]")


def test_try_parse_returns_tagged_failure():
    bad = try_parse_loot_table("nonsense")
    assert not bad.ok
    assert isinstance(bad.error, MalformedDocument)
    assert bad.unwrap_or([]) == []

    good = try_parse_loot_table("[(1.0, Nothing)]")
    assert good.ok
    assert good.unwrap_or([]) == [LootEntry(1.0, Empty())]
