import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from core.errors import NetworkFailure
from datasources.listing import (
    DirectoryLister,
    directory_entries,
    entry_name,
    files_with_suffix,
    parse_listing,
)
from fakes import FakeFetcher

PAGE = """
<html><body>
  <a class="js-navigation-open Link--primary" title="tier-0" href="/o/r/tree/main/dungeon/tier-0">tier-0</a>
  <a class="js-navigation-open Link--primary" title="tier-1" href="/o/r/tree/main/dungeon/tier-1">tier-1</a>
  <a class="js-navigation-open Link--primary" title="boss.ron" href="/o/r/blob/main/dungeon/boss.ron">boss.ron</a>
  <a class="js-navigation-open Link--primary" title="chest.ron" href="/o/r/blob/main/dungeon/chest.ron">chest.ron</a>
  <a class="js-navigation-open Link--primary" title="README.md" href="/o/r/blob/main/dungeon/README.md">README</a>
  <a class="other" title="ignored.ron" href="/o/r/blob/main/ignored.ron">x</a>
  <a class="js-navigation-open Link--primary" title="no-href">nothing</a>
</body></html>
"""


def test_directory_entries_in_page_order():
    assert parse_listing(PAGE, directory_entries()) == [
        "tier-0", "tier-1", "boss.ron", "chest.ron", "README.md",
    ]


def test_suffix_filter_uses_title():
    assert parse_listing(PAGE, files_with_suffix(".ron")) == ["boss.ron", "chest.ron", "ignored.ron"]


def test_entry_name():
    assert entry_name("/a/b/c") == "c"
    assert entry_name("plain") is None
    assert entry_name(None) is None
    assert entry_name("/a/") is None


def test_lister_uses_fetcher():
    fetcher = FakeFetcher({"https://list.test/dungeon/tier-0": PAGE})
    lister = DirectoryLister(fetcher)
    assert lister.list("https://list.test/dungeon/tier-0", files_with_suffix(".ron"))[:2] == [
        "boss.ron", "chest.ron",
    ]
    with pytest.raises(NetworkFailure):
        lister.list("https://list.test/missing", directory_entries())
