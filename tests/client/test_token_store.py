"""Tests for the on-disk session token store."""

import json
from pathlib import Path

import pytest

from client.token_store import TOKEN_KEY, TokenStore


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "session.json"


def test_missing_file_means_logged_out(store_path: Path) -> None:
    assert TokenStore(store_path).get() is None


def test_set_get_clear(store_path: Path) -> None:
    store = TokenStore(store_path)
    store.set("abc.def.ghi")
    assert store.get() == "abc.def.ghi"
    assert json.loads(store_path.read_text()) == {TOKEN_KEY: "abc.def.ghi"}
    assert TokenStore(store_path).get() == "abc.def.ghi"

    store.clear()
    assert store.get() is None
    assert not store_path.exists()


def test_clear_keeps_other_keys(store_path: Path) -> None:
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps({TOKEN_KEY: "t", "theme": "dark"}))
    TokenStore(store_path).clear()
    assert json.loads(store_path.read_text()) == {"theme": "dark"}


def test_clear_without_file(store_path: Path) -> None:
    TokenStore(store_path).clear()
    assert not store_path.exists()


def test_set_rejects_empty(store_path: Path) -> None:
    with pytest.raises(ValueError):
        TokenStore(store_path).set("")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", json.dumps({TOKEN_KEY: 5}), json.dumps({TOKEN_KEY: ""})])
def test_unusable_content_means_logged_out(store_path: Path, content: str) -> None:
    store_path.parent.mkdir(parents=True)
    store_path.write_text(content)
    assert TokenStore(store_path).get() is None
