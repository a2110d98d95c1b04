import pytest

from gridsync.models.rows import (
    RowTransaction,
    build_loading_rows,
    hierarchy_of,
    is_loading_row,
    loading_row_id,
    row_id,
)


def test_build_loading_rows_default_batch():
    rows = build_loading_rows()

    assert len(rows) == 25
    assert [row["id"] for row in rows] == [f"loading{i}" for i in range(25)]
    for row in rows:
        assert row["loading"] is True
        assert row["hierarchy"] == [row["id"]]


def test_build_loading_rows_is_deterministic():
    assert build_loading_rows(3) == build_loading_rows(3)
    assert build_loading_rows(1) == ({"loading": True, "id": "loading0", "hierarchy": ["loading0"]},)


@pytest.mark.parametrize("count", [0, -1])
def test_build_loading_rows_rejects_non_positive_count(count):
    with pytest.raises(ValueError):
        build_loading_rows(count)


def test_loading_row_id_uses_prefix():
    assert loading_row_id(7) == "loading7"


def test_is_loading_row_handles_missing_rows():
    assert is_loading_row({"id": "x", "loading": True})
    assert not is_loading_row({"id": "x"})
    assert not is_loading_row(None)
    assert not is_loading_row({})


def test_row_id_requires_id_key():
    assert row_id({"id": 12}) == "12"
    with pytest.raises(KeyError):
        row_id({"name": "no id"})


def test_hierarchy_falls_back_to_row_id():
    assert hierarchy_of({"id": "a", "hierarchy": ["root", "a"]}) == ["root", "a"]
    assert hierarchy_of({"id": "a"}) == ["a"]


def test_row_transaction_is_empty():
    assert RowTransaction().is_empty()
    assert not RowTransaction(add=[{"id": "a"}]).is_empty()
