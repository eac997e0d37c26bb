import pandas as pd
import pytest

from locusfit.tables import crossing, nest_by


def _frame():
    return pd.DataFrame(
        {
            "cohort": ["NH", "CV", "NH", "CV", "NH", None],
            "locus": ["L2", "L1", "L1", "L1", None, "L1"],
            "x": [1, 2, 3, 4, 5, 6],
        }
    )


def test_nest_partitions_non_null_rows():
    df = _frame()
    nested = nest_by(df, ["cohort", "locus"])

    assert list(nested) == [("CV", "L1"), ("NH", "L1"), ("NH", "L2")]
    stacked = pd.concat(nested.values()).sort_index()
    expected = df.dropna(subset=["cohort", "locus"])
    pd.testing.assert_frame_equal(stacked, expected)
    # no row lands in two groups
    assert stacked.index.is_unique


def test_nest_keeps_row_order_and_columns():
    df = _frame()
    sub = nest_by(df, ["cohort", "locus"])[("CV", "L1")]
    assert sub["x"].tolist() == [2, 4]
    assert list(sub.columns) == list(df.columns)


def test_nest_single_key_gives_tuples():
    nested = nest_by(_frame(), ["locus"])
    assert set(nested) == {("L1",), ("L2",)}
    assert len(nested[("L1",)]) == 4


def test_nest_missing_column():
    with pytest.raises(KeyError):
        nest_by(_frame(), ["year"])


def test_crossing_size_and_order():
    a = [{"locus": "L1"}, {"locus": "L2"}, {"locus": "L3"}]
    b = [{"model": "vanilla"}, {"model": "sex"}]
    out = crossing(a, b)

    assert len(out) == len(a) * len(b)
    assert [(r["locus"], r["model"]) for r in out[:2]] == [("L1", "vanilla"), ("L1", "sex")]
    for r in out:
        assert {"locus": r["locus"]} in a
        assert {"model": r["model"]} in b


def test_crossing_empty_side():
    assert crossing([], [{"model": "vanilla"}]) == []


def test_crossing_rejects_shared_fields():
    with pytest.raises(ValueError):
        crossing([{"name": 1}], [{"name": 2}])
