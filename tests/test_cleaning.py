import pandas as pd

from locusfit.cleaning import enrich, normalize_genotypes


def _raw():
    return pd.DataFrame(
        {
            "mo_da": [281.0, 290.5, 275.0, 300.0],
            "collection": ["Nimbus", "Coleman", "Feather", "Nimbus"],
            "Locus_new": ["L1", "L1", None, "L2"],
            "genotype": ["G/A", "A/A", None, "C/T"],
            "sex": ["F", "?", "M", "F"],
            "age_spawn": [3, 4, 3, 5],
            "year": [2010, 2011, 2010, 2012],
        }
    )


def test_enrich_derives_fields():
    out = enrich(_raw())

    assert len(out) == 4
    assert out["cohort"].tolist() == ["NH", "CV", "CV", "NH"]
    assert out["genotype"].tolist()[:2] == ["A/G", "A/A"]
    assert pd.isna(out["genotype"].iloc[2])
    assert isinstance(out["sex"].dtype, pd.CategoricalDtype)
    assert "?" not in out["sex"].cat.categories
    assert pd.isna(out["sex"].iloc[1])
    assert isinstance(out["year"].dtype, pd.CategoricalDtype)
    assert isinstance(out["age_spawn"].dtype, pd.CategoricalDtype)


def test_enrich_does_not_mutate_input():
    raw = _raw()
    before = raw.copy()
    enrich(raw)
    pd.testing.assert_frame_equal(raw, before)


def test_enrich_is_idempotent():
    once = enrich(_raw())
    twice = enrich(once)
    pd.testing.assert_frame_equal(once, twice)


def test_normalize_genotypes_keeps_sorted_pairs():
    df = pd.DataFrame({"genotype": ["T/C", "C/T", "C/C", None]})
    out = normalize_genotypes(df)
    assert out["genotype"].tolist()[:3] == ["C/T", "C/T", "C/C"]
