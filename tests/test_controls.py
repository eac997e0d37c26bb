import pandas as pd

from locusfit.ui.controls import locus_options, natural_key


def test_loci_in_natural_order():
    loci = ["L10", "L2", "L1", " L2 ", None, "", "l3"]
    assert locus_options(loci) == ["L1", "L2", "l3", "L10"]


def test_natural_key_compares_numbers_numerically():
    assert natural_key("Ots_2") < natural_key("Ots_10")
    assert sorted(["M1", "L11", "L9"], key=natural_key) == ["L9", "L11", "M1"]


def test_catalogs_hide_monomorphic_loci():
    catalogs = pd.DataFrame(
        {
            "locus": ["L1", "L2", "L10", "L11"],
            "polymorphic": [True, False, True, True],
        }
    )
    assert locus_options(["L10", "L2", "L1"], catalogs) == ["L1", "L10"]


def test_empty_catalogs_table_filters_nothing():
    assert locus_options(["L10", "L9"], pd.DataFrame()) == ["L9", "L10"]
