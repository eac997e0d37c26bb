"""
Per-locus genotype catalogs and the design matrices built from them.

A catalog lists every genotype that can be formed from the alleles observed at
a locus, in a fixed order. Catalogs are computed on the locus-only partition so
both cohorts share one encoding per locus.
"""

from __future__ import annotations
import logging

import pandas as pd

from locusfit import config
from locusfit.errors import InvalidLocusError
from locusfit.tables import nest_by


def possible_genos(genotypes: pd.Series, locus: str | None = None) -> list[str]:
    """
    Return the ordered possible genotypes for one locus.

    Examples:
        ["A/G", "A/A", "G/G", "A/G"] -> ["A/A", "A/G", "G/G"]
        ["C/C", "C/C"]               -> ["C/C"]

    Raises InvalidLocusError when the locus does not have exactly 1 or 2 alleles.
    """
    sep = config.GENOTYPE_SEP
    observed = genotypes.dropna().astype("string")
    alleles = sorted(set(observed.str.split(sep).explode().str.strip().dropna().tolist()))

    if len(alleles) == 1:
        a = alleles[0]
        return [f"{a}{sep}{a}"]
    if len(alleles) == 2:
        a1, a2 = alleles
        return [f"{a1}{sep}{a1}", f"{a1}{sep}{a2}", f"{a2}{sep}{a2}"]
    raise InvalidLocusError(locus, alleles)


def build_catalogs(df: pd.DataFrame) -> tuple[dict[str, list[str]], dict[str, InvalidLocusError]]:
    """
    Catalog every locus in df. Loci with an invalid allele count are
    collected in the second mapping instead of aborting the rest.
    """
    catalogs: dict[str, list[str]] = {}
    errors: dict[str, InvalidLocusError] = {}
    for (locus,), sub in nest_by(df, [config.LOCUS]).items():
        try:
            catalogs[locus] = possible_genos(sub[config.GENOTYPE], locus=locus)
        except InvalidLocusError as e:
            logging.warning(str(e))
            errors[locus] = e
    logging.info(f"Built catalogs for {len(catalogs)} loci ({len(errors)} invalid)")
    return catalogs, errors


def polymorphic(catalogs: dict[str, list[str]]) -> dict[str, list[str]]:
    """Keep loci with a full three-genotype catalog; monomorphic loci drop out."""
    keep = {locus: genos for locus, genos in catalogs.items() if len(genos) == 3}
    dropped = sorted(set(catalogs) - set(keep))
    if dropped:
        logging.info(f"Skipping {len(dropped)} monomorphic loci: {dropped}")
    return keep


def design_matrix(catalog: list[str]) -> pd.DataFrame:
    """
    Additive and signed-dominance codes for a biallelic catalog
    [a1/a1, a1/a2, a2/a2]: d_add = 0, 1, 2 and d_dom_with_s = 0, 1, 0.
    """
    if len(catalog) != 3:
        raise ValueError(f"Design matrix needs a 3-genotype catalog, got {list(catalog)}")
    codes = dict(zip(config.DESIGN_COLS, ([1, 1, 1], [0, 1, 2], [0, 1, 0])))
    return pd.DataFrame({config.GENOTYPE: pd.array(list(catalog), dtype="string"), **codes})
