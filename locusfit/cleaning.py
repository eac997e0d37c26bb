# locusfit/cleaning.py
from __future__ import annotations
import numpy as np
import pandas as pd

from locusfit import config


def normalize_genotypes(df: pd.DataFrame) -> pd.DataFrame:
    """Strip genotype strings and render their two alleles in sorted order."""
    out = df.copy()
    geno = out[config.GENOTYPE].astype("string").str.strip()
    parts = geno.str.split(config.GENOTYPE_SEP, n=1, expand=True)
    if parts.shape[1] == 2:
        a, b = parts[0], parts[1]
        swap = (a > b).fillna(False).astype(bool)
        lo = a.mask(swap, b)
        hi = b.mask(swap, a)
        geno = (lo + config.GENOTYPE_SEP + hi).fillna(geno)
    out[config.GENOTYPE] = geno
    return out


def encode_sex(df: pd.DataFrame) -> pd.DataFrame:
    """Sex as a category; the missing sentinel becomes null, not a level."""
    out = df.copy()
    sex = out[config.SEX].astype("string").str.strip()
    sex = sex.mask(sex == config.MISSING_SEX)
    out[config.SEX] = pd.Categorical(sex)
    return out


def encode_categories(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for c in (config.YEAR, config.AGE):
        out[c] = pd.Categorical(out[c])
    out[config.RESPONSE] = pd.to_numeric(out[config.RESPONSE], errors="coerce")
    out[config.LOCUS] = out[config.LOCUS].astype("string").str.strip()
    return out


def derive_cohort(df: pd.DataFrame, sentinel: str = config.COHORT_SENTINEL) -> pd.DataFrame:
    """
    Binary cohort from the raw collection label:
    'NH' when it equals the sentinel, 'CV' otherwise.
    """
    out = df.copy()
    nh, cv = config.COHORT_LABELS
    label = out[config.COLLECTION].astype("string").str.strip()
    is_nh = (label == sentinel).fillna(False).to_numpy(dtype=bool)
    out[config.COHORT] = pd.array(np.where(is_nh, nh, cv), dtype="string")
    return out


def enrich(df: pd.DataFrame, sentinel: str = config.COHORT_SENTINEL) -> pd.DataFrame:
    """Unified enrichment: derived fields only, row count unchanged."""
    out = normalize_genotypes(df)
    out = encode_sex(out)
    out = encode_categories(out)
    out = derive_cohort(out, sentinel=sentinel)
    return out
