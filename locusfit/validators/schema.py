from __future__ import annotations

import pandas as pd

from locusfit import config
from locusfit.errors import DataLoadError

GENOTYPE_RE = r"^[^/\s]+/[^/\s]+$"


def validate_frame(df: pd.DataFrame) -> None:
    miss = set(config.REQUIRED_COLS) - set(df.columns)
    if miss:
        raise DataLoadError(f"Missing expected columns: {sorted(miss)}")

    # Response must be numeric where present
    resp = pd.to_numeric(df[config.RESPONSE], errors="coerce")
    bad = df.loc[resp.isna() & df[config.RESPONSE].notna(), config.RESPONSE].unique().tolist()
    if bad:
        raise DataLoadError(f"Non-numeric {config.RESPONSE} values: {bad[:10]}")

    # Genotypes must look like "<allele>/<allele>"
    geno = df[config.GENOTYPE].dropna().astype("string").str.strip()
    malformed = geno[~geno.str.match(GENOTYPE_RE)].unique().tolist()
    if malformed:
        raise DataLoadError(f"Malformed genotypes: {malformed[:10]}")
