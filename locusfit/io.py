from __future__ import annotations
from functools import partial
from pathlib import Path
import logging

import pandas as pd

from locusfit import config
from locusfit.errors import DataLoadError
from locusfit.summaries import (
    catalog_table,
    errors_table,
    fit_overview,
    tidy_coefficients,
    tidy_variance_components,
)

READERS = {
    ".parquet": pd.read_parquet,
    ".csv": pd.read_csv,
    ".tsv": partial(pd.read_csv, sep="\t"),
    ".txt": partial(pd.read_csv, sep="\t"),
}

# Canonical column -> accepted aliases in raw files
ALIASES = {
    config.RESPONSE: ["mo_da", "mo_day", "modate", "spawn_day"],
    config.COLLECTION: ["collection", "hatchery", "pop", "population"],
    config.LOCUS: ["Locus_new", "locus", "locus_new", "marker"],
    config.GENOTYPE: ["genotype", "geno", "gtype"],
    config.SEX: ["sex", "Sex"],
    config.AGE: ["age_spawn", "age", "spawn_age"],
    config.YEAR: ["year", "Year", "YEAR", "spawn_year"],
}

RESULT_FILES = {
    "coefficients": "coefficients.csv",
    "variance_components": "variance_components.csv",
    "fits": "fits.csv",
    "catalogs": "catalogs.csv",
    "errors": "errors.csv",
}


def _pick_col(df: pd.DataFrame, candidates: list[str]) -> str | None:
    # exact first, then case-insensitive
    for c in candidates:
        if c in df.columns:
            return c
    lower = {c.lower(): c for c in df.columns}
    for c in candidates:
        if c.lower() in lower:
            return lower[c.lower()]
    return None


def _standardize(df: pd.DataFrame) -> pd.DataFrame:
    """Rename recognised alias columns to their canonical names."""
    renames = {}
    for canon, candidates in ALIASES.items():
        found = _pick_col(df, candidates)
        if found and found != canon:
            renames[found] = canon
    return df.rename(columns=renames)


def load_observations(path: str | Path) -> pd.DataFrame:
    """
    Read the per-fish observation table and harmonize column names.
    Any failure to locate, parse or recognise the file is a DataLoadError.
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(f"Input file not found: {path}")

    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise DataLoadError(f"Unsupported input format '{path.suffix}': {path}")

    try:
        df = reader(path)
    except (ValueError, OSError, ImportError, pd.errors.ParserError) as e:
        raise DataLoadError(f"Could not read {path}: {e}") from e

    df = _standardize(df)
    missing = set(config.REQUIRED_COLS) - set(df.columns)
    if missing:
        raise DataLoadError(f"Missing expected columns in {path.name}: {sorted(missing)}")

    logging.info(f"Loaded {len(df):,} rows × {df.shape[1]} cols from {path}")
    return df


def write_results(result, outdir: str | Path) -> dict[str, Path]:
    """Write the tidy result tables of a pipeline run as CSVs."""
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    tables = {
        "coefficients": tidy_coefficients(result.fits),
        "variance_components": tidy_variance_components(result.fits),
        "fits": fit_overview(result.fits),
        "catalogs": catalog_table(result.catalogs),
        "errors": errors_table(result.errors),
    }

    written: dict[str, Path] = {}
    for key, table in tables.items():
        path = outdir / RESULT_FILES[key]
        table.to_csv(path, index=False)
        logging.info(f"Wrote {key} -> {path} ({len(table):,} rows)")
        written[key] = path
    return written


def load_results(outdir: str | Path) -> dict[str, pd.DataFrame]:
    """Read back whatever result tables exist in outdir."""
    base = Path(outdir)
    if not base.exists():
        raise FileNotFoundError(f"Results folder not found: {base.resolve()}")

    out = {}
    for key, name in RESULT_FILES.items():
        p = base / name
        if not p.exists():
            continue
        try:
            out[key] = pd.read_csv(p)
        except pd.errors.EmptyDataError:
            out[key] = pd.DataFrame()
    return out
