from __future__ import annotations
from typing import Iterable

import numpy as np
import pandas as pd

from locusfit.models.records import FitRecord, RunResult, TaskError

KEY_COLS = ["cohort", "locus", "model"]
GENOTYPE_TERMS = ("d_add", "d_dom_with_s")


def _stack(fits: Iterable[FitRecord], attr: str, columns: list[str]) -> pd.DataFrame:
    frames = []
    for r in fits:
        t = getattr(r.fitted, attr).copy()
        t.insert(0, "model", r.model)
        t.insert(0, "locus", r.locus)
        t.insert(0, "cohort", r.cohort)
        frames.append(t)
    if not frames:
        return pd.DataFrame(columns=KEY_COLS + columns)
    return pd.concat(frames, ignore_index=True)


def tidy_coefficients(fits: Iterable[FitRecord]) -> pd.DataFrame:
    """One row per (cohort, locus, model, term)."""
    return _stack(fits, "coefficients", ["term", "estimate", "std_error", "statistic", "p_value"])


def tidy_variance_components(fits: Iterable[FitRecord]) -> pd.DataFrame:
    return _stack(fits, "variance_components", ["component", "variance"])


def fit_overview(fits: Iterable[FitRecord]) -> pd.DataFrame:
    """One row per fitted model with convergence and size diagnostics."""
    rows = [
        {
            "cohort": r.cohort,
            "locus": r.locus,
            "model": r.model,
            "converged": r.fitted.converged,
            "log_likelihood": r.fitted.log_likelihood,
            "n_obs": r.fitted.n_obs,
            "n_groups": r.fitted.n_groups,
            "reml": r.fitted.reml,
            "n_warnings": len(r.fitted.warnings),
        }
        for r in fits
    ]
    cols = KEY_COLS + ["converged", "log_likelihood", "n_obs", "n_groups", "reml", "n_warnings"]
    return pd.DataFrame(rows, columns=cols)


def genotype_effects(coefs: pd.DataFrame, terms: Iterable[str] = GENOTYPE_TERMS) -> pd.DataFrame:
    """
    Keep only the additive/dominance rows of a tidy coefficient table
    and add -log10(p) for plotting.
    """
    out = coefs[coefs["term"].isin(list(terms))].copy()
    p = pd.to_numeric(out["p_value"], errors="coerce").clip(lower=np.finfo(float).tiny)
    out["neg_log10_p"] = -np.log10(p)
    return out.sort_values(KEY_COLS + ["term"]).reset_index(drop=True)


def catalog_table(catalogs: dict[str, list[str]]) -> pd.DataFrame:
    rows = [
        {
            "locus": locus,
            "n_genotypes": len(genos),
            "genotypes": ";".join(genos),
            "polymorphic": len(genos) == 3,
        }
        for locus, genos in sorted(catalogs.items())
    ]
    return pd.DataFrame(rows, columns=["locus", "n_genotypes", "genotypes", "polymorphic"])


def errors_table(errors: Iterable[TaskError]) -> pd.DataFrame:
    rows = [
        {"cohort": e.cohort, "locus": e.locus, "model": e.model, "kind": e.kind, "message": e.message}
        for e in errors
    ]
    return pd.DataFrame(rows, columns=KEY_COLS + ["kind", "message"])


def run_summary(result: RunResult) -> dict:
    return {
        "tasks": result.n_tasks,
        "succeeded": result.succeeded,
        "failed": result.failed,
        "invalid_loci": sorted(e.locus for e in result.errors if e.model is None),
        "failures": [e.key for e in result.errors if e.model is not None],
    }
