"""
Mixed-effects fits for one (cohort, locus) subset.

The subset is left-joined to the locus design matrix on genotype and a
statsmodels MixedLM is fitted by REML with a random intercept per year.
The statsmodels result object is reduced to a plain FittedModel record so
downstream tables do not depend on its internals.
"""

from __future__ import annotations
import re
import warnings
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from locusfit import config
from locusfit.config import ModelSpec
from locusfit.errors import JoinMismatchError, ModelFitError
from locusfit.genotypes import design_matrix

ON_MISMATCH = ("null", "raise")


@dataclass
class FittedModel:
    coefficients: pd.DataFrame
    variance_components: pd.DataFrame
    converged: bool
    log_likelihood: float
    n_obs: int
    n_groups: int
    reml: bool = True
    diagnostics: pd.DataFrame = field(default_factory=pd.DataFrame)
    warnings: list[str] = field(default_factory=list)


@dataclass
class FitTask:
    cohort: str
    locus: str
    data: pd.DataFrame
    catalog: list[str]
    spec: ModelSpec

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.cohort, self.locus, self.spec.name)


def join_design(subset: pd.DataFrame, design: pd.DataFrame, on_mismatch: str = "null") -> pd.DataFrame:
    """
    Left join subset rows to the design matrix on genotype.
    Null genotypes always get null design values. Non-null genotypes that are
    not in the catalog get null values ("null") or raise ("raise").
    """
    if on_mismatch not in ON_MISMATCH:
        raise ValueError(f"on_mismatch must be one of {ON_MISMATCH}, got {on_mismatch!r}")

    geno = subset[config.GENOTYPE].astype("string")
    known = set(design[config.GENOTYPE].tolist())
    unmatched = sorted(set(geno.dropna().tolist()) - known)
    if unmatched and on_mismatch == "raise":
        raise JoinMismatchError(unmatched, design[config.GENOTYPE].tolist())

    left = subset.copy()
    left[config.GENOTYPE] = geno
    joined = left.merge(design, on=config.GENOTYPE, how="left", validate="many_to_one")
    joined.index = subset.index
    return joined


def _drop_unused_levels(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for c in out.columns:
        if isinstance(out[c].dtype, pd.CategoricalDtype):
            out[c] = out[c].cat.remove_unused_categories()
    return out


def _complete_rows(df: pd.DataFrame, formula: str) -> pd.DataFrame:
    """Rows with no nulls in any column the formula or the grouping uses."""
    names = set(re.findall(r"[A-Za-z_][A-Za-z0-9_.]*", formula))
    used = [c for c in df.columns if c in names or c == config.RANDOM_EFFECT]
    return df.dropna(subset=used)


def _by_term(values, result, terms: list[str]) -> np.ndarray:
    # statsmodels returns Series or bare arrays depending on input type
    s = pd.Series(np.asarray(values, dtype=float), index=list(result.params.index))
    return s.reindex(terms).to_numpy(dtype=float)


def _extract(result, reml: bool, captured: list[str]) -> FittedModel:
    terms = [str(t) for t in result.model.exog_names]
    coefs = pd.DataFrame(
        {
            "term": terms,
            "estimate": np.asarray(result.fe_params, dtype=float),
            "std_error": _by_term(result.bse, result, terms),
            "statistic": _by_term(result.tvalues, result, terms),
            "p_value": _by_term(result.pvalues, result, terms),
        }
    )

    cov_re = np.asarray(result.cov_re, dtype=float)
    re_var = float(cov_re[0, 0]) if cov_re.size else float("nan")
    variance = pd.DataFrame(
        {
            "component": [f"{config.RANDOM_EFFECT} (Intercept)", "Residual"],
            "variance": [re_var, float(result.scale)],
        }
    )

    observed = np.asarray(result.model.endog, dtype=float)
    fitted = np.asarray(result.fittedvalues, dtype=float)
    diagnostics = pd.DataFrame(
        {"observed": observed, "fitted": fitted, "residual": observed - fitted}
    )

    return FittedModel(
        coefficients=coefs,
        variance_components=variance,
        converged=bool(getattr(result, "converged", False)),
        log_likelihood=float(result.llf),
        n_obs=len(observed),
        n_groups=int(result.model.n_groups),
        reml=reml,
        diagnostics=diagnostics,
        warnings=captured,
    )


def fit(
    subset: pd.DataFrame,
    catalog: list[str],
    spec: ModelSpec,
    *,
    on_mismatch: str = "null",
    require_convergence: bool = False,
    reml: bool = True,
) -> FittedModel:
    """
    Fit `spec.formula` on subset with a random intercept per year.

    Errors raised by statsmodels or patsy (singular matrices, bad formulas,
    empty data) propagate unchanged. A fit that does not converge raises
    ModelFitError only when require_convergence is set.
    """
    design = design_matrix(catalog)
    joined = join_design(subset, design, on_mismatch=on_mismatch)
    data = _drop_unused_levels(_complete_rows(joined, spec.formula))

    with warnings.catch_warnings(record=True) as w:
        warnings.simplefilter("always")
        model = smf.mixedlm(spec.formula, data, groups=config.RANDOM_EFFECT, missing="drop")
        result = model.fit(reml=reml)
    captured = [str(m.message) for m in w]

    fitted = _extract(result, reml, captured)
    if require_convergence and not fitted.converged:
        raise ModelFitError(f"Model '{spec.name}' did not converge: {'; '.join(captured) or 'no detail'}")
    return fitted
