# app.py
from __future__ import annotations

import streamlit as st
import pandas as pd
from pathlib import Path

from locusfit import config
from locusfit.io import load_results
from locusfit.summaries import genotype_effects
from locusfit.ui.controls import locus_multiselect
from locusfit.viz.charts import effect_intervals, format_term, pvalue_strip

# -----------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# -----------------------------------------------------------------------------
st.set_page_config(page_title="Per-locus Mixed Models", layout="wide")

RESULTS_DIR = Path(config.RESULTS_DIR)


# -----------------------------------------------------------------------------
# Data loading
# -----------------------------------------------------------------------------
@st.cache_data(show_spinner=False)
def load_tables(results_dir: Path) -> dict[str, pd.DataFrame]:
    """Load the CSVs written by `python -m locusfit.pipeline`."""
    try:
        return load_results(results_dir)
    except FileNotFoundError:
        return {}


tables = load_tables(RESULTS_DIR)
coefs = tables.get("coefficients", pd.DataFrame())
fits = tables.get("fits", pd.DataFrame())
errors = tables.get("errors", pd.DataFrame())
catalogs = tables.get("catalogs", pd.DataFrame())

st.title("Genotype Effects on Spawn Timing")

if coefs.empty:
    st.warning(f"No results found in {RESULTS_DIR}/. Run `python -m locusfit.pipeline` first.")
    st.stop()

effects = genotype_effects(coefs)

# -----------------------------------------------------------------------------
# Sidebar filters
# -----------------------------------------------------------------------------
with st.sidebar:
    st.header("Filters")
    cohorts_all = sorted(effects["cohort"].dropna().unique().tolist())
    models_all = sorted(effects["model"].dropna().unique().tolist())

    sb_cohorts = st.multiselect("Cohorts", cohorts_all, default=cohorts_all)
    sb_models = st.multiselect("Models", models_all, default=models_all)
    sb_loci = locus_multiselect("Loci", effects["locus"].unique().tolist(), catalogs=catalogs, key="loci")
    sb_term = st.radio("Term", ["d_add", "d_dom_with_s"], format_func=format_term)

sel = effects[
    effects["cohort"].isin(sb_cohorts)
    & effects["model"].isin(sb_models)
    & effects["locus"].isin(sb_loci)
]

tabs = st.tabs(["Overview", "Genotype Effects", "Failures"])

# -----------------------------------------------------------------------------
# Overview Tab
# -----------------------------------------------------------------------------
with tabs[0]:
    st.subheader("Run Overview")
    n_fail = int(errors["model"].notna().sum()) if not errors.empty else 0
    n_bad_loci = int(errors["model"].isna().sum()) if not errors.empty else 0

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Fitted models", f"{len(fits):,}")
    c2.metric("Failed fits", f"{n_fail:,}")
    c3.metric("Polymorphic loci", f"{int(catalogs['polymorphic'].sum()) if not catalogs.empty else 0}")
    c4.metric("Invalid loci", f"{n_bad_loci}")

    if not fits.empty:
        st.markdown("### Convergence")
        st.dataframe(
            fits.groupby(["cohort", "model"])["converged"].agg(["count", "sum"])
                .rename(columns={"count": "fits", "sum": "converged"})
                .reset_index(),
            use_container_width=True,
        )

    st.markdown("### Genotype Catalogs")
    st.dataframe(catalogs, use_container_width=True)

# -----------------------------------------------------------------------------
# Genotype Effects Tab
# -----------------------------------------------------------------------------
with tabs[1]:
    st.subheader(format_term(sb_term))
    if sel.empty:
        st.info("No results for the current selection.")
    else:
        st.altair_chart(pvalue_strip(sel, sb_term), use_container_width=True)
        st.altair_chart(effect_intervals(sel, sb_term))
        with st.expander("Coefficient table"):
            st.dataframe(sel[sel["term"] == sb_term], use_container_width=True)

# -----------------------------------------------------------------------------
# Failures Tab
# -----------------------------------------------------------------------------
with tabs[2]:
    st.subheader("Failures")
    if errors.empty:
        st.success("Every task produced a fitted model.")
    else:
        st.dataframe(errors, use_container_width=True)
