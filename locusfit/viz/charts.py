# locusfit/viz/charts.py
from __future__ import annotations
import altair as alt
import pandas as pd

TERM_LABELS = {
    "d_add": "Additive effect",
    "d_dom_with_s": "Dominance effect",
}


def format_term(term: str) -> str:
    return TERM_LABELS.get(term, term)


def _empty(note: str = "No data") -> alt.Chart:
    return alt.Chart(pd.DataFrame({"note": [note]})).mark_text(size=16).encode(text="note")


def pvalue_strip(effects: pd.DataFrame, term: str = "d_add") -> alt.Chart:
    # expects columns: cohort, locus, model, term, p_value, neg_log10_p
    q = effects[effects["term"] == term]
    if q.empty:
        return _empty()
    return (
        alt.Chart(q)
        .mark_point(filled=True, size=60)
        .encode(
            x=alt.X("locus:N", title="Locus", sort="ascending"),
            y=alt.Y("neg_log10_p:Q", title="-log10(p)"),
            color=alt.Color("model:N", legend=alt.Legend(title="Model")),
            row=alt.Row("cohort:N", title="Cohort"),
            tooltip=[
                "cohort:N", "locus:N", "model:N",
                alt.Tooltip("estimate:Q", format=".3f"),
                alt.Tooltip("p_value:Q", title="p", format=".2e"),
            ],
        )
        .properties(height=200, title=f"{format_term(term)}: significance by locus")
        .interactive()
    )


def effect_intervals(effects: pd.DataFrame, term: str = "d_add", z: float = 1.96) -> alt.Chart:
    """Point estimates with ±z·SE bars, one panel per cohort."""
    q = effects[effects["term"] == term].copy()
    if q.empty:
        return _empty()
    q["lo"] = q["estimate"] - z * q["std_error"]
    q["hi"] = q["estimate"] + z * q["std_error"]

    base = alt.Chart(q).encode(
        y=alt.Y("locus:N", title="Locus"),
        yOffset="model:N",
        color=alt.Color("model:N", legend=alt.Legend(title="Model")),
    )
    bars = base.mark_rule().encode(x=alt.X("lo:Q", title=format_term(term)), x2="hi:Q")
    points = base.mark_point(filled=True).encode(
        x="estimate:Q",
        tooltip=["locus:N", "model:N", alt.Tooltip("estimate:Q", format=".3f"), alt.Tooltip("std_error:Q", format=".3f")],
    )
    return (bars + points).properties(width=320).facet(column=alt.Column("cohort:N", title="Cohort"))
