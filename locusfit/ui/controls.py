from __future__ import annotations
import re
from typing import Iterable, List

import pandas as pd
import streamlit as st

_DIGITS = re.compile(r"(\d+)")


def natural_key(label: str) -> tuple:
    """Sort key that orders 'L2' before 'L10'."""
    return tuple(int(p) if p.isdigit() else p.lower() for p in _DIGITS.split(label))


def locus_options(loci: Iterable, catalogs: pd.DataFrame | None = None) -> List[str]:
    """
    Distinct, non-blank locus labels in natural order.
    With a catalogs table (locus, polymorphic), monomorphic loci are left out
    since they never have fitted models.
    """
    labels = {str(x).strip() for x in loci if x is not None and not pd.isna(x)}
    labels.discard("")
    if catalogs is not None and not catalogs.empty:
        fitted = catalogs.loc[catalogs["polymorphic"].astype(bool), "locus"].astype(str)
        labels &= set(fitted)
    return sorted(labels, key=natural_key)


def locus_multiselect(
    label: str,
    loci: Iterable,
    *,
    catalogs: pd.DataFrame | None = None,
    key: str | None = None,
    help: str | None = None,
    all_label: str = "All loci",
) -> List[str]:
    """
    Locus picker with an 'All loci' chip.
    'All loci' or an empty selection means every offered locus.
    """
    opts = locus_options(loci, catalogs)
    selected = st.multiselect(label, [all_label] + opts, default=[all_label], key=key, help=help)

    if all_label in selected or not selected:
        return opts
    return sorted(selected, key=natural_key)
