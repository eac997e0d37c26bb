from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path

# Root-relative data directories
DATA_DIR = Path("data")
RAW_DIR = DATA_DIR / "raw"
RESULTS_DIR = DATA_DIR / "results"
DEFAULT_INPUT = RAW_DIR / "observations.csv"

# Column names in the observation table
RESPONSE = "mo_da"
COLLECTION = "collection"
LOCUS = "Locus_new"
GENOTYPE = "genotype"
SEX = "sex"
AGE = "age_spawn"
YEAR = "year"
COHORT = "cohort"

# Random-effect grouping field for every model
RANDOM_EFFECT = YEAR

REQUIRED_COLS = [RESPONSE, COLLECTION, LOCUS, GENOTYPE, SEX, AGE, YEAR]

# Raw collection label that marks the NH cohort; every other label is CV
COHORT_SENTINEL = "Nimbus"
COHORT_LABELS = ("NH", "CV")

MISSING_SEX = "?"
GENOTYPE_SEP = "/"

# Design-matrix columns: constant, additive dosage, signed dominance
DESIGN_COLS = ["d_ref", "d_add", "d_dom_with_s"]


@dataclass(frozen=True)
class ModelSpec:
    name: str
    formula: str


MODEL_CATALOG = (
    ModelSpec("vanilla", f"{RESPONSE} ~ d_add + d_dom_with_s"),
    ModelSpec("sex", f"{RESPONSE} ~ d_add + d_dom_with_s + {SEX}"),
    ModelSpec("age", f"{RESPONSE} ~ d_add + d_dom_with_s + {AGE}"),
)


def load_model_catalog(path: str | Path) -> tuple[ModelSpec, ...]:
    """
    Read a model catalog from JSON: a list of {"name": ..., "formula": ...}.
    Names must be unique and non-empty; formulas must contain '~'.
    """
    entries = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(entries, list) or not entries:
        raise ValueError(f"Model catalog must be a non-empty list: {path}")

    specs = []
    seen: set[str] = set()
    for e in entries:
        name = str(e.get("name", "")).strip()
        formula = str(e.get("formula", "")).strip()
        if not name:
            raise ValueError(f"Model entry without a name: {e}")
        if name in seen:
            raise ValueError(f"Duplicate model name: {name}")
        if "~" not in formula:
            raise ValueError(f"Model '{name}' has no '~' in formula: {formula!r}")
        seen.add(name)
        specs.append(ModelSpec(name, formula))
    return tuple(specs)
