import json
from pathlib import Path

import pytest

from locusfit.config import MODEL_CATALOG, ModelSpec, load_model_catalog


def test_default_catalog():
    assert [m.name for m in MODEL_CATALOG] == ["vanilla", "sex", "age"]
    assert all("d_add + d_dom_with_s" in m.formula for m in MODEL_CATALOG)
    assert MODEL_CATALOG[1].formula.endswith("+ sex")
    assert MODEL_CATALOG[2].formula.endswith("+ age_spawn")


def test_load_catalog(tmp_path: Path):
    p = tmp_path / "models.json"
    p.write_text(json.dumps([{"name": "add_only", "formula": "mo_da ~ d_add"}]))
    assert load_model_catalog(p) == (ModelSpec("add_only", "mo_da ~ d_add"),)


@pytest.mark.parametrize(
    "entries",
    [
        [],
        [{"name": "", "formula": "mo_da ~ d_add"}],
        [{"name": "a", "formula": "mo_da ~ d_add"}, {"name": "a", "formula": "mo_da ~ d_add"}],
        [{"name": "a", "formula": "mo_da d_add"}],
    ],
)
def test_load_catalog_rejects_bad_entries(tmp_path: Path, entries):
    p = tmp_path / "models.json"
    p.write_text(json.dumps(entries))
    with pytest.raises(ValueError):
        load_model_catalog(p)
