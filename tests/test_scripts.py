from pathlib import Path
import runpy

import pandas as pd

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "build_genotype_catalog.py"


def _script_main():
    return runpy.run_path(str(SCRIPT), run_name="build_genotype_catalog")["main"]


def test_catalog_script_writes_table(small_obs, tmp_path: Path):
    src = tmp_path / "obs.csv"
    small_obs.to_csv(src, index=False)
    out = tmp_path / "catalogs.csv"

    assert _script_main()([str(src)], out_path=out) == 0
    table = pd.read_csv(out)
    assert table["locus"].tolist() == ["L01", "L02"]
    assert table["polymorphic"].tolist() == [True, False]


def test_catalog_script_rejects_malformed_genotypes(small_obs, tmp_path: Path):
    bad = small_obs.copy()
    bad.loc[bad["Locus_new"] == "L02", "genotype"] = "AG"
    src = tmp_path / "obs.csv"
    bad.to_csv(src, index=False)
    out = tmp_path / "catalogs.csv"

    assert _script_main()([str(src)], out_path=out) == 1
    assert not out.exists()
