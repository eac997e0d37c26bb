# scripts/build_genotype_catalog.py
from pathlib import Path
import sys

# --- ensure imports like `from locusfit...` work when run as a script ---
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from locusfit import config
from locusfit.cleaning import enrich
from locusfit.errors import DataLoadError
from locusfit.genotypes import build_catalogs
from locusfit.io import load_observations
from locusfit.summaries import catalog_table
from locusfit.validators.schema import validate_frame

OUT_PATH = ROOT / config.RESULTS_DIR / "catalogs.csv"


def main(argv=None, out_path: Path = OUT_PATH) -> int:
    argv = sys.argv[1:] if argv is None else argv
    src = Path(argv[0]) if argv else ROOT / config.DEFAULT_INPUT
    try:
        df = load_observations(src)
        validate_frame(df)
    except DataLoadError as e:
        print(f"❌ {e}")
        return 1

    catalogs, errors = build_catalogs(enrich(df))

    table = catalog_table(catalogs)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(out_path, index=False)
    print(f"Saved {len(table):,} locus catalogs to {out_path}")
    mono = int((~table["polymorphic"]).sum())
    if mono:
        print(f"{mono} loci are monomorphic and will not be fitted.")
    for locus, e in sorted(errors.items()):
        print(f"⚠️  {locus}: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
