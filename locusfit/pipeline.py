# locusfit/pipeline.py
"""
Split-apply-combine runner: per-locus mixed models for each cohort.

Usage examples:
  # 1) Fit the default three models for every polymorphic locus:
  python -m locusfit.pipeline \
    --input data/raw/observations.csv \
    --outdir data/results

  # 2) Custom model catalog, four worker processes, strict genotype joins:
  python -m locusfit.pipeline \
    --input data/raw/observations.csv \
    --outdir data/results \
    --models models.json --processes 4 --on-mismatch raise

Notes:
- Tables written to --outdir: coefficients.csv, variance_components.csv,
  fits.csv, catalogs.csv, errors.csv
- A failing locus or model fit is recorded in errors.csv; the run continues.
"""

from __future__ import annotations
import argparse
import logging
import sys
from multiprocessing import Pool
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd
from patsy import PatsyError
from tqdm import tqdm

from locusfit import config
from locusfit.cleaning import enrich
from locusfit.config import ModelSpec
from locusfit.errors import DataLoadError, ModelFitError
from locusfit.genotypes import build_catalogs, polymorphic
from locusfit.io import load_observations, write_results
from locusfit.models.fit import FitTask, fit
from locusfit.models.records import FitRecord, RunResult, TaskError
from locusfit.summaries import run_summary
from locusfit.tables import crossing, nest_by
from locusfit.validators.schema import validate_frame

# Failures isolated to a single task
TASK_ERRORS = (np.linalg.LinAlgError, ValueError, ArithmeticError, PatsyError, ModelFitError)


def _setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )


def build_tasks(
    enriched: pd.DataFrame,
    catalogs: dict[str, list[str]],
    models: Sequence[ModelSpec] = config.MODEL_CATALOG,
) -> list[FitTask]:
    """
    Nest by (cohort, locus), keep subsets whose locus has a polymorphic
    catalog, and cross them with the model catalog.
    """
    usable = polymorphic(catalogs)
    nested = nest_by(enriched, [config.COHORT, config.LOCUS])

    subsets = [
        {"cohort": cohort, "locus": locus, "data": sub, "catalog": usable[locus]}
        for (cohort, locus), sub in nested.items()
        if locus in usable
    ]
    specs = [{"spec": spec} for spec in models]
    tasks = [FitTask(**rec) for rec in crossing(subsets, specs)]
    logging.info(
        f"Prepared {len(tasks):,} fit tasks "
        f"({len(subsets)} cohort×locus subsets × {len(specs)} models)"
    )
    return tasks


def _run_task(args: tuple[FitTask, str, bool]) -> FitRecord | TaskError:
    task, on_mismatch, require_convergence = args
    cohort, locus, model = task.key
    try:
        fitted = fit(
            task.data,
            task.catalog,
            task.spec,
            on_mismatch=on_mismatch,
            require_convergence=require_convergence,
        )
    except TASK_ERRORS as e:
        return TaskError(locus=locus, kind=type(e).__name__, message=str(e), cohort=cohort, model=model)
    return FitRecord(cohort=cohort, locus=locus, model=model, fitted=fitted)


def run(
    observations: pd.DataFrame,
    models: Sequence[ModelSpec] = config.MODEL_CATALOG,
    *,
    processes: int = 1,
    on_mismatch: str = "null",
    require_convergence: bool = False,
    sentinel: str = config.COHORT_SENTINEL,
) -> RunResult:
    """Enrich, catalog, nest, expand and fit. Per-task failures never abort the batch."""
    enriched = enrich(observations, sentinel=sentinel)
    logging.info(f"Enriched {len(enriched):,} rows")

    catalogs, locus_errors = build_catalogs(enriched)
    result = RunResult(catalogs=catalogs)
    result.errors.extend(
        TaskError(locus=locus, kind=type(e).__name__, message=str(e))
        for locus, e in sorted(locus_errors.items())
    )

    tasks = build_tasks(enriched, catalogs, models)
    result.n_tasks = len(tasks)
    jobs = [(t, on_mismatch, require_convergence) for t in tasks]

    if processes > 1 and len(jobs) > 1:
        with Pool(processes=processes) as pool:
            outcomes = list(
                tqdm(pool.imap_unordered(_run_task, jobs), total=len(jobs), desc="Fitting mixed models")
            )
    else:
        outcomes = [_run_task(j) for j in tqdm(jobs, desc="Fitting mixed models", disable=len(jobs) < 2)]

    for out in outcomes:
        if isinstance(out, FitRecord):
            result.fits.append(out)
        else:
            logging.warning(f"Fit failed for {out.key}: {out.kind}: {out.message}")
            result.errors.append(out)

    # imap_unordered completes in any order
    result.fits.sort(key=lambda r: (r.cohort, r.locus, r.model))
    result.errors.sort(key=lambda e: (e.model is not None, e.cohort or "", e.locus, e.model or ""))
    return result


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fit per-locus mixed models for each cohort.")
    parser.add_argument("--input", type=Path, default=config.DEFAULT_INPUT, help="Observation table (.csv, .tsv, .parquet)")
    parser.add_argument("--outdir", type=Path, default=config.RESULTS_DIR, help="Destination directory for result CSVs")
    parser.add_argument("--models", type=Path, help="JSON model catalog; defaults to vanilla/sex/age")
    parser.add_argument("--processes", type=int, default=1, help="Worker processes for model fitting")
    parser.add_argument("--on-mismatch", choices=["null", "raise"], default="null",
                        help="Genotypes missing from the locus catalog: null covariates or fail the task")
    parser.add_argument("--require-convergence", action="store_true", help="Treat non-converged fits as failures")
    parser.add_argument("--sentinel", default=config.COHORT_SENTINEL, help="Collection label that marks the NH cohort")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    try:
        logging.info("Reading observations…")
        df = load_observations(args.input)
        logging.info("Validating dataset…")
        validate_frame(df)
    except DataLoadError as e:
        logging.error(str(e))
        return 1

    models = config.load_model_catalog(args.models) if args.models else config.MODEL_CATALOG
    logging.info(f"Models: {[m.name for m in models]}")

    result = run(
        df,
        models,
        processes=args.processes,
        on_mismatch=args.on_mismatch,
        require_convergence=args.require_convergence,
        sentinel=args.sentinel,
    )
    write_results(result, args.outdir)

    summ = run_summary(result)
    logging.info(f"[Summary] {summ['succeeded']} succeeded, {summ['failed']} failed of {summ['tasks']} tasks")
    if summ["invalid_loci"]:
        logging.warning(f"[Summary] Invalid loci skipped: {summ['invalid_loci']}")
    for key in summ["failures"]:
        logging.warning(f"[Summary] Failed: cohort={key[0]} locus={key[1]} model={key[2]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
