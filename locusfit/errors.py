from __future__ import annotations


class LocusfitError(Exception):
    """Base class for pipeline errors."""


class DataLoadError(LocusfitError):
    """Input table missing or malformed. Fatal for the whole run."""


class InvalidLocusError(LocusfitError, ValueError):
    """A locus whose observed allele count is not 1 or 2."""

    def __init__(self, locus: str | None, alleles: list[str]):
        self.locus = locus
        self.alleles = list(alleles)
        super().__init__(
            f"Locus {locus!r} has {len(self.alleles)} alleles {self.alleles}; expected 1 or 2"
        )


class JoinMismatchError(LocusfitError, ValueError):
    """Subset genotypes absent from the locus catalog."""

    def __init__(self, genotypes: list[str], catalog: list[str]):
        self.genotypes = sorted(genotypes)
        self.catalog = list(catalog)
        super().__init__(
            f"Genotypes {self.genotypes} not in catalog {self.catalog}"
        )


class ModelFitError(LocusfitError):
    """The optimizer did not converge and convergence was required."""
