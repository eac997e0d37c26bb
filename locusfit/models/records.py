from __future__ import annotations
from dataclasses import dataclass, field

from locusfit.models.fit import FittedModel


@dataclass
class FitRecord:
    cohort: str
    locus: str
    model: str
    fitted: FittedModel


@dataclass
class TaskError:
    """One isolated failure. Locus-level failures leave cohort and model empty."""
    locus: str
    kind: str
    message: str
    cohort: str | None = None
    model: str | None = None

    @property
    def key(self) -> tuple:
        return (self.cohort, self.locus, self.model)


@dataclass
class RunResult:
    fits: list[FitRecord] = field(default_factory=list)
    errors: list[TaskError] = field(default_factory=list)
    catalogs: dict[str, list[str]] = field(default_factory=dict)
    n_tasks: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.fits)

    @property
    def failed(self) -> int:
        return sum(1 for e in self.errors if e.model is not None)
