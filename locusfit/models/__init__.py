from .fit import FitTask, FittedModel, fit, join_design
from .records import FitRecord, RunResult, TaskError

__all__ = ["FitTask", "FittedModel", "fit", "join_design", "FitRecord", "RunResult", "TaskError"]
