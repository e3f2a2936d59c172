"""Build orchestration: run a customization pass and summarize it."""

from .summary import BuildError, BuildSummary, summarize_steps
from .runner import BuildReport, run_build

__all__ = [
    "BuildError",
    "BuildSummary",
    "summarize_steps",
    "BuildReport",
    "run_build",
]
