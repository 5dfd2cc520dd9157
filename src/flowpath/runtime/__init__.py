"""Runtime: session routing over flow graphs."""

from flowpath.runtime.router import SessionRouter, StepResult

__all__ = ["SessionRouter", "StepResult"]
