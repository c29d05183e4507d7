# src/logging/context.py - v2
"""Contextual logging support: attach namespace, run_id and phase to records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set once per deploy run, phase updated as the run progresses.
_namespace: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "namespace", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_phase: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "phase", default=None
)


@dataclass
class LogContext:
    """Snapshot of the current logging context."""

    namespace: str | None = None
    run_id: str | None = None
    phase: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        namespace=_namespace.get(),
        run_id=_run_id.get(),
        phase=_phase.get(),
    )


def set_deploy_context(namespace: str, run_id: str) -> None:
    """Set run-level context (called once per deploy)."""
    _namespace.set(namespace)
    _run_id.set(run_id)
    _phase.set(None)


def set_phase(phase: str | None) -> None:
    """Set the current deploy phase: files, redirects, invalidation."""
    _phase.set(phase)


def clear_context() -> None:
    """Reset all context variables."""
    _namespace.set(None)
    _run_id.set(None)
    _phase.set(None)
