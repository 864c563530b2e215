"""Multi-step workflows that span several documents.

Firestore gives no transactions across the documents these workflows touch,
so each one runs as a short saga: steps execute in order, every committed
step is recorded, and nothing is rolled back when a later step fails. The
caller gets a result that names exactly what went through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"


@dataclass
class StepFailure:
    """A step that raised instead of completing."""

    step: str
    label: str
    error: str
    required: bool


@dataclass
class WorkflowResult:
    """The outcome of a saga run."""

    workflow: str
    completed: list[str] = field(default_factory=list)
    completed_labels: list[str] = field(default_factory=list)
    failures: list[StepFailure] = field(default_factory=list)
    halted: bool = False
    success_message: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> str:
        """Return success, partial or failed."""
        if not self.failures:
            return STATUS_SUCCESS
        if self.completed:
            return STATUS_PARTIAL
        return STATUS_FAILED

    @property
    def message(self) -> str:
        """Return a caller-facing message naming what succeeded and what did not."""
        if self.status == STATUS_SUCCESS:
            return self.success_message
        failed = "; ".join(f"{f.label} failed: {f.error}" for f in self.failures)
        if self.status == STATUS_FAILED:
            return failed
        done = ", ".join(self.completed_labels)
        return f"Partially completed ({done}), but {failed}"

    def to_response(self) -> dict[str, Any]:
        """Render the result as a JSON-ready body."""
        body: dict[str, Any] = {
            "status": self.status,
            "completed": list(self.completed),
        }
        if self.status == STATUS_SUCCESS:
            body["message"] = self.message
        else:
            body["error"] = self.message
            body["failed"] = [f.step for f in self.failures]
        body.update(self.data)
        return body


class Saga:
    """Run workflow steps in order and record their outcome."""

    def __init__(self, workflow: str) -> None:
        """Start a new saga."""
        self.result = WorkflowResult(workflow=workflow)

    def step(
        self,
        name: str,
        label: str,
        action: Callable[[], Any],
        required: bool = True,
    ) -> Any:
        """Run one step.

        A failed required step halts the saga; later steps are skipped. A
        failed optional step is recorded and the saga carries on.
        """
        if self.result.halted:
            return None
        try:
            value = action()
        except Exception as e:
            logger.error(f"{self.result.workflow}: step '{name}' failed: {e}")
            self.result.failures.append(
                StepFailure(step=name, label=label, error=str(e), required=required)
            )
            if required:
                self.result.halted = True
            return None
        self.result.completed.append(name)
        self.result.completed_labels.append(label)
        return value

    def finish(self, success_message: str, **data: Any) -> WorkflowResult:
        """Close the saga and return its result."""
        self.result.success_message = success_message
        self.result.data.update(data)
        return self.result
