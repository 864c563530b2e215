"""JSON response helpers shared by the blueprints."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from .workflow import STATUS_FAILED, STATUS_PARTIAL, WorkflowResult

# Multi-Status: some steps committed, some did not.
PARTIAL_STATUS_CODE = 207


def workflow_response(result: WorkflowResult, success_code: int = 200) -> Any:
    """Render a saga result with a status code matching its outcome."""
    if result.status == STATUS_PARTIAL:
        code = PARTIAL_STATUS_CODE
    elif result.status == STATUS_FAILED:
        code = 503
    else:
        code = success_code
    return jsonify(result.to_response()), code
