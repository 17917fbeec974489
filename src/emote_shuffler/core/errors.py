from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .planner import RenameOp


class ShuffleError(Exception):
    """Base class for failures raised by the planning and execution core."""


class PlanError(ShuffleError, ValueError):
    """The planner was handed names that are not a permutation of the set."""


class ExecutionError(ShuffleError):
    """A rename failed part way through a run.

    ``step`` is 1-based. Every op before it has been applied and is not rolled
    back; nothing after it was sent. The failure from the rename call is chained
    as ``__cause__``.
    """

    def __init__(self, op: "RenameOp", step: int, total: int) -> None:
        self.op = op
        self.step = step
        self.total = total
        super().__init__(
            f"第 {step}/{total} 步改名失败: {op.target_id} -> {op.new_name}"
        )

    @property
    def completed(self) -> int:
        return self.step - 1
