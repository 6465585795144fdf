"""Exception types raised by goap_world."""

from __future__ import annotations


class GoapPlanError(Exception):
    """Base class for planning and plan execution errors."""


class MisconfiguredActionError(GoapPlanError):
    """An action needs to be in range of a target but was never given one."""

    def __init__(self, action: object) -> None:
        super().__init__(
            f"{type(action).__name__} requires a target but has none; "
            "assign it in can_run()"
        )
        self.action = action


class UnreachableTargetError(GoapPlanError):
    """An agent made no progress towards its action target for too many ticks."""

    def __init__(self, action: object, target: object, ticks: int) -> None:
        super().__init__(
            f"{getattr(action, 'name', type(action).__name__)} cannot reach target {target} "
            f"after {ticks} stalled tick(s)"
        )
        self.action = action
        self.target = target
        self.ticks = ticks


__all__ = ["GoapPlanError", "MisconfiguredActionError", "UnreachableTargetError"]
