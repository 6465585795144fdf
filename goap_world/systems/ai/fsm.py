"""Stack-based finite state machine.

States push other states onto the stack and pop themselves off. Only the
state on top of the stack runs each tick.
"""

from __future__ import annotations

from typing import Any, List, Optional
import logging

logger = logging.getLogger(__name__)


class FSMState:
    """Base state. Subclasses override :meth:`tick` and optionally the hooks."""

    name: str = ""

    def on_enter(self, fsm: "StackFSM", agent: Any) -> None:
        pass

    def tick(self, fsm: "StackFSM", agent: Any) -> None:
        raise NotImplementedError

    def on_exit(self, fsm: "StackFSM", agent: Any) -> None:
        pass

    def __repr__(self) -> str:
        return self.name or type(self).__name__


class StackFSM:
    """Push/pop state machine bound to one ``agent``."""

    def __init__(self, agent: Any) -> None:
        self.agent = agent
        self._stack: List[FSMState] = []

    @property
    def current(self) -> Optional[FSMState]:
        return self._stack[-1] if self._stack else None

    @property
    def depth(self) -> int:
        return len(self._stack)

    def states(self) -> List[FSMState]:
        """Stack contents, bottom first."""

        return list(self._stack)

    def push_state(self, state: FSMState) -> None:
        self._stack.append(state)
        logger.debug("FSM push %r (depth %s)", state, len(self._stack))
        state.on_enter(self, self.agent)

    def pop_state(self) -> Optional[FSMState]:
        if not self._stack:
            return None
        state = self._stack.pop()
        logger.debug("FSM pop %r (depth %s)", state, len(self._stack))
        state.on_exit(self, self.agent)
        return state

    def replace_state(self, state: FSMState) -> None:
        """Pop the current state and push ``state`` in its place."""

        self.pop_state()
        self.push_state(state)

    def reset_to(self, state: FSMState) -> None:
        """Pop everything and leave ``state`` as the only entry."""

        self.clear()
        self.push_state(state)

    def clear(self) -> None:
        while self._stack:
            self.pop_state()

    def update(self) -> None:
        state = self.current
        if state is not None:
            state.tick(self, self.agent)


__all__ = ["FSMState", "StackFSM"]
