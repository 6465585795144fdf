import pytest

from goap_world.systems.ai.fsm import FSMState, StackFSM


class Recorder(FSMState):
    def __init__(self, name: str, log: list) -> None:
        self.name = name
        self.log = log

    def on_enter(self, fsm, agent) -> None:
        self.log.append(f"enter {self.name}")

    def tick(self, fsm, agent) -> None:
        self.log.append(f"tick {self.name}")

    def on_exit(self, fsm, agent) -> None:
        self.log.append(f"exit {self.name}")


def test_only_top_state_ticks():
    log: list = []
    fsm = StackFSM(agent=None)
    a, b = Recorder("a", log), Recorder("b", log)

    fsm.push_state(a)
    fsm.push_state(b)
    fsm.update()

    assert fsm.current is b
    assert fsm.depth == 2
    assert log == ["enter a", "enter b", "tick b"]


def test_pop_and_replace():
    log: list = []
    fsm = StackFSM(agent=None)
    a, b, c = Recorder("a", log), Recorder("b", log), Recorder("c", log)
    fsm.push_state(a)
    fsm.push_state(b)

    assert fsm.pop_state() is b
    fsm.replace_state(c)

    assert fsm.states() == [c]
    assert log[-3:] == ["exit b", "exit a", "enter c"]


def test_reset_to_clears_stack():
    log: list = []
    fsm = StackFSM(agent=None)
    a, b = Recorder("a", log), Recorder("b", log)
    fsm.push_state(a)
    fsm.push_state(b)

    fsm.reset_to(a)

    assert fsm.states() == [a]
    assert log[-3:] == ["exit b", "exit a", "enter a"]


def test_empty_stack_is_noop():
    fsm = StackFSM(agent=None)
    fsm.update()
    assert fsm.pop_state() is None
    assert fsm.current is None


def test_base_state_tick_not_implemented():
    fsm = StackFSM(agent=None)
    fsm.push_state(FSMState())
    with pytest.raises(NotImplementedError):
        fsm.update()
