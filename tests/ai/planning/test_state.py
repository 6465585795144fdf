import pytest

from goap_world.ai.planning.state import (
    EMPTY_STATE,
    Assertion,
    EntityRef,
    State,
    Value,
    ValueKind,
)


def test_bool_and_number_are_distinct_values():
    assert Value.of(True).kind is ValueKind.BOOL
    assert Value.of(1).kind is ValueKind.NUMBER
    assert Value.of(True) != Value.of(1)
    assert State.from_dict({"x": True}) != State.from_dict({"x": 1})


def test_entity_ref_is_not_an_int():
    ref = Value.of(EntityRef(7))
    assert ref.kind is ValueKind.ENTITY
    assert ref != Value.of(7)
    assert ref.raw == EntityRef(7)


def test_unsupported_value_raises():
    with pytest.raises(TypeError):
        Value.of([1, 2])


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        Assertion.of("", True)


def test_apply_replaces_by_key():
    state = State.from_dict({"has_food": True, "is_hungry": True})
    effects = State.from_dict({"has_food": False})

    result = state.apply(effects)

    assert ("has_food", False) in result
    assert ("has_food", True) not in result
    assert result.get("is_hungry") is True
    assert len(result) == 2
    # the input is untouched
    assert ("has_food", True) in state


def test_apply_drops_every_assertion_for_a_key():
    state = State([("mood", "calm"), ("mood", "bored"), ("x", 1)])
    assert len(state.values_for("mood")) == 2

    result = state.apply(State.from_dict({"mood": "happy"}))

    assert [v.raw for v in result.values_for("mood")] == ["happy"]
    assert result.get("x") == 1


def test_satisfies_is_exact_subset():
    state = State.from_dict({"a": True, "b": 2})
    assert state.satisfies(State.from_dict({"a": True}))
    assert state.satisfies(EMPTY_STATE)
    assert not state.satisfies(State.from_dict({"a": False}))
    assert not state.satisfies(State.from_dict({"a": True, "c": True}))


def test_serialize_is_order_independent():
    s1 = State([("b", 1), ("a", True)])
    s2 = State.from_dict({"a": True, "b": 1})
    assert s1.serialize() == s2.serialize()
    assert s1 == s2
    assert hash(s1) == hash(s2)
    assert State.from_dict({"a": 1}).serialize() != State.from_dict({"a": True}).serialize()


def test_integral_float_serializes_like_int():
    as_int = State.from_dict({"x": 1})
    as_float = State.from_dict({"x": 1.0})

    assert as_int == as_float
    assert as_int.serialize() == as_float.serialize()
    assert State.from_dict({"x": 1.5}).serialize() != as_int.serialize()


def test_with_and_without_key():
    state = State.from_dict({"a": True})
    bigger = state.with_assertion("b", "x")
    assert bigger.to_dict() == {"a": True, "b": "x"}
    assert bigger.without_key("a").to_dict() == {"b": "x"}
    assert state.to_dict() == {"a": True}


def test_coerce_accepts_mappings_and_pairs():
    assert State.coerce(None) is EMPTY_STATE
    assert State.coerce({"a": True}) == State([("a", True)])
    s = State.from_dict({"a": True})
    assert State.coerce(s) is s


def test_pretty_and_str():
    state = State.from_dict({"has_food": True, "count": 3})
    assert state.pretty() == "count:3, has_food:True"
    assert str(Assertion.of("k", "v")) == "k:v"
