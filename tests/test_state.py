import pytest
from nfadfa.automata.state import (
    EMPTY,
    InvalidStateError,
    State,
    StateTable,
    compare_states,
    sorted_states,
)


def test_canonical_instance():
    table = StateTable()
    assert table.state({"a", "b"}) is table.state(["b", "a"])
    assert table.state({"a", "b"}) is table.state(frozenset("ab"))
    assert table.state("a") is table.state({"a"})
    assert table.state("a") is not table.state({"a", "b"})
    assert len(table) == 2


def test_single_name_is_not_split():
    table = StateTable()
    s = table.state("q10")
    assert s.names == frozenset(["q10"])
    assert len(s) == 1
    assert "q10" in s
    assert "q1" not in s


def test_empty_names():
    table = StateTable()
    with pytest.raises(InvalidStateError):
        table.state(set())
    with pytest.raises(ValueError):
        table.state([])
    assert len(table) == 0


def test_separate_tables():
    t1 = StateTable()
    t2 = StateTable()
    a1 = t1.state({"x", "y"})
    a2 = t2.state({"x", "y"})
    assert a1 is not a2
    assert a1 == a2
    assert hash(a1) == hash(a2)
    assert a1 != t2.state("x")


def test_display():
    table = StateTable()
    assert table.state("q0").display == "{q0}"
    assert str(table.state({"q2", "q0", "q1"})) == "{q0, q1, q2}"
    assert repr(table.state({"b", "a"})) == "<State {a, b}>"
    assert EMPTY.display == "EM"
    assert str(EMPTY) == "EM"
    assert list(table.state({"b", "a"})) == ["a", "b"]


def test_empty_sentinel():
    table = StateTable()
    assert len(EMPTY) == 0
    assert EMPTY.names == frozenset()
    # A state named like the sentinel's display is still a different state
    assert table.state("EM") != EMPTY
    assert EMPTY not in list(table)


def test_compare_by_size():
    table = StateTable()
    z = table.state("z")
    ab = table.state({"a", "b"})
    assert compare_states(z, ab) < 0
    assert compare_states(ab, z) > 0
    assert compare_states(EMPTY, z) < 0


def test_compare_by_display():
    table = StateTable()
    ab = table.state({"a", "b"})
    ac = table.state({"a", "c"})
    assert compare_states(ab, ac) < 0
    assert compare_states(ac, ab) > 0
    assert compare_states(ab, table.state({"b", "a"})) == 0
    # Display forms compare as strings
    assert compare_states(table.state("q10"), table.state("q2")) < 0


def test_sorted_states():
    table = StateTable()
    states = [
        table.state({"q0", "q1", "q2"}),
        table.state("q2"),
        table.state({"q1", "q2"}),
        table.state("q0"),
        table.state({"q0", "q2"}),
    ]
    assert [str(s) for s in sorted_states(states)] == [
        "{q0}",
        "{q2}",
        "{q0, q2}",
        "{q1, q2}",
        "{q0, q1, q2}",
    ]


def test_merge():
    table = StateTable()
    q0 = table.state("q0")
    q1 = table.state("q1")
    merged = table.merge([q0, q1])
    assert merged is table.state({"q0", "q1"})
    assert table.merge([q0]) is q0
    assert table.merge(frozenset([merged, q1])) is merged
    assert table.merge([]) is EMPTY
    assert table.merge([EMPTY]) is EMPTY
    assert table.merge([EMPTY, EMPTY]) is EMPTY
    assert table.merge([EMPTY, q0]) is q0


def test_intern():
    table = StateTable()
    outside = State(["a", "b"])
    assert table.intern(outside) is outside
    assert table.state({"a", "b"}) is outside
    assert table.intern(State(["a", "b"])) is outside
    assert table.intern(EMPTY) is EMPTY
    assert {"a", "b"} in table
    assert len(table) == 1


def test_clear():
    table = StateTable()
    a = table.state("a")
    assert "a" in table
    table.clear()
    assert "a" not in table
    assert len(table) == 0
    assert table.state("a") is not a
    assert table.state("a") == a
