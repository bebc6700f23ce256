# Copyright 2008 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
Canonical states for subset construction.

A :class:`State` is either a single state of the original automaton or a set
of them merged together while building a DFA. States are created through a
:class:`StateTable`, which hands out exactly one instance per distinct set of
names, so that a state built twice from the same names is the same object.
"""

from functools import cmp_to_key

from cached_property import cached_property

EMPTY_NAME = "EM"


# Exceptions


class InvalidStateError(ValueError):
    """
    Raised when a state is built from an empty set of names.

    Only the shared :data:`EMPTY` sentinel has no names; asking a
    :class:`StateTable` for a state with zero names always indicates a bug or
    bad input upstream.
    """

    def __init__(self, message="A state must have at least one name"):
        self.message = message
        super().__init__(message)


# State objects


class State:
    """
    An immutable state made of one or more original state names.

    Two states are equal if and only if their name sets are equal. Use
    :meth:`StateTable.state` to get the canonical instance for a set of names
    instead of calling this constructor directly.

    Attributes:
        names (frozenset): The original state names this state stands for.

    Example:
        >>> table = StateTable()
        >>> table.state({"q1", "q0"}).display
        '{q0, q1}'
    """

    def __init__(self, names, display=None):
        self.names = frozenset(names)
        if display is not None:
            # cached_property stores its value in the instance dict
            self.__dict__["display"] = display
        self._hash = hash(self.names)

    @cached_property
    def display(self):
        """
        The printable form of the state, e.g. ``{q0, q1}``.

        Names are listed in sorted order so the same state always renders the
        same way.
        """
        return "{" + ", ".join(sorted(self.names)) + "}"

    def __len__(self):
        return len(self.names)

    def __iter__(self):
        return iter(sorted(self.names))

    def __contains__(self, name):
        return name in self.names

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, State):
            return NotImplemented
        return self.names == other.names

    def __hash__(self):
        return self._hash

    def __str__(self):
        return self.display

    def __repr__(self):
        return f"<State {self.display}>"


# The "no valid destination" state. It is never stored in a StateTable.
EMPTY = State((), display=EMPTY_NAME)


# Ordering


def compare_states(a, b):
    """
    Compares two states for sorting.

    States with fewer names sort first; states with the same number of names
    are ordered by comparing their display forms as strings.

    Args:
        a (State): The first state.
        b (State): The second state.

    Returns:
        int: A negative number if ``a`` sorts before ``b``, a positive number
        if it sorts after, and 0 if they sort together.

    Example:
        >>> table = StateTable()
        >>> compare_states(table.state("q1"), table.state({"q0", "q1"})) < 0
        True
    """
    sizediff = len(a.names) - len(b.names)
    if sizediff:
        return sizediff

    adisp = a.display
    bdisp = b.display
    return (adisp > bdisp) - (adisp < bdisp)


state_sort_key = cmp_to_key(compare_states)


def sorted_states(states):
    """Returns a list of the given states in comparator order."""
    return sorted(states, key=state_sort_key)


# Interning


class StateTable:
    """
    Maps sets of names to their canonical :class:`State` objects.

    A table belongs to a single automaton-building session: the parser that
    reads an automaton creates one, and the conversion of that automaton keeps
    adding merged states to it. Tables are not shared between unrelated
    automata and have no eviction; call :meth:`clear` or make a new table to
    start over.

    Example:
        >>> table = StateTable()
        >>> table.state({"a", "b"}) is table.state(["b", "a"])
        True
        >>> table.state("a") is table.state({"a"})
        True
    """

    def __init__(self):
        self._states = {}

    def __len__(self):
        return len(self._states)

    def __contains__(self, names):
        if isinstance(names, str):
            names = (names,)
        return frozenset(names) in self._states

    def __iter__(self):
        return iter(self._states.values())

    def state(self, names):
        """
        Returns the canonical state for the given names.

        Args:
            names (str or iterable): A single name, or an iterable of names.

        Returns:
            State: The one instance in this table representing exactly these
            names.

        Raises:
            InvalidStateError: If ``names`` is empty.
        """
        if isinstance(names, str):
            names = (names,)
        key = frozenset(names)
        if not key:
            raise InvalidStateError()

        try:
            return self._states[key]
        except KeyError:
            state = self._states[key] = State(key)
            return state

    def intern(self, state):
        """
        Adopts a state made elsewhere into this table.

        Returns the table's canonical instance for the state's names, which is
        ``state`` itself unless the table already had an equal one. The
        :data:`EMPTY` sentinel is returned unchanged.
        """
        if state is EMPTY:
            return state
        return self._states.setdefault(state.names, state)

    def merge(self, states):
        """
        Returns the canonical state for the union of the given states' names.

        A collection holding a single state returns that state (interned in
        this table). An empty collection returns :data:`EMPTY`.

        Args:
            states (iterable): The states to merge.

        Returns:
            State: The merged state.
        """
        states = list(states)
        if len(states) == 1:
            return self.intern(states[0])

        names = set()
        for state in states:
            names.update(state.names)
        if not names:
            return EMPTY
        return self.state(names)

    def clear(self):
        """Forgets every state in the table."""
        self._states.clear()
