import sys
from collections import deque, namedtuple

from cached_property import cached_property
from loguru import logger

from nfadfa.automata.state import EMPTY, StateTable, sorted_states

# Above this many original states, enumerating the power set is logged as a
# warning
POWERSET_WARN_LIMIT = 16


# Marker constants


class Marker:
    """
    Represents a marker object.

    Markers are labels that can never collide with a real alphabet symbol,
    since no string is equal to a marker.

    Attributes:
        name (str): The name of the marker.

    Example:
        >>> marker = Marker("EPSILON")
        >>> marker.name
        'EPSILON'
        >>> repr(marker)
        '<EPSILON>'
    """

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"<{self.name}>"


EPSILON = Marker("EPSILON")


# Transitions


class Transition(namedtuple("Transition", "start symbol end")):
    """
    An immutable labeled edge from one state to another.

    Attributes:
        start (State): The source state.
        symbol (str or Marker): The input symbol, or :data:`EPSILON`.
        end (State): The destination state.
    """

    __slots__ = ()

    def matches(self, state, symbol):
        """Returns True if this transition leaves ``state`` on ``symbol``."""
        return self.start == state and self.symbol == symbol

    def render(self, epsilon="EPS"):
        """
        Returns the transition as a rule line, e.g. ``{q0}, a = {q1}``.

        Args:
            epsilon (str): The token to print for an epsilon transition.
        """
        symbol = epsilon if self.symbol is EPSILON else self.symbol
        return f"{self.start}, {symbol} = {self.end}"

    def __str__(self):
        return self.render()


# Automaton


class FSA:
    """
    A finite state automaton described by its set of labeled states.

    The automaton is never modified once built. :meth:`to_dfa` returns a new
    deterministic automaton built by subset construction, or the automaton
    itself if it is already deterministic.

    Attributes:
        states (tuple): The states of the automaton, in order.
        alphabet (tuple): The input symbols, in order. Never contains
            :data:`EPSILON`.
        initial (State): The initial state.
        accept_states (frozenset): The accepting states.
        transitions (tuple): The :class:`Transition` objects.
        is_dfa (bool): Whether the automaton is already deterministic.
        table (StateTable): The table that owns this automaton's states.

    Example:
        >>> table = StateTable()
        >>> q0, q1 = table.state("q0"), table.state("q1")
        >>> nfa = FSA([q0, q1], ["a"], q0, {q1},
        ...           [Transition(q0, "a", q0), Transition(q0, "a", q1)],
        ...           table=table)
        >>> dfa = nfa.to_dfa()
        >>> [str(t) for t in dfa.transitions]
        ['{q0}, a = {q0, q1}', '{q0, q1}, a = {q0, q1}']
    """

    def __init__(
        self,
        states,
        alphabet,
        initial,
        accept_states,
        transitions,
        is_dfa=False,
        table=None,
    ):
        self.states = tuple(states)
        if table is None:
            table = StateTable()
            for state in self.states:
                table.intern(state)

        self.alphabet = tuple(alphabet)
        self.initial = initial
        self.accept_states = frozenset(accept_states)
        self.transitions = tuple(transitions)
        self.is_dfa = is_dfa
        self.table = table

    def __len__(self):
        return len(self.states)

    def __eq__(self, other):
        if not isinstance(other, FSA):
            return NotImplemented
        return (
            self.initial == other.initial
            and self.is_dfa == other.is_dfa
            and self.accept_states == other.accept_states
            and self.states == other.states
            and self.alphabet == other.alphabet
            and self.transitions == other.transitions
        )

    def __repr__(self):
        kind = "DFA" if self.is_dfa else "NFA"
        return (
            f"<{kind} states={len(self.states)} alphabet={list(self.alphabet)} "
            f"transitions={len(self.transitions)}>"
        )

    @cached_property
    def _outgoing(self):
        # Maps each start state to the transitions leaving it
        outgoing = {}
        for t in self.transitions:
            outgoing.setdefault(t.start, []).append(t)
        return outgoing

    def is_final(self, state):
        return state in self.accept_states

    def dump(self, stream=sys.stdout, epsilon="EPS"):
        """
        Prints a textual report of the automaton to the specified stream.

        Args:
            stream (file): The stream to print to. Defaults to sys.stdout.
            epsilon (str): The token to print for epsilon transitions.

        Example:
            >>> dfa.dump()
            States: [EM, {q0}, {q1}, {q0, q1}]
            Alphabet: [a]
            Initial State: {q0}
            Accept States: [{q0, q1}]
            Transitions (2):
            {q0}, a = {q0, q1}
            {q0, q1}, a = {q0, q1}
        """

        def join(items):
            return "[" + ", ".join(str(item) for item in items) + "]"

        print("States:", join(self.states), file=stream)
        print("Alphabet:", join(self.alphabet), file=stream)
        print("Initial State:", self.initial, file=stream)
        print("Accept States:", join(sorted_states(self.accept_states)), file=stream)
        print(f"Transitions ({len(self.transitions)}):", file=stream)
        for t in self.transitions:
            print(t.render(epsilon), file=stream)

    def epsilon_closure(self, state):
        """
        Returns the states reachable from a state by epsilon transitions.

        The result always contains ``state`` itself. Transitions are matched
        by state equality, so a merged state only follows the epsilon
        transitions declared from that exact state.

        Args:
            state (State): The state to start from.

        Returns:
            frozenset: The epsilon closure of ``state``.
        """
        outgoing = self._outgoing
        closure = set()
        stack = [state]
        while stack:
            current = stack.pop()
            if current in closure:
                continue
            closure.add(current)
            for t in outgoing.get(current, ()):
                if t.symbol is EPSILON and t.end not in closure:
                    stack.append(t.end)
        return frozenset(closure)

    def power_set(self, table=None):
        """
        Returns every subset of this automaton's states as a merged state.

        The list starts with :data:`EMPTY`, followed by the merge of each of
        the 2^N - 1 non-empty combinations of the N states, sorted by
        :func:`~nfadfa.automata.state.compare_states`. The whole power set is
        produced whether or not a subset is reachable.

        Args:
            table (StateTable, optional): The table to canonicalize the
                subsets in. Defaults to this automaton's table.

        Returns:
            list: The 2^N states.
        """
        table = self.table if table is None else table
        states = self.states
        count = len(states)
        if count > POWERSET_WARN_LIMIT:
            logger.warning(
                "Enumerating the power set of {} states ({} subsets)", count, 1 << count
            )

        subsets = []
        # Each value of the counter is a bit pattern; bit j selects the state
        # at index count - 1 - j
        for bits in range(1, 1 << count):
            names = set()
            for i, state in enumerate(states):
                if bits & (1 << (count - 1 - i)):
                    names.update(state.names)
            subsets.append(table.state(names))

        powerset = [EMPTY]
        powerset.extend(sorted_states(subsets))
        logger.debug("Power set has {} states", len(powerset))
        return powerset

    def reachable_transitions(self, table=None):
        """
        Builds the deterministic transitions reachable from the initial state.

        Explores merged states breadth-first starting from the initial state.
        Every explored state gets exactly one transition for each symbol of the
        alphabet, going to :data:`EMPTY` when no original transition matches.

        Args:
            table (StateTable, optional): The table to canonicalize merged
                states in. Defaults to this automaton's table.

        Returns:
            list: The new :class:`Transition` objects.
        """
        table = self.table if table is None else table
        outgoing = self._outgoing
        transitions = []
        found = set()
        queue = deque([self.initial])

        while queue:
            current = table.merge(self.epsilon_closure(queue.popleft()))
            found.add(current)
            members = [table.state(name) for name in current]

            for symbol in self.alphabet:
                ends = set()
                for member in members:
                    for t in outgoing.get(member, ()):
                        if t.matches(member, symbol):
                            ends.update(self.epsilon_closure(t.end))

                dest = table.merge(ends) if ends else EMPTY
                if dest not in found:
                    found.add(dest)
                    queue.append(dest)
                transitions.append(Transition(current, symbol, dest))

        logger.debug(
            "Explored {} states, built {} transitions", len(found), len(transitions)
        )
        return transitions

    def derive_accept_states(self, transitions):
        """
        Returns the states of a converted automaton that are accepting.

        A state accepts if any of its names belongs to one of this
        automaton's accepting states. Only states that appear at either end of
        one of the given transitions are considered.

        Args:
            transitions (list): The transitions of the converted automaton.

        Returns:
            frozenset: The accepting states.
        """
        accept_names = set()
        for state in self.accept_states:
            accept_names.update(state.names)

        accepting = set()
        for t in transitions:
            for state in (t.start, t.end):
                if state not in accepting and not accept_names.isdisjoint(state.names):
                    accepting.add(state)
        return frozenset(accepting)

    def to_dfa(self):
        """
        Converts the automaton to a deterministic finite automaton.

        Returns ``self`` if the automaton is already deterministic. Otherwise
        returns a new automaton whose states are the full power set of this
        automaton's states, whose transitions cover every reachable merged
        state, and which shares this automaton's state table.

        Returns:
            FSA: The deterministic automaton.
        """
        if self.is_dfa:
            return self

        table = self.table
        states = self.power_set(table)
        initial = table.merge(self.epsilon_closure(self.initial))
        transitions = self.reachable_transitions(table)
        accept_states = self.derive_accept_states(transitions)

        return FSA(
            states,
            self.alphabet,
            initial,
            accept_states,
            transitions,
            is_dfa=True,
            table=table,
        )
