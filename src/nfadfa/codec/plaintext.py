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
Reads and writes automata in a simple tab-separated text format.

The first four lines are positional::

    {q0}	{q1}	{q2}        states
    a	b                   alphabet
    {q0}                    initial state
    {q2}                    accepting states (may be empty)

Every following non-blank line is a transition rule of the form
``{q0}, a = {q1}``. A rule whose symbol is the epsilon token (``EPS`` unless
told otherwise) is an epsilon transition.
"""

from loguru import logger

from nfadfa.automata.fsa import EPSILON, FSA, Transition
from nfadfa.automata.state import StateTable, sorted_states

DEFAULT_EPSILON = "EPS"
HEADER_LINES = 4


# Exceptions


class FileFormatError(Exception):
    """
    Exception raised when a text file does not describe a valid automaton.

    Attributes:
        message (str): The error message describing the problem.
        lineno (int): The 1-based line number of the offending line, or None
            if the problem is not tied to one line.
    """

    def __init__(self, message, lineno=None):
        self.message = message
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


# Reading


class LineReader:
    """
    Builds an :class:`~nfadfa.automata.fsa.FSA` from the lines of a text file.

    All states read from one file are canonicalized in one
    :class:`~nfadfa.automata.state.StateTable`, which the resulting automaton
    keeps.
    """

    def __init__(self, dbfile, epsilon=DEFAULT_EPSILON, table=None):
        """
        Initialize a LineReader object.

        Parameters:
        - dbfile (file): The text file object to read lines from.
        - epsilon (str): The symbol token that marks an epsilon transition.
        - table (StateTable): The table to create states in. A new table is
          made if this is None.
        """
        self._dbfile = dbfile
        self.epsilon = epsilon
        self.table = StateTable() if table is None else table

    def _state(self, token, lineno):
        token = token.strip()
        if len(token) <= 2 or token[0] != "{" or token[-1] != "}":
            raise FileFormatError(
                f"State {token!r} must be enclosed by curly braces {{}}", lineno
            )
        return self.table.state(token[1:-1])

    def _states(self, line, lineno):
        return [
            self._state(token, lineno) for token in line.split("\t") if token.strip()
        ]

    def _alphabet(self, line, lineno):
        alphabet = [symbol.strip() for symbol in line.split("\t") if symbol.strip()]
        if self.epsilon in alphabet:
            raise FileFormatError(
                f"The epsilon symbol {self.epsilon!r} can't be part of the alphabet",
                lineno,
            )
        if len(set(alphabet)) != len(alphabet):
            repeated = sorted({s for s in alphabet if alphabet.count(s) > 1})
            raise FileFormatError(
                f"Alphabet symbols must be unique, repeated: {', '.join(repeated)}",
                lineno,
            )
        return alphabet

    def _transition(self, line, lineno):
        comma = line.find(",")
        equals = line.find("=")
        if comma < 0 or equals < 0 or equals <= comma:
            raise FileFormatError(
                'Transition rule should be of the form "{A}, x = {B}"', lineno
            )

        symbol = line[comma + 1 : equals].strip()
        if not symbol:
            raise FileFormatError("Transition rule has no symbol", lineno)
        if symbol == self.epsilon:
            symbol = EPSILON

        start = self._state(line[:comma], lineno)
        end = self._state(line[equals + 1 :], lineno)
        return Transition(start, symbol, end)

    def read(self):
        """
        Reads the whole file and returns the automaton it describes.

        Returns:
            FSA: The (non-deterministic) automaton.

        Raises:
            FileFormatError: If the file is malformed.
        """
        lines = [line.rstrip("\r\n") for line in self._dbfile]
        if len(lines) < HEADER_LINES:
            raise FileFormatError(
                f"Input must have at least {HEADER_LINES} lines, found {len(lines)}"
            )

        states = sorted_states(self._states(lines[0], 1))
        alphabet = self._alphabet(lines[1], 2)
        initial = self._state(lines[2], 3)
        accept_states = self._states(lines[3], 4)

        transitions = []
        for lineno, line in enumerate(lines[HEADER_LINES:], HEADER_LINES + 1):
            if line.strip():
                transitions.append(self._transition(line, lineno))

        logger.debug(
            "Read automaton with {} states, {} symbols and {} transitions",
            len(states),
            len(alphabet),
            len(transitions),
        )
        return FSA(
            states, alphabet, initial, accept_states, transitions, table=self.table
        )


# Writing


class LineWriter:
    """Writes an :class:`~nfadfa.automata.fsa.FSA` to a text file."""

    def __init__(self, dbfile, epsilon=DEFAULT_EPSILON):
        self._dbfile = dbfile
        self.epsilon = epsilon

    def _print_line(self, *items):
        """
        Writes a line holding the given items separated by tabs.

        Args:
            *items: The objects to write. Each is converted with ``str()``.
        """
        self._dbfile.write("\t".join(str(item) for item in items))
        self._dbfile.write("\n")

    def write(self, fsa):
        """
        Writes the automaton in the same layout :class:`LineReader` reads.

        Accepting states are written in comparator order; every other part
        keeps the automaton's own order.
        """
        self._print_line(*fsa.states)
        self._print_line(*fsa.alphabet)
        self._print_line(fsa.initial)
        self._print_line(*sorted_states(fsa.accept_states))
        for t in fsa.transitions:
            self._print_line(t.render(self.epsilon))


# Convenience functions


def read_fsa(dbfile, epsilon=DEFAULT_EPSILON, table=None):
    """Reads an automaton from an open text file."""
    return LineReader(dbfile, epsilon=epsilon, table=table).read()


def write_fsa(fsa, dbfile, epsilon=DEFAULT_EPSILON):
    """Writes an automaton to an open text file."""
    LineWriter(dbfile, epsilon=epsilon).write(fsa)


def load(path, epsilon=DEFAULT_EPSILON):
    """
    Reads an automaton from the file at the given path.

    Args:
        path (str): The path of the file to read.
        epsilon (str): The symbol token that marks an epsilon transition.

    Returns:
        FSA: The automaton.

    Raises:
        FileFormatError: If the file is malformed or is not UTF-8 text.
        OSError: If the file can't be read.
    """
    with open(path, encoding="utf-8") as f:
        try:
            return read_fsa(f, epsilon=epsilon)
        except UnicodeDecodeError as e:
            raise FileFormatError(f"{path} is not UTF-8 text: {e.reason}") from e


def save(fsa, path, epsilon=DEFAULT_EPSILON):
    """Writes an automaton to the file at the given path, replacing it."""
    with open(path, "w", encoding="utf-8") as f:
        write_fsa(fsa, f, epsilon=epsilon)
