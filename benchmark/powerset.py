"""
Times NFA to DFA conversion for random automata of growing size.

Usage: powerset.py [options]

The state list of a converted automaton always holds the full power set of
the original states, so conversion time roughly doubles with every added
state. This script shows that growth.
"""

import random
from optparse import OptionParser

from nfadfa.automata.fsa import EPSILON, FSA, Transition
from nfadfa.automata.state import StateTable
from nfadfa.util import now


def random_nfa(size, alphabet, density, epsilons, rng):
    """
    Returns a random NFA.

    Args:
        size (int): The number of states.
        alphabet (list): The input symbols.
        density (float): Chance of a transition between any two states on any
            given symbol.
        epsilons (float): Chance of an epsilon transition between any two
            states.
        rng (random.Random): The random number generator to use.
    """
    table = StateTable()
    states = [table.state(f"q{i}") for i in range(size)]
    transitions = []
    for start in states:
        for end in states:
            for symbol in alphabet:
                if rng.random() < density:
                    transitions.append(Transition(start, symbol, end))
            if start is not end and rng.random() < epsilons:
                transitions.append(Transition(start, EPSILON, end))

    accept_states = rng.sample(states, max(1, size // 4))
    return FSA(states, alphabet, states[0], accept_states, transitions, table=table)


def main():
    p = OptionParser()
    p.add_option(
        "-n",
        "--max-states",
        dest="maxstates",
        type="int",
        help="Largest number of NFA states to try.",
        default=14,
    )
    p.add_option(
        "-d",
        "--density",
        dest="density",
        type="float",
        help="Chance of a transition between two states on a symbol.",
        default=0.2,
    )
    p.add_option(
        "-e",
        "--epsilons",
        dest="epsilons",
        type="float",
        help="Chance of an epsilon transition between two states.",
        default=0.05,
    )
    p.add_option("-s", "--seed", dest="seed", type="int", help="Random seed.", default=0)
    options, _ = p.parse_args()

    rng = random.Random(options.seed)
    alphabet = ["a", "b", "c"]
    print("states", "powerset", "explored", "seconds", sep="\t")
    for size in range(1, options.maxstates + 1):
        nfa = random_nfa(size, alphabet, options.density, options.epsilons, rng)
        t = now()
        dfa = nfa.to_dfa()
        secs = now() - t
        explored = len(dfa.transitions) // len(alphabet)
        print(size, len(dfa.states), explored, f"{secs:0.4f}", sep="\t")


if __name__ == "__main__":
    main()
