# Copyright 2010 Matt Chaput. All rights reserved.
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
Command line front end: reads an NFA from a text file, converts it to a DFA,
prints both, and writes the DFA to a file.

Usage: nfa2dfa [options] <input>
"""

import sys
from optparse import OptionParser

from loguru import logger

from nfadfa import versionstring
from nfadfa.automata.state import InvalidStateError
from nfadfa.codec import plaintext
from nfadfa.util import elapsed, now

DEFAULT_OUTPUT = "output.DFA"


def _parser():
    """
    Create an OptionParser object with the converter's options.

    Options:
    - -o, --output: Path of the DFA file to write. Default is "output.DFA".
    - -e, --epsilon: Symbol that marks an epsilon transition. Default is "EPS".
    - -q, --quiet: Don't print the automata to standard output.
    - -v, --verbose: Log debugging messages to standard error.
    """
    p = OptionParser(
        usage="%prog [options] <input>", version=f"%prog {versionstring()}"
    )
    p.add_option(
        "-o",
        "--output",
        dest="output",
        metavar="PATH",
        help="Path of the DFA file to write.",
        default=DEFAULT_OUTPUT,
    )
    p.add_option(
        "-e",
        "--epsilon",
        dest="epsilon",
        metavar="SYMBOL",
        help="Symbol that marks an epsilon transition.",
        default=plaintext.DEFAULT_EPSILON,
    )
    p.add_option(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Don't print the automata to standard output.",
        default=False,
    )
    p.add_option(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Log debugging messages to standard error.",
        default=False,
    )
    return p


def _setup_logging(verbose):
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    logger.enable("nfadfa")


def main(argv=None, stdout=None):
    """
    Runs the converter.

    Args:
        argv (list, optional): The command line arguments, without the program
            name. Defaults to ``sys.argv[1:]``.
        stdout (file, optional): Where the automata are printed. Defaults to
            ``sys.stdout``.

    Returns:
        int: 0 on success, 1 if the input can't be read or converted, 2 on a
        usage error.
    """
    stdout = sys.stdout if stdout is None else stdout
    p = _parser()
    options, args = p.parse_args(argv)
    if len(args) != 1:
        p.print_usage(sys.stderr)
        return 2

    _setup_logging(options.verbose)
    inpath = args[0]

    try:
        nfa = plaintext.load(inpath, epsilon=options.epsilon)
        logger.info("Read {!r} from {}", nfa, inpath)
        if not options.quiet:
            print("=== NFA ===", file=stdout)
            nfa.dump(stdout, epsilon=options.epsilon)
            print(file=stdout)

        starttime = now()
        dfa = nfa.to_dfa()
        logger.info("Converted to {!r} in {:.4f} s", dfa, elapsed(starttime))
        if not options.quiet:
            print("=== DFA ===", file=stdout)
            dfa.dump(stdout, epsilon=options.epsilon)

        plaintext.save(dfa, options.output, epsilon=options.epsilon)
        logger.info("Wrote DFA to {}", options.output)
    except (plaintext.FileFormatError, InvalidStateError, OSError) as e:
        logger.error("Could not convert {}: {}", inpath, e)
        return 1

    return 0


def main_script():
    sys.exit(main())


if __name__ == "__main__":
    main_script()
