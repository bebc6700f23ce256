from io import StringIO

import pytest
from nfadfa.automata.fsa import EPSILON
from nfadfa.automata.state import StateTable
from nfadfa.codec import plaintext
from nfadfa.codec.plaintext import FileFormatError

NFA_TEXT = (
    "{q2}\t{q0}\t{q1}\n"
    "a\tb\n"
    "{q0}\n"
    "{q2}\n"
    "{q0}, a = {q0}\n"
    "{q0}, a = {q1}\n"
    "{q1}, b = {q2}\n"
)

DFA_TEXT = (
    "EM\t{q0}\t{q1}\t{q2}\t{q0, q1}\t{q0, q2}\t{q1, q2}\t{q0, q1, q2}\n"
    "a\tb\n"
    "{q0}\n"
    "{q2}\n"
    "{q0}, a = {q0, q1}\n"
    "{q0}, b = EM\n"
    "{q0, q1}, a = {q0, q1}\n"
    "{q0, q1}, b = {q2}\n"
    "EM, a = EM\n"
    "EM, b = EM\n"
    "{q2}, a = EM\n"
    "{q2}, b = EM\n"
)


def test_read():
    nfa = plaintext.read_fsa(StringIO(NFA_TEXT))
    s = nfa.table.state
    assert not nfa.is_dfa
    # States are sorted on input
    assert nfa.states == (s("q0"), s("q1"), s("q2"))
    assert nfa.alphabet == ("a", "b")
    assert nfa.initial is s("q0")
    assert nfa.accept_states == {s("q2")}
    assert [str(t) for t in nfa.transitions] == [
        "{q0}, a = {q0}",
        "{q0}, a = {q1}",
        "{q1}, b = {q2}",
    ]
    assert nfa.transitions[0].start is nfa.transitions[1].start


def test_read_into_table():
    table = StateTable()
    nfa = plaintext.read_fsa(StringIO(NFA_TEXT), table=table)
    assert nfa.table is table
    assert len(table) == 3


def test_read_epsilon():
    text = "{q0}\t{q1}\na\n{q0}\n{q1}\n{q0}, EPS = {q1}\n{q1}, a = {q0}\n"
    nfa = plaintext.read_fsa(StringIO(text))
    assert nfa.transitions[0].symbol is EPSILON
    assert nfa.transitions[1].symbol == "a"


def test_read_custom_epsilon():
    text = "{q0}\t{q1}\nEPS\n{q0}\n{q1}\n{q0}, ~ = {q1}\n{q0}, EPS = {q1}\n"
    nfa = plaintext.read_fsa(StringIO(text), epsilon="~")
    assert nfa.alphabet == ("EPS",)
    assert nfa.transitions[0].symbol is EPSILON
    assert nfa.transitions[1].symbol == "EPS"


def test_read_lenient_whitespace():
    text = (
        "{q0}\t{q1}\t\n"
        "a\t\n"
        "  {q0}  \n"
        "\n"
        "\n"
        "{q0} ,a=  {q1}\r\n"
        "\n"
    )
    nfa = plaintext.read_fsa(StringIO(text))
    assert len(nfa.states) == 2
    assert nfa.alphabet == ("a",)
    assert str(nfa.initial) == "{q0}"
    assert nfa.accept_states == frozenset()
    assert [str(t) for t in nfa.transitions] == ["{q0}, a = {q1}"]


def test_read_no_transitions():
    nfa = plaintext.read_fsa(StringIO("{q0}\na\n{q0}\n{q0}\n"))
    assert nfa.transitions == ()
    dfa = nfa.to_dfa()
    assert [str(t) for t in dfa.transitions] == ["{q0}, a = EM", "EM, a = EM"]


def test_too_few_lines():
    with pytest.raises(FileFormatError) as e:
        plaintext.read_fsa(StringIO("{q0}\na\n{q0}\n"))
    assert e.value.lineno is None
    assert "at least 4 lines" in str(e.value)


@pytest.mark.parametrize(
    "text,lineno",
    [
        ("q0\na\n{q0}\n{q0}\n", 1),
        ("{q0}\na\n{}\n{q0}\n", 3),
        ("{q0}\na\n{q0\n{q0}\n", 3),
        ("{q0}\na\n{q0}\nq0}\n", 4),
        ("{q0}\na\n{q0}\n{q0}\n{q0}, a = {q0}\n{q0} a = {q0}\n", 6),
        ("{q0}\na\n{q0}\n{q0}\n{q0} = a, {q0}\n", 5),
        ("{q0}\na\n{q0}\n{q0}\n{q0}, a {q0}\n", 5),
        ("{q0}\na\n{q0}\n{q0}\n{q0}, a = q0\n", 5),
        ("{q0}\na\n{q0}\n{q0}\n{q0},  = {q0}\n", 5),
        ("{q0}\na\tEPS\n{q0}\n{q0}\n", 2),
        ("{q0}\t{q1}\na\tb\ta\n{q0}\n{q1}\n{q0}, a = {q1}\n", 2),
    ],
)
def test_malformed(text, lineno):
    with pytest.raises(FileFormatError) as e:
        plaintext.read_fsa(StringIO(text))
    assert e.value.lineno == lineno
    assert str(e.value).startswith(f"line {lineno}: ")


def test_state_error_message():
    with pytest.raises(FileFormatError) as e:
        plaintext.read_fsa(StringIO("{q0}\na\nq0\n{q0}\n"))
    assert e.value.message == "State 'q0' must be enclosed by curly braces {}"


def test_write():
    dfa = plaintext.read_fsa(StringIO(NFA_TEXT)).to_dfa()
    out = StringIO()
    plaintext.write_fsa(dfa, out)
    assert out.getvalue() == DFA_TEXT


def test_write_epsilon():
    text = "{q0}\t{q1}\na\n{q0}\n\n{q0}, EPS = {q1}\n"
    nfa = plaintext.read_fsa(StringIO(text))

    out = StringIO()
    plaintext.write_fsa(nfa, out)
    assert out.getvalue() == text

    out = StringIO()
    plaintext.write_fsa(nfa, out, epsilon="~")
    assert out.getvalue().splitlines()[-1] == "{q0}, ~ = {q1}"


def test_save_and_load(tmp_path):
    inpath = tmp_path / "input.NFA"
    inpath.write_text(NFA_TEXT, encoding="utf-8")
    nfa = plaintext.load(str(inpath))

    outpath = tmp_path / "output.DFA"
    plaintext.save(nfa.to_dfa(), str(outpath))
    assert outpath.read_text(encoding="utf-8") == DFA_TEXT


def test_load_missing(tmp_path):
    with pytest.raises(OSError):
        plaintext.load(str(tmp_path / "nope.NFA"))


def test_repeated_symbol_message():
    with pytest.raises(FileFormatError) as e:
        plaintext.read_fsa(StringIO("{q0}\na\tb\ta\tb\n{q0}\n{q0}\n"))
    assert e.value.message == "Alphabet symbols must be unique, repeated: a, b"


def test_load_not_utf8(tmp_path):
    path = tmp_path / "input.NFA"
    path.write_bytes(b"{q0}\na\xff\n{q0}\n{q0}\n")
    with pytest.raises(FileFormatError) as e:
        plaintext.load(str(path))
    assert "is not UTF-8 text" in str(e.value)
    assert isinstance(e.value.__cause__, UnicodeDecodeError)
