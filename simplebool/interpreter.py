"""Simply typed lambda calculus (λ→ over Bool) interpreter.

Basic program flow:
    1. Lexer: turns program text into tokens on demand (simplebool/pure/lexical.py)
    2. Parser: pulls tokens one at a time and builds a single Term, resolving every variable to a de Bruijn index
       (simplebool/pure/parser.py, simplebool/pure/term.py)
        - type annotations are parsed but not checked: there is no type checker
    3. Reducer: rewrites the Term in place with call-by-value small steps until no rule applies
       (simplebool/pure/reducer.py)

Errors are GenericExceptions (simplebool/lang/error.py). Session (simplebool/lang/session.py) runs a program under an
ErrorHandler, which turns them into diagnostics.
"""

from simplebool.pure.lexical import Lexer
from simplebool.pure.parser import Parser
from simplebool.pure.reducer import run


def tokenize(program):
    """Lazily yields the Tokens of program (END excluded). Raises LexicalError on invalid tokens."""
    return iter(Lexer(program))


def parse(program):
    """Parses program into a Term. Raises ParseError, LexicalError or InvalidTermError on invalid programs."""
    return Parser(program).parse_program()


def evaluate(term, max_steps=None):
    """Reduces term in place to normal form and returns it. With max_steps, stops after that many steps."""
    return run(term, max_steps)
