"""Builds a Term from program text, resolving each variable to its de Bruijn index as it goes.

Rather than recursing over grammar rules, the Parser keeps a stack of terms under construction and combines every
freshly parsed term into the top of that stack (see Term.combine):
    - "l x : T ." pushes a new abstraction whose body is every term that follows, up to its closing paren
    - "(" pushes an empty placeholder, ")" combines the top of the stack into the term below it
    - a variable is combined into the top of the stack

Free variables are numbered after the bound ones, by the alphabet rank of their first letter: under n binders, free
'a' is n, free 'b' is n + 1, and so on. Only single lowercase letters get distinct, meaningful indices as free
variables. Longer or non-alphabetic free names are numbered by their first character and are not checked.
"""

from simplebool.lang.error import ParseError
from simplebool.pure.lexical import Category, Lexer
from simplebool.pure.term import Term


class Parser:
    """Parses a single program."""

    def __init__(self, program):
        self.program = program
        self.lexer = Lexer(program)

        self.term_stack = [Term()]
        self.scopes = [0]          # len(self.bound_variables) when each term_stack entry was pushed
        self.bound_variables = []  # names bound by the enclosing abstractions, innermost last
        self.paren_scopes = []     # len(self.bound_variables) at each open paren, one per unmatched '('

    def parse_program(self):
        """Parses self.program into a single Term. Raises ParseError (or LexicalError) on invalid programs."""
        token = self.lexer.next_token()

        while token.category is not Category.END:
            if token.category is Category.ABSTRACTION:
                arg = self.parse_variable()
                self.scopes.append(len(self.bound_variables))
                self.bound_variables.append(arg.text)
                self.parse_colon()
                self.parse_type()
                self.term_stack.append(Term.abstraction(arg.text))

            elif token.category is Category.VARIABLE:
                self.term_stack[-1].combine(Term.variable(token.text, self.de_bruijn_index(token.text)))

            elif token.category is Category.OPEN_PAREN:
                self.term_stack.append(Term())
                self.scopes.append(len(self.bound_variables))
                self.paren_scopes.append(len(self.bound_variables))

            elif token.category is Category.CLOSE_PAREN:
                if not self.paren_scopes:
                    raise self.error("unmatched-parenthesis", "'{}' has a ')' that is not matched by a '('", token)

                self.combine_stack_top(token)

                # a parenthesized abstraction is closed twice, since each abstraction has its own stack entry.
                # one that is already complete was closed by an inner paren
                if self.term_stack[-1].is_abstraction and not self.term_stack[-1].complete:
                    self.term_stack[-1].complete = True
                    del self.bound_variables[self.scopes[-1]:]
                    self.combine_stack_top(token)

                # names bound inside the parens are out of scope past them
                del self.bound_variables[self.paren_scopes.pop():]

            else:
                raise self.error("unexpected-token", "unexpected token '{}' in '{}'", token)

            token = self.lexer.next_token()

        if self.paren_scopes:
            raise self.error("unmatched-parenthesis", "'{}' has a '(' that is not matched by a ')'")

        while len(self.term_stack) > 1:
            self.combine_stack_top(token)

        program = self.term_stack.pop()
        if program.is_invalid():
            raise self.error("unexpected-token", "unexpected '{}': '{}' does not contain a term", token)
        return program

    def de_bruijn_index(self, name):
        """Index of the innermost binding of name, or its free variable index if name is not bound."""
        for distance, bound in enumerate(reversed(self.bound_variables)):
            if bound == name:
                return distance
        return len(self.bound_variables) + ord(name[0].lower()) - ord("a")

    def combine_stack_top(self, token):
        """Pops the top of the term stack and combines it into the term below."""
        if len(self.term_stack) < 2:
            raise self.error("unmatched-parenthesis", "'{}' has a ')' that is not matched by a '('", token)

        top = self.term_stack.pop()
        self.scopes.pop()
        self.term_stack[-1].combine(top)

    def parse_variable(self):
        token = self.lexer.next_token()
        if token.category is not Category.VARIABLE:
            raise self.error("expected-variable", "expected a variable, got '{}' in '{}'", token)
        return token

    def parse_colon(self):
        token = self.lexer.next_token()
        if token.category is not Category.COLON:
            raise self.error("expected-colon", "expected ':', got '{}' in '{}'", token)
        return token

    def parse_type(self):
        """Parses Bool (-> Bool)* up to and including the abstraction's dot. Types have no run-time meaning, so the
        parsed tokens are only returned for inspection.
        """
        type_tokens = []

        while True:
            token = self.lexer.next_token()
            if token.category is not Category.BOOL_KEYWORD:
                raise self.error("expected-bool-keyword", "expected 'Bool', got '{}' in '{}'", token)
            type_tokens.append(token)

            # types only appear in abstractions, so the dot always follows
            token = self.lexer.next_token()
            if token.category is Category.ABSTRACTION_DOT:
                return type_tokens
            elif token.category is Category.END:
                raise self.error("expected-dot", "expected '.' after the type, got '{}' in '{}'", token)
            elif token.category is not Category.ARROW:
                raise self.error("expected-arrow", "expected '->' or '.', got '{}' in '{}'", token)
            type_tokens.append(token)

    def error(self, reason, msg, token=None):
        """Builds a ParseError pointing at token in self.program (or at the whole program if token is None)."""
        if token is None:
            return ParseError(reason, msg, self.program)

        text = str(token)
        error = ParseError(reason, msg, (text, self.program), start=token.pos, end=token.pos + len(text))
        error.expr = self.program
        return error