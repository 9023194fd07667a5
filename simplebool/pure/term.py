"""λ-terms with de Bruijn indices.

```
<term> ::= <variable>                               ; "variable": name + de Bruijn index
         | "l" <variable> ":" <type> "." <term>     ; "abstraction": type is parsed but not kept
         | <term> <term>                            ; "application": associating by left
```

A Term is a single mutable node whose kind says which of the three shapes it currently has. Nodes are rewritten in
place (see Term.move_from) while the parser builds them and while the reducer reduces them, so a node never has more
than one parent. A node of kind INVALID, or an abstraction without a body, is a placeholder that only exists while
parsing.

Sources: Pierce, Types and Programming Languages, §6.1-6.3 (de Bruijn indices, shifting and substitution)
"""

from copy import deepcopy
from enum import Enum

from simplebool.lang.error import InvalidTermError


class Kind(Enum):
    INVALID = "invalid"
    VARIABLE = "variable"
    ABSTRACTION = "abstraction"
    APPLICATION = "application"


class Term:
    """Variable, abstraction, application, or (only during parsing) an invalid placeholder."""

    def __init__(self):
        """Creates an empty placeholder term. Use the variable/abstraction/application constructors otherwise."""
        self.kind = Kind.INVALID

        self.name = ""      # variable name or abstraction argument name, used for diagnostics only
        self.index = -1     # de Bruijn index of a variable
        self.complete = False  # whether an abstraction still accepts terms into its body

        self._body = None
        self._left = None
        self._right = None

    @classmethod
    def variable(cls, name, index):
        term = cls()
        term.kind = Kind.VARIABLE
        term.name = name
        term.index = index
        return term

    @classmethod
    def abstraction(cls, arg_name, body=None):
        """Abstraction binding arg_name. Without a body, the abstraction is still being parsed."""
        term = cls()
        term.kind = Kind.ABSTRACTION
        term.name = arg_name
        term._body = body
        return term

    @classmethod
    def application(cls, left, right):
        term = cls()
        term.kind = Kind.APPLICATION
        term._left = left
        term._right = right
        return term

    @property
    def is_variable(self):
        return self.kind is Kind.VARIABLE

    @property
    def is_abstraction(self):
        return self.kind is Kind.ABSTRACTION

    @property
    def is_application(self):
        return self.kind is Kind.APPLICATION

    @property
    def is_value(self):
        """Abstractions are the only values."""
        return self.kind is Kind.ABSTRACTION

    def is_invalid(self):
        """Whether or not this term (at top level) is still an unfinished placeholder."""
        if self.kind is Kind.ABSTRACTION:
            return not self.name or self._body is None
        elif self.kind is Kind.VARIABLE:
            return not self.name
        elif self.kind is Kind.APPLICATION:
            return self._left is None or self._right is None
        return True

    def check(self):
        """Raises InvalidTermError if self or any of its sub terms is still a placeholder."""
        if self.is_invalid():
            raise InvalidTermError("'{}' is not a finished term", self.display())
        for sub_term in (self._body, self._left, self._right):
            if sub_term is not None:
                sub_term.check()

    @property
    def body(self):
        if not self.is_abstraction:
            raise InvalidTermError("'{}' is not an abstraction", self.display())
        return self._body

    @property
    def left(self):
        if not self.is_application:
            raise InvalidTermError("'{}' is not an application", self.display())
        return self._left

    @property
    def right(self):
        if not self.is_application:
            raise InvalidTermError("'{}' is not an application", self.display())
        return self._right

    def move_from(self, other):
        """Makes self take over other's contents in place. other is left as an invalid placeholder and must not be
        used afterwards.
        """
        self.kind, self.name, self.index, self.complete = other.kind, other.name, other.index, other.complete
        self._body, self._left, self._right = other._body, other._left, other._right
        other.__init__()

    @staticmethod
    def _moved(term):
        moved = Term()
        moved.move_from(term)
        return moved

    def _wrap_in_application(self, right):
        """self becomes (self right)."""
        self.move_from(Term.application(Term._moved(self), Term._moved(right)))

    def combine(self, term):
        """Folds the freshly parsed term into self:
            - an abstraction without body takes term as its body
            - an incomplete abstraction with a body combines term into its body
            - a complete abstraction, a variable, or an application becomes the left side of an application
            - a placeholder becomes term
        term is moved into self.
        """
        term.check()

        if self.is_abstraction:
            if self._body is None:
                self._body = Term._moved(term)
            elif not self.complete:
                self._body.combine(term)
            else:
                self._wrap_in_application(term)

        elif self.is_variable or self.is_application:
            self._wrap_in_application(term)

        else:
            self.move_from(term)

    def shift(self, distance):
        """Shifts the de Bruijn indices of all free variables in self up by distance (down if negative)."""

        def walk(binding_context_size, term):
            if term.is_variable:
                if term.index >= binding_context_size:
                    term.index += distance
                    assert term.index >= 0, f"shift by {distance} made the index of '{term.name}' negative"
            elif term.is_abstraction and term._body is not None:
                walk(binding_context_size + 1, term._body)
            elif term.is_application and not term.is_invalid():
                walk(binding_context_size, term._left)
                walk(binding_context_size, term._right)
            else:
                raise InvalidTermError("trying to shift an invalid term '{}'", term.display())

        walk(0, self)

    def substitute(self, index, sub):
        """Replaces every variable of self that refers to index with its own copy of sub. Each copy is shifted by the
        number of abstractions between self and the variable it replaces.
        """
        if self.is_invalid() or sub.is_invalid():
            raise InvalidTermError("trying to substitute using invalid terms", self.display())

        def walk(binding_context_size, term):
            if term.is_variable:
                if term.index == index + binding_context_size:
                    replacement = deepcopy(sub)
                    replacement.shift(binding_context_size)
                    term.move_from(replacement)
            elif term.is_abstraction and term._body is not None:
                walk(binding_context_size + 1, term._body)
            elif term.is_application and not term.is_invalid():
                walk(binding_context_size, term._left)
                walk(binding_context_size, term._right)
            else:
                raise InvalidTermError("trying to substitute into an invalid term '{}'", term.display())

        walk(0, self)

    def subst_top(self, argument):
        """Beta-reduces the abstraction self applied to argument: [0 -> argument↑1]body, then shifted down by 1.
        Returns the reduced body. self's body and argument are consumed.
        """
        body = self.body
        if body is None:
            raise InvalidTermError("cannot beta-reduce '{}', it has no body", self.display())
        argument.shift(1)
        body.substitute(0, argument)
        body.shift(-1)
        return body

    def display(self):
        """Debug rendering: [x=0] for variables, {λ x. body} for abstractions, (lhs <- rhs) for applications."""
        if self.is_variable:
            return f"[{self.name}={self.index}]"
        elif self.is_abstraction and self._body is not None:
            return f"{{λ {self.name}. {self._body.display()}}}"
        elif self.is_application and not self.is_invalid():
            return f"({self._left.display()} <- {self._right.display()})"
        return "<ERROR>"

    def __eq__(self, other):
        """Structural equality. Names and de Bruijn indices are compared, the parser-only complete flag is not."""
        if not isinstance(other, Term) or self.kind is not other.kind:
            return False
        if self.is_variable:
            return self.name == other.name and self.index == other.index
        elif self.is_abstraction:
            return self.name == other.name and self._body == other._body
        elif self.is_application:
            return self._left == other._left and self._right == other._right
        return True

    __hash__ = None  # mutable nodes

    def __repr__(self):
        return f"Term('{self.display()}')"

    def __str__(self):
        return self.display()
