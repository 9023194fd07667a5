"""Simply typed lambda calculus (with a single base type, Bool) token generator.

The `pure` directory contains the core of the interpreter: tokens, terms, parser and reducer.

Formally, the token grammar can be defined as

```
<token> ::= "l"                 ; "abstraction" keyword (stands in for λ)
          | "Bool"              ; the only base type
          | "." | "(" | ")" | ":"
          | "->"                ; type arrow
          | <name>              ; "variable": any run of characters that are neither whitespace nor separators
```

Whitespace and the separators ` . ( ) : -` end a name. Since reading a name has to consume the separator that ends it,
the Lexer keeps that separator's token as a one token lookahead and hands it out on the following call.
"""

from dataclasses import dataclass, field
from enum import Enum

from simplebool.lang.error import LexicalError


class Category(Enum):
    VARIABLE = "variable"
    ABSTRACTION = "abstraction"
    ABSTRACTION_DOT = "abstraction dot"
    OPEN_PAREN = "open paren"
    CLOSE_PAREN = "close paren"
    COLON = "colon"
    ARROW = "arrow"
    BOOL_KEYWORD = "Bool keyword"
    END = "end"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    """Lexical token. text is only meaningful for VARIABLE and INVALID tokens, pos is the offset of the token's first
    character in the program text.
    """
    category: Category
    text: str = ""
    pos: int = field(default=0, compare=False)

    SOURCE = {
        Category.ABSTRACTION: "l",
        Category.ABSTRACTION_DOT: ".",
        Category.OPEN_PAREN: "(",
        Category.CLOSE_PAREN: ")",
        Category.COLON: ":",
        Category.ARROW: "->",
        Category.BOOL_KEYWORD: "Bool",
        Category.END: "<END>",
    }
    SYMBOLS = {Category.ABSTRACTION: "λ", Category.BOOL_KEYWORD: "Ɓ", Category.ARROW: "→"}

    @property
    def symbol(self):
        """Display glyph of this token (λ, Ɓ, →), falls back to its source form."""
        return Token.SYMBOLS.get(self.category, str(self))

    def __str__(self):
        if self.category in (Category.VARIABLE, Category.INVALID):
            return self.text
        return Token.SOURCE[self.category]


class Lexer:
    """Lazily turns program text into Tokens, one next_token call at a time."""
    LAMBDA = "l"
    BOOL = "Bool"
    SEPARATORS = " .():-"
    PUNCTUATION = {
        ".": Category.ABSTRACTION_DOT,
        "(": Category.OPEN_PAREN,
        ")": Category.CLOSE_PAREN,
        ":": Category.COLON,
    }

    def __init__(self, program):
        self.program = program
        self.pos = 0
        self.cached = None  # lookahead token that ended the previous name

    @staticmethod
    def is_separator(char):
        """Whether or not char ends a name."""
        return char in Lexer.SEPARATORS or char.isspace()

    def next_token(self):
        """Returns the next Token, or an END token once program is exhausted. Raises LexicalError on invalid tokens."""
        if self.cached is not None:
            token, self.cached = self.cached, None
            return self._check(token)

        while self.pos < len(self.program) and self.program[self.pos].isspace():
            self.pos += 1

        if self.pos >= len(self.program):
            return Token(Category.END, pos=self.pos)

        start = self.pos
        while self.pos < len(self.program) and not Lexer.is_separator(self.program[self.pos]):
            self.pos += 1

        if start == self.pos:
            return self._check(self._punctuation())

        token = self._classify(self.program[start:self.pos], start)

        # the name run stopped at a separator: keep its token for the next call
        if self.pos < len(self.program) and not self.program[self.pos].isspace():
            self.cached = self._punctuation()

        return token

    def _classify(self, name, pos):
        if name == Lexer.LAMBDA:
            return Token(Category.ABSTRACTION, pos=pos)
        elif name == Lexer.BOOL:
            return Token(Category.BOOL_KEYWORD, pos=pos)
        return Token(Category.VARIABLE, name, pos)

    def _punctuation(self):
        """Reads the separator at self.pos (which must not be whitespace) into a Token."""
        start = self.pos
        char = self.program[start]
        self.pos += 1

        if char in Lexer.PUNCTUATION:
            return Token(Lexer.PUNCTUATION[char], pos=start)

        if self.program[self.pos:self.pos + 1] == ">":
            self.pos += 1
            return Token(Category.ARROW, pos=start)
        return Token(Category.INVALID, "-", start)

    def _check(self, token):
        if token.category is Category.INVALID:
            raise LexicalError(token.text, self.program, token.pos)
        return token

    def __iter__(self):
        """Yields Tokens up to (not including) END."""
        token = self.next_token()
        while token.category is not Category.END:
            yield token
            token = self.next_token()
