"""Error handling for the simplebool interpreter. Only GenericExceptions should be encountered during running: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Taxonomy:
    - LexicalError: invalid character sequence in the program text (ex: a bare '-')
    - ParseError: token sequence does not follow the grammar (missing ':', '.', ')', unmatched parens, ...)
    - InvalidTermError: a term still under construction was used where a finished term was required
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a simplebool error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.raw_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.raw_msg)


class LexicalError(GenericException):
    """Raised by the lexer on an invalid token. text is the offending text, pos its offset in program."""

    def __init__(self, text, program="", pos=0):
        self.text = text
        if program:
            super().__init__("invalid token '{}' in '{}'", (text, program), start=pos, end=pos + len(text))
            self.expr = program
        else:
            super().__init__("invalid token '{}'", text)


class ParseError(GenericException):
    """Raised by the parser when the token sequence does not follow the grammar.

    expected-close-paren is reserved: the stack parser reports a missing ')' as unmatched-parenthesis.
    """
    REASONS = (
        "expected-variable",
        "expected-colon",
        "expected-bool-keyword",
        "expected-arrow",
        "expected-dot",
        "expected-close-paren",
        "unexpected-token",
        "unmatched-parenthesis",
    )

    def __init__(self, reason, msg, exprs=None, **kwargs):
        assert reason in ParseError.REASONS, f"unknown parse error reason '{reason}'"
        self.reason = reason
        super().__init__(msg, exprs, **kwargs)


class InvalidTermError(GenericException):
    """Raised when an operation receives a term in the invalid (placeholder) state."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("internal", True)
        super().__init__(msg, exprs, **kwargs)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom simplebool errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose

        self.program = None  # program text currently being run, if any
        self.steps = []      # (rule, rendered term) for each registered reduction step
        self.errors = []     # errors thrown while not fatal

    def register_program(self, program):
        """Registers program so that errors can be diagnosed against it. Should be called prior to Session run."""
        self.program = program
        self.steps = []

    def remove_program(self):
        """Removes program from the handler. Should be called after a successful Session run."""
        self.program = None

    def register_step(self, rule, term):
        """Records a single reduction step. rule is the symbol of the applied rule, term the term after the step."""
        rendered = term.display() if hasattr(term, "display") else str(term)
        self.steps.append((rule, rendered))

        if self.verbose:
            print(colored(f"{len(self.steps):>4} {rule} ", ErrorHandler.STEP, attrs=["bold"]) + rendered)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        return colored("<program>: ", attrs=["bold"]) if self.program is not None else ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = self._location()
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error, which must be a GenericException. Exits if self.fatal, otherwise records error."""
        error_msg = self._location()

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

        self.errors.append(error)
        self.program = None  # if error occurred, reset program (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("term is nested too deeply: maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
