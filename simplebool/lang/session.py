"""Session control for the simplebool interpreter: runs a single program through parsing and reduction under an
ErrorHandler.
"""

from simplebool.pure.parser import Parser
from simplebool.pure.reducer import CallByValueReducer


class Session:
    """Governs the run of one program."""

    def __init__(self, error_handler, program, max_steps=None):
        self.error_handler = error_handler
        self.program = program      # used for error messages
        self.max_steps = max_steps  # None reduces until normal form, however long that takes

        self.term = None     # parsed term, reduced in place by run
        self.result = None   # term after reduction
        self.steps = 0

    def run(self):
        """Parses and reduces self.program. Will raise any errors that are encountered."""
        self.error_handler.register_program(self.program)  # in case error is raised

        self.term = Parser(self.program).parse_program()

        reducer = CallByValueReducer(self.term, self.max_steps)
        self.result = reducer.run(self.error_handler)
        self.steps = reducer.steps

        if not reducer.reduced:
            msg = "'{}' was not reduced to normal form in {} steps: it might not have one"
            self.error_handler.warn(msg, (self.program, str(self.steps)), diagnosis=False)

        self.error_handler.remove_program()  # error was not raised
        return self.result
