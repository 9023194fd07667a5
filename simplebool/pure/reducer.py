"""Call-by-value small-step evaluation.

Evaluation rules, tried in order (v is a value, i.e. an abstraction):

```
(λx. t) v  ->  [x -> v]t          ; E-AppAbs: beta-reduction, see Term.subst_top
v t        ->  v t'   if t -> t'  ; E-App2
t1 t2      ->  t1' t2 if t1 -> t1'; E-App1
```

Nothing reduces inside an abstraction's body. A term none of the rules apply to is in normal form.

Source: Pierce, Types and Programming Languages, §5.3 (Figure 5-3) and §6.3
"""


def _step(term):
    """Performs a single reduction step in place. Returns whether or not a rule applied."""
    if term.is_application and term.left.is_abstraction and term.right.is_value:
        term.move_from(term.left.subst_top(term.right))
        return True
    elif term.is_application and term.left.is_value:
        return _step(term.right)
    elif term.is_application:
        return _step(term.left)
    return False


def _reducible(term):
    """Whether or not _step would apply a rule to term, without changing it."""
    if term.is_application and term.left.is_abstraction and term.right.is_value:
        return True
    elif term.is_application and term.left.is_value:
        return _reducible(term.right)
    elif term.is_application:
        return _reducible(term.left)
    return False


class CallByValueReducer:
    """Reduces a syntax tree to normal form in place, one step at a time."""
    STEP_LIMIT = None  # no limit: reduction of a term without a normal form never ends

    def __init__(self, term, max_steps=None):
        self.term = term
        self.max_steps = max_steps if max_steps is not None else CallByValueReducer.STEP_LIMIT

        self.steps = 0
        self.reduced = False  # whether or not self.term is known to be in normal form

    def step(self, error_handler=None):
        """Performs one reduction step. Returns False if self.term is already in normal form."""
        if not _step(self.term):
            self.reduced = True
            return False

        self.steps += 1
        if error_handler is not None:
            error_handler.register_step("β", self.term)
        return True

    def run(self, error_handler=None):
        """Steps self.term until it is in normal form or self.max_steps steps were taken, then returns it."""
        self.term.check()

        while self.max_steps is None or self.steps < self.max_steps:
            if not self.step(error_handler):
                break

        self.reduced = not _reducible(self.term)
        return self.term

    def __repr__(self):
        return f"{type(self).__name__}({repr(self.term)}, steps={self.steps})"


def step(term):
    """Performs a single call-by-value reduction step on term in place. Returns whether or not a rule applied."""
    term.check()
    return _step(term)


def run(term, max_steps=None):
    """Reduces term in place until no rule applies (or max_steps steps were taken) and returns it."""
    return CallByValueReducer(term, max_steps).run()
