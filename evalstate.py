"""
Evaluation state: variable bindings plus the register a statement uses
to tell the engine where execution continues.
"""
from dataclasses import dataclass

from errors import UndefinedVariable


class Fallthrough:
    """Continue with the next stored line."""
    def __repr__(self):
        return "FALLTHROUGH"

class Halt:
    """Stop the run."""
    def __repr__(self):
        return "HALT"

@dataclass(frozen=True)
class JumpTo:
    """Continue at `target`, wherever it sits relative to the current line."""
    target: int

FALLTHROUGH = Fallthrough()
HALT = Halt()


class EvalState:
    def __init__(self):
        self.variables = {}
        self._transfer = None

    def set_value(self, name, value):
        self.variables[name] = float(value)

    def get_value(self, name):
        if name not in self.variables:
            raise UndefinedVariable(name)
        return self.variables[name]

    def is_defined(self, name):
        return name in self.variables

    def set_transfer(self, transfer):
        if self._transfer is not None:
            raise AssertionError(f"control transfer already set to {self._transfer!r}")
        self._transfer = transfer

    def take_transfer(self):
        """Returns the pending control transfer and clears the register."""
        transfer = self._transfer
        if transfer is None:
            raise AssertionError("statement finished without setting a control transfer")
        self._transfer = None
        return transfer

    def reset(self):
        self.variables.clear()
        self._transfer = None
