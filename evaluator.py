import logging
import math

from basic_ast import *
from evalstate import FALLTHROUGH, HALT, JumpTo
from errors import IllegalAssignmentTarget, InvalidInput

log = logging.getLogger(__name__)


def _divide(left, right):
    # IEEE-754 semantics instead of ZeroDivisionError
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def evaluate(expr, state):
    if isinstance(expr, Constant):
        return expr.value
    elif isinstance(expr, Identifier):
        return state.get_value(expr.name)
    elif isinstance(expr, Compound):
        if expr.op == ASSIGNMENT_OP:
            if not isinstance(expr.left, Identifier):
                raise IllegalAssignmentTarget(
                    f"Illegal variable in assignment: {to_string(expr.left)}")
            value = evaluate(expr.right, state)
            state.set_value(expr.left.name, value)
            return value

        # walk the left spine in a loop; "1+1+...+1" nests one level per operator
        spine = []
        node = expr
        while isinstance(node, Compound) and node.op != ASSIGNMENT_OP:
            spine.append(node)
            node = node.left
        value = evaluate(node, state)
        for node in reversed(spine):
            value = _apply(node.op, value, evaluate(node.right, state))
        return value
    else:
        raise TypeError(f"Not an expression: {expr!r}")


def _apply(op, left_val, right_val):
    if op == '+': return left_val + right_val
    if op == '-': return left_val - right_val
    if op == '*': return left_val * right_val
    if op == '/': return _divide(left_val, right_val)
    raise ValueError(f"Illegal operator in expression: {op}")


def evaluate_condition(left, op, right, state):
    # both sides are always evaluated, they may assign
    left_val = evaluate(left, state)
    right_val = evaluate(right, state)

    if op == '=': return left_val == right_val
    if op == '<': return left_val < right_val
    if op == '>': return left_val > right_val
    raise ValueError(f"Illegal comparison operator: {op}")


def parse_number(text):
    try:
        return float(str(text).strip())
    except ValueError:
        raise InvalidInput(f"Expected a number, got {text!r}") from None


def execute(stmt, state, io):
    """
    Runs one statement against `state`, talking to the outside world
    through `io` (an object with write(text) and input(prompt)). Every
    branch sets the control transfer exactly once.
    """
    if isinstance(stmt, RemStatement):
        state.set_transfer(FALLTHROUGH)

    elif isinstance(stmt, LetStatement):
        state.set_value(stmt.var, evaluate(stmt.expr, state))
        state.set_transfer(FALLTHROUGH)

    elif isinstance(stmt, PrintStatement):
        parts = []
        if stmt.literal is not None:
            parts.append(stmt.literal)
        for expr in stmt.exprs:
            parts.append(format_number(evaluate(expr, state)))
        io.write(" ".join(parts) + "\n")
        state.set_transfer(FALLTHROUGH)

    elif isinstance(stmt, InputStatement):
        value = parse_number(io.input(f"{stmt.var} ? "))
        state.set_value(stmt.var, value)
        log.debug("input %s = %s", stmt.var, format_number(value))
        state.set_transfer(FALLTHROUGH)

    elif isinstance(stmt, GotoStatement):
        state.set_transfer(JumpTo(stmt.target))

    elif isinstance(stmt, IfStatement):
        if evaluate_condition(stmt.left, stmt.op, stmt.right, state):
            state.set_transfer(JumpTo(stmt.target))
        else:
            state.set_transfer(FALLTHROUGH)

    elif isinstance(stmt, EndStatement):
        state.set_transfer(HALT)

    else:
        raise TypeError(f"Unknown statement: {stmt!r}")
