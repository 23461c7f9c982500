from dataclasses import dataclass
from typing import Optional, Tuple, Union

# --- Expressions ---

@dataclass(frozen=True)
class Constant:
    value: float

@dataclass(frozen=True)
class Identifier:
    name: str

@dataclass(frozen=True)
class Compound:
    op: str
    left: "Expression"
    right: "Expression"

Expression = Union[Constant, Identifier, Compound]

ARITHMETIC_OPS = ('+', '-', '*', '/')
ASSIGNMENT_OP = '='

# --- Statements ---

@dataclass(frozen=True)
class RemStatement:
    text: str

@dataclass(frozen=True)
class LetStatement:
    var: str
    expr: Expression

@dataclass(frozen=True)
class PrintStatement:
    literal: Optional[str]
    exprs: Tuple[Expression, ...]

@dataclass(frozen=True)
class InputStatement:
    var: str

@dataclass(frozen=True)
class GotoStatement:
    target: int

@dataclass(frozen=True)
class IfStatement:
    left: Expression
    op: str
    right: Expression
    target: int

@dataclass(frozen=True)
class EndStatement:
    pass

Statement = Union[RemStatement, LetStatement, PrintStatement, InputStatement,
                  GotoStatement, IfStatement, EndStatement]

RELATIONAL_OPS = ('=', '<', '>')


def format_number(value):
    """Renders a value the way PRINT shows it: 1, 2.5, 1e+06."""
    return format(value, 'g')


def to_string(expr):
    if isinstance(expr, Constant):
        return format_number(expr.value)
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, Compound):
        spine = []
        while isinstance(expr, Compound):
            spine.append(expr)
            expr = expr.left
        text = to_string(expr)
        for node in reversed(spine):
            text = f"({text} {node.op} {to_string(node.right)})"
        return text
    raise TypeError(f"Not an expression: {expr!r}")


def statement_to_string(stmt):
    if isinstance(stmt, RemStatement):
        return f"REM {stmt.text}".rstrip()
    if isinstance(stmt, LetStatement):
        return f"LET {stmt.var} = {to_string(stmt.expr)}"
    if isinstance(stmt, PrintStatement):
        parts = []
        if stmt.literal is not None:
            parts.append(f'"{stmt.literal}"')
        parts.extend(to_string(e) for e in stmt.exprs)
        return "PRINT " + ", ".join(parts)
    if isinstance(stmt, InputStatement):
        return f"INPUT {stmt.var}"
    if isinstance(stmt, GotoStatement):
        return f"GOTO {stmt.target}"
    if isinstance(stmt, IfStatement):
        return f"IF {to_string(stmt.left)} {stmt.op} {to_string(stmt.right)} THEN {stmt.target}"
    if isinstance(stmt, EndStatement):
        return "END"
    raise TypeError(f"Not a statement: {stmt!r}")


def ast_to_dict(node, max_depth=None):
    """
    Plain-dict form of an expression or statement, for the JSON API.
    Raises ValueError if the tree is nested deeper than `max_depth`.
    """
    if max_depth is not None and max_depth < 0:
        raise ValueError("Tree is nested too deeply")
    child_depth = None if max_depth is None else max_depth - 1
    result = {"type": type(node).__name__}
    for key, value in node.__dict__.items():
        if value is None:
            continue
        if isinstance(value, (int, str, float, bool)):
            result[key] = value
        elif isinstance(value, tuple):
            result[key] = [ast_to_dict(v, child_depth) for v in value]
        else:
            result[key] = ast_to_dict(value, child_depth)
    return result
