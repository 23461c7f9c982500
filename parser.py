from lexer import Lexer, TokenType
from basic_ast import *
from errors import (
    BasicSyntaxError, ExtraneousToken, IllegalOperator, IllegalTerm,
    IllegalVariable, InvalidStatement, NestingTooDeep, UnbalancedParentheses,
)

PRECEDENCE = {'+': 1, '-': 1, '*': 2, '/': 2}

KEYWORDS = ('REM', 'LET', 'PRINT', 'INPUT', 'GOTO', 'IF', 'END')


def precedence(token):
    if token.type != TokenType.OPERATOR:
        return 0
    return PRECEDENCE.get(token.value, 0)


class Parser:
    def __init__(self, lexer):
        self.lexer = lexer

    def error(self, cls, message, token=None):
        column = token.column + 1 if token is not None else None
        return cls(message, column=column)

    def expect_end(self):
        if self.lexer.has_more_tokens():
            token = self.lexer.next_token()
            raise self.error(ExtraneousToken, f"Extraneous token {token.value}", token)

    # --- Expressions ---

    def read_assignment(self):
        """
        Top-level expression: `target = expr` or a plain arithmetic expression.
        Assignment binds loosest and groups to the right, so `a = b = 3`
        assigns 3 to both. Whether the target is a variable is only checked
        when the expression is evaluated.
        """
        exp = self.read_expression()
        token = self.lexer.next_token()
        if token.is_op(ASSIGNMENT_OP):
            return Compound(ASSIGNMENT_OP, exp, self.read_assignment())
        self.lexer.save_token(token)
        return exp

    def read_expression(self, prec=0):
        """
        Precedence climbing. Reads a term, then keeps absorbing operators
        that bind tighter than `prec`; an operator at or below `prec` is left
        for the caller, which makes equal-precedence chains left-associative.
        A leading '-' is read as 0 - operand.
        """
        token = self.lexer.next_token()
        if token.is_op('-'):
            operand = self.read_expression(max(prec, PRECEDENCE['-']))
            exp = Compound('-', Constant(0.0), operand)
        else:
            self.lexer.save_token(token)
            exp = self.read_term()
        while True:
            token = self.lexer.next_token()
            new_prec = precedence(token)
            if new_prec <= prec:
                break
            rhs = self.read_expression(new_prec)
            exp = Compound(token.value, exp, rhs)
        self.lexer.save_token(token)
        return exp

    def read_term(self):
        token = self.lexer.next_token()
        if token.type == TokenType.WORD:
            return Identifier(token.value)
        if token.type == TokenType.NUMBER:
            return Constant(float(token.value))
        if not token.is_op('('):
            found = token.value or "end of line"
            raise self.error(IllegalTerm, f"Illegal term in expression: {found}", token)
        exp = self.read_assignment()
        closing = self.lexer.next_token()
        if not closing.is_op(')'):
            raise self.error(UnbalancedParentheses, "Unbalanced parentheses in expression", closing)
        return exp

    def parse_expression(self):
        try:
            exp = self.read_assignment()
        except RecursionError:
            raise self.error(NestingTooDeep, "Expression is nested too deeply") from None
        if self.lexer.has_more_tokens():
            token = self.lexer.next_token()
            raise self.error(ExtraneousToken, f"Found extra token: {token.value}", token)
        return exp

    # --- Statements ---

    def read_variable(self):
        token = self.lexer.next_token()
        if token.type != TokenType.WORD:
            found = token.value or "end of line"
            raise self.error(IllegalVariable, f"Expected a variable name, found {found}", token)
        return token.value

    def read_line_number(self):
        token = self.lexer.next_token()
        if not token.is_integer():
            found = token.value or "end of line"
            raise self.error(BasicSyntaxError, f"Expected a line number, found {found}", token)
        return int(token.value)

    def parse_statement(self):
        try:
            return self.read_statement()
        except RecursionError:
            raise self.error(NestingTooDeep, "Expression is nested too deeply") from None

    def read_statement(self):
        token = self.lexer.next_token()
        keyword = token.value.upper() if token.type == TokenType.WORD else None

        if keyword == 'REM':
            return RemStatement(self.lexer.rest_of_line())
        elif keyword == 'LET':
            stmt = self.parse_let()
        elif keyword == 'PRINT':
            stmt = self.parse_print()
        elif keyword == 'INPUT':
            stmt = InputStatement(self.read_variable())
        elif keyword == 'GOTO':
            stmt = GotoStatement(self.read_line_number())
        elif keyword == 'IF':
            stmt = self.parse_if()
        elif keyword == 'END':
            stmt = EndStatement()
        elif token.type == TokenType.WORD:
            # "x = 1" is shorthand for "LET x = 1"
            self.lexer.save_token(token)
            stmt = self.parse_let()
        else:
            found = token.value or "empty statement"
            raise self.error(InvalidStatement, f"Invalid statement: {found}", token)

        self.expect_end()
        return stmt

    def parse_let(self):
        var = self.read_variable()
        op = self.lexer.next_token()
        if not op.is_op(ASSIGNMENT_OP):
            raise self.error(IllegalOperator, f"Illegal operator: {op.value or 'end of line'}", op)
        return LetStatement(var, self.read_assignment())

    def parse_print(self):
        literal = None
        exprs = []
        token = self.lexer.next_token()
        if token.type == TokenType.QUOTE:
            literal = self.read_literal(token)
        else:
            self.lexer.save_token(token)
            exprs.append(self.read_assignment())
        while True:
            token = self.lexer.next_token()
            if not token.is_op(','):
                self.lexer.save_token(token)
                break
            exprs.append(self.read_assignment())
        return PrintStatement(literal, tuple(exprs))

    def read_literal(self, opening):
        """Raw text between `opening` and the next quote marker."""
        first = None
        last = None
        while True:
            token = self.lexer.next_token()
            if token.type == TokenType.EOF:
                raise self.error(BasicSyntaxError, "Missing closing quote", opening)
            if token.type == TokenType.QUOTE:
                break
            if first is None:
                first = token
            last = token
        if first is None:
            return ""
        return self.lexer.source_between(first, last)

    def parse_if(self):
        left = self.read_expression()
        op = self.lexer.next_token()
        if not op.is_op(*RELATIONAL_OPS):
            raise self.error(IllegalOperator, f"Illegal comparison operator: {op.value or 'end of line'}", op)
        right = self.read_expression()
        then = self.lexer.next_token()
        if not then.is_keyword('THEN'):
            raise self.error(BasicSyntaxError, f"Expected THEN, found {then.value or 'end of line'}", then)
        target = self.read_line_number()
        return IfStatement(left, op.value, right, target)


def parse_expression(source):
    """Parses a complete expression from a string or a Lexer."""
    lexer = source if isinstance(source, Lexer) else Lexer(source)
    return Parser(lexer).parse_expression()


def parse_statement(source):
    """Parses one statement (the text after the line number)."""
    lexer = source if isinstance(source, Lexer) else Lexer(source)
    return Parser(lexer).parse_statement()
