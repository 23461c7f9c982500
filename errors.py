class BasicError(Exception):
    """Base error for everything the interpreter reports to the user."""
    kind = "Error"

    def __init__(self, message, line=None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self):
        if self.line is not None:
            return f"{self.kind} (line {self.line}): {self.message}"
        return f"{self.kind}: {self.message}"


class BasicSyntaxError(BasicError, SyntaxError):
    kind = "SyntaxError"

    def __init__(self, message, line=None, column=None):
        super().__init__(message, line)
        self.column = column


class InvalidStatement(BasicSyntaxError):
    kind = "InvalidStatement"

class ExtraneousToken(BasicSyntaxError):
    kind = "ExtraneousToken"

class IllegalOperator(BasicSyntaxError):
    kind = "IllegalOperator"

class IllegalTerm(BasicSyntaxError):
    kind = "IllegalTerm"

class UnbalancedParentheses(BasicSyntaxError):
    kind = "UnbalancedParentheses"

class IllegalVariable(BasicSyntaxError):
    kind = "IllegalVariable"

class InvalidLineNumber(BasicSyntaxError):
    kind = "InvalidLineNumber"

class NestingTooDeep(BasicSyntaxError):
    kind = "NestingTooDeep"


class BasicRuntimeError(BasicError):
    kind = "RuntimeError"


class UndefinedVariable(BasicRuntimeError):
    kind = "UndefinedVariable"

    def __init__(self, name, line=None):
        super().__init__(f"{name} is undefined", line)
        self.name = name

class UnknownLine(BasicRuntimeError):
    kind = "UnknownLine"

    def __init__(self, number, line=None):
        super().__init__(f"Line {number} does not exist", line)
        self.number = number

class IllegalAssignmentTarget(BasicRuntimeError):
    kind = "IllegalAssignmentTarget"

class InvalidInput(BasicRuntimeError):
    kind = "InvalidInput"

class ExecutionStopped(BasicRuntimeError):
    kind = "ExecutionStopped"

class EvaluationTooDeep(BasicRuntimeError):
    kind = "EvaluationTooDeep"
