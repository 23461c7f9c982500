import logging

from basic_ast import statement_to_string
from evalstate import EvalState, Fallthrough, Halt, JumpTo
from evaluator import execute
from lexer import Lexer, TokenType
from parser import Parser
from program import Program
from errors import (
    BasicError, EvaluationTooDeep, ExecutionStopped, InvalidLineNumber, UnknownLine,
)

log = logging.getLogger(__name__)


class Interpreter:
    """
    Runs a Program from its first line until END or the last line.

    With a `step_hook` the run pauses after every statement: the hook is
    called with the line just executed and the run continues when it
    returns. An optional `observer` gets before_execute(line, stmt) and
    after_execute(line, stmt, transfer) notifications.
    """
    def __init__(self, program, io, state=None, step_hook=None, observer=None):
        self.program = program
        self.io = io
        self.state = state if state is not None else EvalState()
        self.step_hook = step_hook
        self.observer = observer
        self.current_line = None
        self.should_stop = False

    def stop(self):
        """Asks the run to finish before it starts the next line."""
        self.should_stop = True

    def _notify(self, method, *args):
        if self.observer is None:
            return
        try:
            getattr(self.observer, method)(*args)
        except Exception:
            log.warning("observer %s failed", method, exc_info=True)

    def _fetch(self, line_num):
        try:
            return self.program.get_statement(line_num)
        except UnknownLine as e:
            # report the line that jumped there, not the missing one
            e.line = self.current_line
            raise

    def run(self):
        line_num = self.program.get_first()
        log.info("run started at line %s", line_num)

        while line_num is not None:
            if self.should_stop:
                raise ExecutionStopped("Execution stopped", line=self.current_line)

            stmt = self._fetch(line_num)
            self.current_line = line_num
            self._notify('before_execute', line_num, stmt)
            try:
                execute(stmt, self.state, self.io)
            except BasicError as e:
                if e.line is None:
                    e.line = line_num
                raise
            except RecursionError:
                raise EvaluationTooDeep("Expression is nested too deeply", line=line_num) from None
            transfer = self.state.take_transfer()
            log.debug("line %d -> %r", line_num, transfer)
            self._notify('after_execute', line_num, stmt, transfer)

            if self.step_hook is not None:
                self.step_hook(line_num)

            if isinstance(transfer, Halt):
                break
            elif isinstance(transfer, JumpTo):
                line_num = transfer.target
            elif isinstance(transfer, Fallthrough):
                line_num = self.program.get_next(line_num)
            else:
                raise TypeError(f"Unknown control transfer: {transfer!r}")

        log.info("run finished")
        return self.state


class Basic:
    """
    An interpreter session: the stored program plus the state of the most
    recent run. Numbered lines edit the program; anything else is returned
    to the caller to be handled as a command.
    """
    def __init__(self):
        self.program = Program()
        self.state = None

    def process_line(self, line):
        """
        Applies one numbered line to the program and returns None, or
        returns the Lexer positioned at the start of a command line.
        """
        lexer = Lexer(line)
        first = lexer.next_token()
        if first.type != TokenType.NUMBER:
            lexer.save_token(first)
            return lexer

        if not first.is_integer() or int(first.value) == 0:
            raise InvalidLineNumber(f"Invalid line number: {first.value}", column=first.column + 1)
        line_num = int(first.value)

        if not lexer.has_more_tokens():
            self.remove_line(line_num)
            return None

        # parse before touching the program so a bad line changes nothing
        try:
            stmt = Parser(lexer).parse_statement()
        except BasicError as e:
            e.line = line_num
            raise
        self.add_line(line_num, line.strip(), stmt)
        return None

    def add_line(self, line_num, text, stmt):
        self.program.add_line(line_num, text, stmt)

    def remove_line(self, line_num):
        self.program.remove_line(line_num)

    def load(self, source):
        """Adds every numbered line of `source` to the program."""
        for line in source.splitlines():
            if not line.strip():
                continue
            command = self.process_line(line)
            if command is not None:
                raise InvalidLineNumber(f"Expected a line number: {line.strip()}")

    def dump(self):
        return "".join(text + "\n" for _, text in self.program.lines())

    def listing(self, start=None, end=None):
        return [text for _, text in self.program.lines(start, end)]

    def run(self, io, step_hook=None, observer=None):
        interpreter = self.interpreter(io, step_hook, observer)
        return interpreter.run()

    def interpreter(self, io, step_hook=None, observer=None):
        """A fresh Interpreter over this program with a new EvalState."""
        self.state = EvalState()
        return Interpreter(self.program, io, self.state, step_hook, observer)

    def clear(self):
        self.program.clear()
        self.state = None


class TraceObserver:
    """Writes a before/after line for each statement to `io`."""
    def __init__(self, io):
        self.io = io

    def before_execute(self, line_num, stmt):
        self.io.write(f"  [{line_num}] {statement_to_string(stmt)}\n")

    def after_execute(self, line_num, stmt, transfer):
        if isinstance(transfer, JumpTo):
            outcome = f"jump to {transfer.target}"
        elif isinstance(transfer, Halt):
            outcome = "halt"
        else:
            outcome = "next line"
        self.io.write(f"  [{line_num}] done, {outcome}\n")
