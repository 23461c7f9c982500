#!/usr/bin/env python3
"""
Interactive BASIC command loop.

Numbered lines edit the stored program; everything else is a command:
RUN, DEBUG, LIST [a[-b]], CLEAR, SAVE [file], OLD [file], HELP, QUIT.
"""
import logging
import sys

from config import get_settings
from errors import BasicError, BasicSyntaxError
from interpreter import Basic, TraceObserver

log = logging.getLogger(__name__)

HELP_TEXT = """\
Each line of code begins with a line number; the statement after it is
stored and the program runs in line-number order. A line number on its
own deletes that line.

Commands:
  RUN            Runs the stored program
  DEBUG          Runs the program one line at a time (Enter to continue)
  LIST [a[-b]]   Lists the program, or lines a to b
  CLEAR          Deletes the stored program
  SAVE [file]    Saves the program to a text file
  OLD [file]     Loads a program from a text file
  HELP           Shows this message
  QUIT           Exits the interpreter

Statements:
  REM text                     Comment
  LET var = exp                Assignment (LET may be left out)
  PRINT exp, ...               Prints values; may start with "text"
  INPUT var                    Reads a number into var
  GOTO n                       Continues at line n
  IF exp1 op exp2 THEN n       op is =, < or >; jumps to n when true
  END                          Halts the program
"""


class ConsoleIO:
    def write(self, text):
        print(text, end="", flush=True)

    def input(self, prompt=""):
        return input(prompt)


class Console:
    def __init__(self, io=None, session=None):
        self.io = io or ConsoleIO()
        self.session = session or Basic()
        self.running = True

    def process(self, line):
        """Handles one submitted line; errors are reported, never raised."""
        try:
            lexer = self.session.process_line(line)
            if lexer is not None and lexer.has_more_tokens():
                self.command(lexer)
        except BasicError as e:
            self.io.write(f"Error: {e}\n")
        except OSError as e:
            self.io.write(f"Error: {e}\n")

    def command(self, lexer):
        token = lexer.next_token()
        name = token.value.upper()
        args = lexer.rest_of_line().strip()
        log.debug("command %s %s", name, args)

        if name == 'RUN':
            self.session.run(self.io)
        elif name == 'DEBUG':
            self.session.run(self.io, step_hook=self.wait_for_step,
                             observer=TraceObserver(self.io))
        elif name == 'LIST':
            start, end = parse_range(args)
            for text in self.session.listing(start, end):
                self.io.write(text + "\n")
        elif name == 'CLEAR':
            self.session.clear()
        elif name == 'SAVE':
            self.save(args or self.io.input("Choose filename: ").strip())
        elif name in ('OLD', 'LOAD'):
            self.load(args or self.io.input("Enter filename containing code: ").strip())
        elif name == 'HELP':
            self.io.write(HELP_TEXT)
        elif name == 'QUIT':
            self.running = False
        else:
            raise BasicSyntaxError(f"Invalid command: {token.value}. Type HELP for help.")

    def wait_for_step(self, line_num):
        self.io.input(f"-- line {line_num} executed, press Enter --")

    def save(self, filename):
        with open(filename, 'w') as f:
            f.write(self.session.dump())
        self.io.write("Program saved.\n")

    def load(self, filename):
        with open(filename) as f:
            source = f.read()
        self.session.load(source)
        self.io.write("Program loaded -- Type LIST to view.\n")

    def loop(self):
        self.io.write("BASIC interpreter -- Type HELP for help\n\n")
        while self.running:
            try:
                line = self.io.input("=> ")
            except EOFError:
                break
            except KeyboardInterrupt:
                self.io.write("\n")
                continue
            try:
                self.process(line)
            except KeyboardInterrupt:
                # Ctrl-C during RUN or INPUT ends the run, not the session
                self.io.write("\nError: Execution stopped\n")


def parse_range(args):
    """'50-80' -> (50, 80), '50' -> (50, None), '' -> (None, None)."""
    if not args:
        return None, None
    start, sep, end = args.partition('-')
    try:
        first = int(start) if start.strip() else None
        last = int(end) if end.strip() else None
    except ValueError:
        raise BasicSyntaxError(f"Invalid LIST range: {args}") from None
    return first, last


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    console = Console()
    for filename in argv:
        console.process(f"OLD {filename}")
    console.loop()


if __name__ == "__main__":
    main()
