import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import tempfile
import unittest
from io import StringIO
from unittest.mock import patch

from console import Console, ConsoleIO, parse_range
from errors import BasicSyntaxError


class ScriptedIO:
  def __init__(self, *inputs):
    self.inputs = list(inputs)
    self.text = ""

  def write(self, text):
    self.text += text

  def input(self, prompt=""):
    if not self.inputs:
      raise EOFError
    return self.inputs.pop(0)


class InterruptingIO(ScriptedIO):
  """Raises queued exception classes in place of input."""
  def input(self, prompt=""):
    value = super().input(prompt)
    if isinstance(value, type):
      raise value
    return value


class Test(unittest.TestCase):
  def setUp(self):
    self.io = ScriptedIO()
    self.console = Console(self.io)

  def submit(self, *lines):
    for line in lines:
      self.console.process(line)
    return self.io.text

  def test_edit_and_run(self):
    out = self.submit("20 PRINT x * 2", "10 x = 21", "run")
    self.assertEqual(out, "42\n")

  def test_list(self):
    out = self.submit("30 END", "10 REM start", "20 PRINT 1", "LIST")
    self.assertEqual(out, "10 REM start\n20 PRINT 1\n30 END\n")

  def test_list_range(self):
    out = self.submit("10 END", "50 END", "60 END", "90 END", "LIST 50-60")
    self.assertEqual(out, "50 END\n60 END\n")

  def test_errors_do_not_stop_the_session(self):
    out = self.submit("10 PRINT (1", "FOO", "10 PRINT 1", "RUN")
    lines = out.splitlines()
    self.assertTrue(lines[0].startswith("Error: UnbalancedParentheses (line 10)"))
    self.assertTrue(lines[1].startswith("Error: SyntaxError: Invalid command: FOO"))
    self.assertEqual(lines[2], "1")

  def test_runtime_error_reported(self):
    out = self.submit("10 GOTO 99", "RUN")
    self.assertEqual(out, "Error: UnknownLine (line 10): Line 99 does not exist\n")

  def test_clear(self):
    out = self.submit("10 PRINT 1", "CLEAR", "LIST", "RUN")
    self.assertEqual(out, "")

  def test_debug_waits_between_lines(self):
    self.io.inputs = ["", ""]
    out = self.submit("10 PRINT 1", "20 END", "DEBUG")
    self.assertIn("  [10] PRINT 1\n1\n  [10] done, next line\n", out)
    self.assertEqual(self.io.inputs, [])

  def test_save_and_old(self):
    with tempfile.TemporaryDirectory() as tmp:
      path = os.path.join(tmp, "prog.bas")
      self.submit("20 PRINT 2", "10 PRINT 1", f"SAVE {path}")
      with open(path) as f:
        self.assertEqual(f.read(), "10 PRINT 1\n20 PRINT 2\n")
      other = Console(ScriptedIO())
      other.process(f"OLD {path}")
      other.process("RUN")
      self.assertEqual(other.io.text, "Program loaded -- Type LIST to view.\n1\n2\n")

  def test_missing_file(self):
    out = self.submit("OLD /nonexistent/prog.bas")
    self.assertTrue(out.startswith("Error:"))

  def test_help_and_quit(self):
    out = self.submit("help")
    self.assertIn("IF exp1 op exp2 THEN n", out)
    self.submit("QUIT")
    self.assertFalse(self.console.running)

  def test_loop_ends_on_eof(self):
    self.io.inputs = ["10 PRINT 7", "RUN"]
    self.console.loop()
    self.assertTrue(self.io.text.endswith("7\n"))

  def test_non_ascii_digits_are_reported(self):
    out = self.submit("10 PRINT ²", "² PRINT 1", "1² PRINT 1", "10 PRINT 1", "RUN")
    lines = out.splitlines()
    self.assertEqual(len(lines), 4)
    self.assertTrue(lines[0].startswith("Error: IllegalTerm (line 10)"))
    self.assertTrue(lines[1].startswith("Error: SyntaxError: Invalid command: ²"))
    self.assertTrue(lines[2].startswith("Error: InvalidStatement (line 1)"))
    self.assertEqual(lines[3], "1")

  def test_deep_nesting_is_reported(self):
    out = self.submit("10 PRINT " + "(" * 5000 + "1" + ")" * 5000, "LIST")
    self.assertTrue(out.startswith("Error: NestingTooDeep (line 10)"))
    self.assertEqual(len(out.splitlines()), 1)

  def test_interrupt_stops_run_not_session(self):
    self.io = InterruptingIO("10 INPUT a", "20 PRINT a", "RUN", KeyboardInterrupt,
                             "RUN", "5", KeyboardInterrupt)
    self.console = Console(self.io)
    self.console.loop()
    self.assertEqual(self.io.text, "BASIC interpreter -- Type HELP for help\n\n"
                                   "\nError: Execution stopped\n5\n\n")
    self.assertEqual(self.io.inputs, [])

  @patch('sys.stdout', new_callable=StringIO)
  def test_console_io_prints(self, mock_stdout):
    ConsoleIO().write("hello\n")
    self.assertEqual(mock_stdout.getvalue(), "hello\n")


class ParseRangeTest(unittest.TestCase):
  def test_forms(self):
    self.assertEqual(parse_range(""), (None, None))
    self.assertEqual(parse_range("50"), (50, None))
    self.assertEqual(parse_range("50-80"), (50, 80))
    self.assertEqual(parse_range("-80"), (None, 80))

  def test_invalid(self):
    with self.assertRaises(BasicSyntaxError):
      parse_range("a-b")


if __name__ == '__main__':
    unittest.main()
