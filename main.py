from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from typing import List, Dict, Any, Optional
import asyncio
import logging
import os
import queue

from basic_ast import ast_to_dict, statement_to_string
from config import get_settings
from errors import BasicError, BasicRuntimeError, ExecutionStopped
from evalstate import Halt, JumpTo
from interpreter import Basic
from lexer import Lexer
from parser import Parser

log = logging.getLogger(__name__)

# deeper trees are left out of /api/compile responses
AST_MAX_DEPTH = 200

app = FastAPI(title="BASIC Interpreter IDE", version="1.0.0")

# --- Data models ---
class CodeRequest(BaseModel):
    code: str

class RunRequest(BaseModel):
    code: str
    inputs: List[str] = []

class RunResult(BaseModel):
    success: bool
    output: List[str] = []
    variables: Dict[str, float] = {}
    error: Optional[Dict[str, Any]] = None


def error_dict(e: BasicError) -> Dict[str, Any]:
    return {"kind": e.kind, "message": e.message, "line": e.line}


def wait_timeout(seconds):
    """Settings use 0 or None for "wait forever"."""
    return seconds or None


def load_program(code: str) -> Basic:
    session = Basic()
    session.load(code)
    return session

# --- Console bridges ---

class BufferedIO:
    """Collects output lines and answers INPUT from a fixed list."""
    def __init__(self, inputs):
        self.inputs = list(inputs)
        self.output = []

    def write(self, text):
        self.output.extend(text.splitlines())

    def input(self, prompt=""):
        if not self.inputs:
            raise BasicRuntimeError(f"No input left for prompt '{prompt.strip()}'")
        return self.inputs.pop(0)


class WebConsole:
    """
    Console for a run happening in a worker thread. Output and prompts are
    sent over the websocket on the event loop; INPUT and step pauses block
    the worker until the client answers.
    """
    def __init__(self, websocket: WebSocket, loop, settings):
        self.websocket = websocket
        self.loop = loop
        self.settings = settings
        self.inputs = queue.Queue()
        self.steps = queue.Queue()
        self.waiting_for_input = False

    def send(self, message):
        asyncio.run_coroutine_threadsafe(self.websocket.send_json(message), self.loop).result()

    def write(self, text):
        for line in text.splitlines():
            self.send({"type": "output", "data": line})

    def input(self, prompt=""):
        self.waiting_for_input = True
        self.send({"type": "input_request", "message": prompt})
        try:
            value = self.inputs.get(timeout=wait_timeout(self.settings.input_timeout))
        except queue.Empty:
            raise BasicRuntimeError("Timed out waiting for input") from None
        finally:
            self.waiting_for_input = False
        if value is None:
            raise ExecutionStopped("Execution stopped while waiting for input")
        return value

    def wait_for_step(self, line_num):
        self.send({"type": "step", "line": line_num})
        try:
            ack = self.steps.get(timeout=wait_timeout(self.settings.step_timeout))
        except queue.Empty:
            raise BasicRuntimeError("Timed out waiting for the next step") from None
        if ack is None:
            raise ExecutionStopped("Execution stopped")

    def provide_input(self, value):
        if self.waiting_for_input:
            self.inputs.put(value)

    def acknowledge_step(self):
        self.steps.put(True)

    def close(self):
        self.inputs.put(None)
        self.steps.put(None)


class WebTracer:
    """Sends before/after notifications with the variables after each line."""
    def __init__(self, console: WebConsole, state):
        self.console = console
        self.state = state

    def before_execute(self, line_num, stmt):
        self.console.send({"type": "executing", "line": line_num,
                           "statement": statement_to_string(stmt)})

    def after_execute(self, line_num, stmt, transfer):
        if isinstance(transfer, JumpTo):
            next_line = transfer.target
        elif isinstance(transfer, Halt):
            next_line = None
        else:
            next_line = "next"
        self.console.send({"type": "executed", "line": line_num, "next": next_line,
                           "variables": dict(self.state.variables)})

# --- Execution ---

async def handle_basic_execution(websocket: WebSocket, code: str, debug: bool):
    settings = get_settings()
    loop = asyncio.get_running_loop()
    console = WebConsole(websocket, loop, settings)
    interpreter = None

    async def message_handler():
        try:
            while True:
                data = await websocket.receive_json()
                if data.get("type") == "input":
                    console.provide_input(str(data.get("value", "")))
                elif data.get("type") == "step":
                    console.acknowledge_step()
                elif data.get("type") == "stop":
                    if interpreter: interpreter.stop()
                    console.close()
                    break
        except WebSocketDisconnect:
            if interpreter: interpreter.stop()
            console.close()

    try:
        session = load_program(code)
        step_hook = console.wait_for_step if debug else None
        interpreter = session.interpreter(console, step_hook=step_hook)
        if debug:
            interpreter.observer = WebTracer(console, interpreter.state)
        await websocket.send_json({"type": "execution_started", "debug": debug})
        message_task = asyncio.create_task(message_handler())
        try:
            state = await loop.run_in_executor(None, interpreter.run)
        finally:
            message_task.cancel()
            await asyncio.gather(message_task, return_exceptions=True)
        await websocket.send_json({"type": "execution_finished", "success": True,
                                   "variables": dict(state.variables)})
    except BasicError as e:
        log.info("execution failed: %s", e)
        await websocket.send_json({"type": "execution_finished", "success": False,
                                   "error": error_dict(e)})

# --- API endpoints ---
@app.websocket("/api/execute-interactive")
async def execute_interactive(websocket: WebSocket):
    await websocket.accept()
    try:
        request = await websocket.receive_json()
        await handle_basic_execution(websocket, request.get("code", ""), bool(request.get("debug", False)))
    except WebSocketDisconnect: pass
    except Exception as e:
        log.exception("interactive execution crashed")
        try: await websocket.send_json({"type": "error", "message": f"{type(e).__name__}: {e}"})
        except RuntimeError: pass


@app.post("/api/compile")
async def compile_code(request: CodeRequest):
    lines = []
    errors = []
    for text in request.code.splitlines():
        if not text.strip():
            continue
        lexer = Lexer(text)
        first = lexer.next_token()
        entry = {"source": text.strip()}
        try:
            if not first.is_integer():
                raise BasicError(f"Expected a line number: {text.strip()}")
            entry["line"] = int(first.value)
            if lexer.has_more_tokens():
                stmt = Parser(lexer).parse_statement()
                try:
                    entry["ast"] = ast_to_dict(stmt, max_depth=AST_MAX_DEPTH)
                except ValueError:
                    log.info("line %d is too deep to send as a tree", entry["line"])
                entry["statement"] = statement_to_string(stmt)
        except BasicError as e:
            if e.line is None:
                e.line = entry.get("line")
            entry["error"] = error_dict(e)
            errors.append(str(e))
        lines.append(entry)
    return {"success": not errors, "lines": lines, "errors": errors}


@app.post("/api/run", response_model=RunResult)
async def run_code(request: RunRequest):
    settings = get_settings()
    io = BufferedIO(request.inputs)
    session = Basic()
    try:
        session.load(request.code)
        interpreter = session.interpreter(io)
        future = asyncio.get_running_loop().run_in_executor(None, interpreter.run)
        try:
            state = await asyncio.wait_for(future, timeout=wait_timeout(settings.run_timeout))
        except asyncio.TimeoutError:
            # the worker thread notices before its next line and exits
            interpreter.stop()
            raise ExecutionStopped(f"Run did not finish within {settings.run_timeout:g} s",
                                   line=interpreter.current_line) from None
    except BasicError as e:
        return RunResult(success=False, output=io.output, error=error_dict(e),
                         variables=dict(session.state.variables) if session.state else {})
    return RunResult(success=True, output=io.output, variables=dict(state.variables))


@app.get("/api/examples")
async def get_examples():
    return {
        "sum": {"name": "Sum", "code": "10 REM Sum of two numbers\n20 INPUT a\n30 INPUT b\n40 LET c = a + b\n50 PRINT c\n60 END"},
        "comparison": {"name": "Larger of two", "code": "10 REM Prints the larger number\n20 INPUT a\n30 INPUT b\n40 IF a > b THEN 70\n50 PRINT b\n60 GOTO 80\n70 PRINT a\n80 END"},
        "countdown": {"name": "Countdown", "code": "10 n = 5\n20 PRINT \"n is\", n\n30 n = n - 1\n40 IF n > 0 THEN 20\n50 PRINT \"liftoff\"\n60 END"},
    }

# --- App setup ---
_static_dir = get_settings().static_dir
if os.path.isdir(_static_dir):
    app.mount("/", StaticFiles(directory=_static_dir, html=True), name="static")
