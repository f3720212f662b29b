"""
Code Execution: Runs a Python script in a freshly spawned interpreter.

Each call gets its own process. The script body is piped to the
interpreter's stdin, never interpolated into argv. Two limits apply:
  1. Wall-clock timeout - the process is killed when it elapses
  2. Output ceiling - combined stdout+stderr bytes; the process is killed
     as soon as the ceiling is crossed

On Unix the script runs in its own session, so killing it also kills any
processes it started. Leftover background processes are killed when the
script exits, since they would otherwise hold the output pipes open.

There is no filesystem, network or privilege isolation. The child inherits
the caller's environment.
"""

import logging
import os
import signal
import subprocess
import threading
from typing import Any, BinaryIO, Dict, List, Optional

from pydantic import BaseModel, Field

from agent_tools.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Process groups are Unix-only; elsewhere only the direct child is killed
HAS_KILLPG = hasattr(os, "killpg")

# Makes the interpreter read its program text from stdin
STDIN_BOOTSTRAP = "import sys; exec(sys.stdin.read())"

DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_MAX_BUFFER_BYTES = 10 * 1024 * 1024

NONZERO_EXIT_ERROR = "script exited with error"
DEFAULT_STDERR = "unknown error occurred"
UNKNOWN_FAILURE = "code execution failed due to an unknown error"

_READ_CHUNK_SIZE = 64 * 1024
_JOIN_TIMEOUT_SECONDS = 5


class CodeExecutionInput(BaseModel):
    """Arguments accepted by the execute_code tool."""

    code: str = Field(description="Python code to execute")


class ExecutionResult:
    """Outcome of one script run. Absent fields are left out of to_dict()."""

    __slots__ = ("stdout", "stderr", "exit_code", "error")

    def __init__(
        self,
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
        exit_code: Optional[int] = None,
        error: Optional[str] = None,
    ):
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code
        self.error = error

    @classmethod
    def failure(cls, error: str) -> "ExecutionResult":
        return cls(error=error)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "error": self.error,
        }
        return {k: v for k, v in result.items() if v is not None}

    def __repr__(self) -> str:
        return f"ExecutionResult({self.to_dict()!r})"


class _OutputCapture:
    """Collects stdout and stderr of one process under a shared byte ceiling."""

    def __init__(self, process: subprocess.Popen, limit: int):
        self.process = process
        self.limit = limit
        self.stdout_chunks: List[bytes] = []
        self.stderr_chunks: List[bytes] = []
        self.exceeded = threading.Event()
        self._total = 0
        self._lock = threading.Lock()

    def pump(self, stream: BinaryIO, sink: List[bytes]) -> None:
        try:
            while True:
                chunk = stream.read1(_READ_CHUNK_SIZE)
                if not chunk:
                    break
                with self._lock:
                    self._total += len(chunk)
                    if self._total > self.limit:
                        self.exceeded.set()
                        _kill(self.process)
                        break
                    sink.append(chunk)
        finally:
            stream.close()

    @staticmethod
    def decode(chunks: List[bytes]) -> str:
        return b"".join(chunks).decode("utf-8", errors="replace")


def _kill(process: subprocess.Popen) -> None:
    """Kill the script and everything it spawned into its session."""
    try:
        if HAS_KILLPG:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass  # Already exited


def _start_thread(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def _feed_stdin(stream: BinaryIO, payload: bytes) -> None:
    try:
        stream.write(payload)
    except BrokenPipeError:
        # Process exited before reading all of its program text
        pass
    finally:
        try:
            stream.close()
        except BrokenPipeError:
            pass


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"


class CodeExecutor:
    """Runs one script per call in a new interpreter process."""

    def __init__(
        self,
        interpreter: str = "python3",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_buffer_bytes: int = DEFAULT_MAX_BUFFER_BYTES,
    ):
        self.interpreter = interpreter
        self.timeout_seconds = timeout_seconds
        self.max_buffer_bytes = max_buffer_bytes

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CodeExecutor":
        settings = settings or get_settings()
        return cls(
            interpreter=settings.python_interpreter,
            timeout_seconds=settings.code_timeout_seconds,
            max_buffer_bytes=settings.code_max_buffer_bytes,
        )

    @property
    def timeout_message(self) -> str:
        return (
            f"execution timed out (limit: {_format_seconds(self.timeout_seconds)} seconds)"
        )

    @property
    def buffer_message(self) -> str:
        return f"output exceeded buffer limit ({self.max_buffer_bytes} bytes)"

    def _child_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env.setdefault("PYTHONIOENCODING", "utf-8")
        return env

    def execute(self, code: str) -> ExecutionResult:
        """
        Run a script to completion or abort it.

        Args:
            code: Python source text, delivered to the interpreter via stdin

        Returns:
            ExecutionResult - never raises
        """
        try:
            return self._execute(code)
        except OSError as e:
            logger.warning(f"Could not launch '{self.interpreter}': {e}")
            return ExecutionResult.failure(f"execution failed: {e}")
        except Exception as e:
            logger.exception("Code execution tool error")
            return ExecutionResult.failure(str(e) or UNKNOWN_FAILURE)

    def run(self, code: str) -> Dict[str, Any]:
        """Tool boundary: execute and serialize for the orchestrator."""
        return self.execute(code).to_dict()

    def _execute(self, code: str) -> ExecutionResult:
        payload = code.encode("utf-8")

        process = subprocess.Popen(
            [self.interpreter, "-c", STDIN_BOOTSTRAP],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=self._child_env(),
            start_new_session=HAS_KILLPG,
        )
        logger.info(f"Started script process pid={process.pid}")

        capture = _OutputCapture(process, self.max_buffer_bytes)
        threads: List[threading.Thread] = []
        timed_out = False
        try:
            threads.append(_start_thread(_feed_stdin, process.stdin, payload))
            threads.append(
                _start_thread(capture.pump, process.stdout, capture.stdout_chunks)
            )
            threads.append(
                _start_thread(capture.pump, process.stderr, capture.stderr_chunks)
            )
            try:
                process.wait(timeout=self.timeout_seconds)
            except subprocess.TimeoutExpired:
                timed_out = True
        finally:
            # Also takes down background processes the script left holding the pipes
            _kill(process)
            process.wait()
            for thread in threads:
                thread.join(timeout=_JOIN_TIMEOUT_SECONDS)

        if capture.exceeded.is_set():
            logger.warning(f"Script pid={process.pid} stopped: {self.buffer_message}")
            return ExecutionResult.failure(self.buffer_message)

        if timed_out:
            logger.warning(f"Script pid={process.pid} timed out")
            return ExecutionResult.failure(self.timeout_message)

        stdout = capture.decode(capture.stdout_chunks)
        stderr = capture.decode(capture.stderr_chunks)

        if process.returncode != 0:
            logger.info(f"Script pid={process.pid} exited with {process.returncode}")
            return ExecutionResult(
                stdout=stdout,
                stderr=stderr or DEFAULT_STDERR,
                exit_code=process.returncode,
                error=NONZERO_EXIT_ERROR,
            )

        return ExecutionResult(stdout=stdout, stderr=stderr, exit_code=0)
