"""
Subprocess execution for repostream.

ProcessRunner launches one command per call with stdin closed and stdout
and stderr captured as byte streams. Stdout chunks are handed to the caller
in the order the OS delivers them; their size and boundaries are whatever
the pipe produces.

Lifecycle of one invocation:

    STARTING --spawned--> STREAMING --stdout EOF--> DRAINING --exit 0--> DONE
        |                     |                         |
        +--spawn error--> FAILED                        +--exit != 0--> FAILED
                              |                         |
                              +-------timer fired-------+--> TIMED_OUT

A timed out process has its readers cancelled (no more stdout chunks are
delivered). The child runs in its own session, so its whole process group
(git clone forks helpers that share the pipes) is terminated and, after a
grace period, killed. The pipes are then drained to EOF and closed.
"""

import asyncio
import logging
import os
import signal
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from ..domain.errors import ErrorCode, RepoError
from .classifier import DiagnosticBuffer

logger = logging.getLogger(__name__)


class ProcessState(Enum):
    """States of a single subprocess invocation."""
    STARTING = "starting"
    STREAMING = "streaming"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


_TRANSITIONS = {
    ProcessState.STARTING: {ProcessState.STREAMING, ProcessState.FAILED},
    ProcessState.STREAMING: {ProcessState.DRAINING, ProcessState.TIMED_OUT},
    ProcessState.DRAINING: {ProcessState.DONE, ProcessState.FAILED, ProcessState.TIMED_OUT},
    ProcessState.DONE: set(),
    ProcessState.FAILED: set(),
    ProcessState.TIMED_OUT: set(),
}


class ProcessLifecycle:
    """Tracks the state of one invocation and rejects illegal transitions."""

    def __init__(self, argv: Sequence[str]):
        self.argv = list(argv)
        self.state = ProcessState.STARTING

    def advance(self, new_state: ProcessState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal process transition {self.state.value} -> {new_state.value}")
        logger.debug(f"{self.argv[0]} {self.argv[1:2]}: {self.state.value} -> {new_state.value}")
        self.state = new_state


@dataclass
class ProcessResult:
    """Outcome of a finished invocation."""
    exit_code: Optional[int]
    state: ProcessState
    diagnostics: str = ""

    @property
    def success(self) -> bool:
        return self.state is ProcessState.DONE

    @property
    def timed_out(self) -> bool:
        return self.state is ProcessState.TIMED_OUT


class ProcessRunner:
    """
    Runs a command as an asyncio subprocess.

    Example:
        runner = ProcessRunner("git")
        result = await runner.run(["log", "-1"], cwd="/repos/demo", on_stdout=chunks.append)
        if result.success:
            print(b"".join(chunks))
    """

    def __init__(
        self,
        command: str = "git",
        read_size: int = 65536,
        kill_grace: float = 5.0,
        max_diagnostic_bytes: int = 65536,
        env: Optional[Dict[str, str]] = None
    ):
        """
        Initialize ProcessRunner.

        Args:
            command: Executable to launch
            read_size: Maximum bytes requested per pipe read
            kill_grace: Seconds between terminate and kill on timeout
            max_diagnostic_bytes: Newest stderr bytes kept for classification
            env: Extra environment variables for the child
        """
        self.command = command
        self.read_size = read_size
        self.kill_grace = kill_grace
        self.max_diagnostic_bytes = max_diagnostic_bytes
        self.env = dict(env or {})

    def _environment(self) -> Dict[str, str]:
        environment = os.environ.copy()
        environment.update(self.env)
        return environment

    async def run(
        self,
        args: Sequence[str],
        cwd: str,
        on_stdout: Optional[Callable[[bytes], None]] = None,
        timeout: Optional[float] = None,
        on_timeout: Optional[Callable[[], None]] = None
    ) -> ProcessResult:
        """
        Run the command and stream its stdout.

        Args:
            args: Arguments following the command name
            cwd: Working directory of the child
            on_stdout: Called with every stdout chunk, in order
            timeout: Wall-clock limit in seconds (None = unlimited)
            on_timeout: Called once if the limit is hit

        Returns:
            ProcessResult with the final state, exit code and stderr text

        Raises:
            RepoError: UNEXPECTED_ERROR if the command cannot be started
        """
        argv: List[str] = [self.command, *args]
        lifecycle = ProcessLifecycle(argv)
        diagnostics = DiagnosticBuffer(self.max_diagnostic_bytes)

        logger.debug(f"Running in '{cwd}': {argv}")
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._environment(),
                start_new_session=True
            )
        except OSError as e:
            lifecycle.advance(ProcessState.FAILED)
            raise RepoError(ErrorCode.UNEXPECTED_ERROR, f"Cannot start {self.command}: {e}") from e

        lifecycle.advance(ProcessState.STREAMING)

        async def pump_stdout():
            while True:
                chunk = await process.stdout.read(self.read_size)
                if not chunk:
                    break
                if on_stdout is not None:
                    on_stdout(chunk)
            lifecycle.advance(ProcessState.DRAINING)

        async def pump_stderr():
            while True:
                chunk = await process.stderr.read(self.read_size)
                if not chunk:
                    break
                diagnostics.feed(chunk)

        async def finish():
            await asyncio.gather(pump_stdout(), pump_stderr())
            return await process.wait()

        try:
            if timeout is None:
                exit_code = await finish()
            else:
                try:
                    exit_code = await asyncio.wait_for(finish(), timeout)
                except asyncio.TimeoutError:
                    await self._tear_down(process)
                    lifecycle.advance(ProcessState.TIMED_OUT)
                    logger.warning(f"{self.command} {args[0] if args else ''} timed out after {timeout}s")
                    if on_timeout is not None:
                        on_timeout()
                    return ProcessResult(None, lifecycle.state, diagnostics.text)
        finally:
            if process.returncode is None:
                await self._tear_down(process)

        lifecycle.advance(ProcessState.DONE if exit_code == 0 else ProcessState.FAILED)
        return ProcessResult(exit_code, lifecycle.state, diagnostics.text)

    async def _tear_down(self, process: asyncio.subprocess.Process) -> None:
        """
        Terminate the child's process group, escalating to kill after the
        grace period, then drain both pipes so their transports close.
        """
        if _signal_group(process, signal.SIGTERM):
            try:
                await asyncio.wait_for(process.wait(), self.kill_grace)
            except asyncio.TimeoutError:
                logger.warning(f"{self.command} (pid {process.pid}) ignored SIGTERM, killing")
            # Helpers may outlive the leader
            _signal_group(process, signal.SIGKILL)
        await process.wait()

        for stream in (process.stdout, process.stderr):
            try:
                await asyncio.wait_for(stream.read(), self.kill_grace)
            except asyncio.TimeoutError:
                logger.warning(f"{self.command} (pid {process.pid}): pipe still open after kill")


def _signal_group(process: asyncio.subprocess.Process, sig: int) -> bool:
    """Send sig to the process group led by process; False if it is gone."""
    try:
        os.killpg(process.pid, sig)
    except ProcessLookupError:
        return False
    return True
