"""
Common CLI utilities and decorators for consistent command behavior.
"""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Optional

import click

from .config import get_repos_dir
from .domain.errors import RepoError
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Configuration shared by every command of one CLI invocation."""
    config: Dict[str, Any]
    root_override: Optional[str] = None

    @property
    def root(self) -> str:
        return self.root_override or get_repos_dir(self.config)


def emit_error(error: Exception, err: bool = False) -> None:
    """Write a JSON error object on its own line of stdout (stderr if err)."""
    if isinstance(error, RepoError):
        error_obj = error.to_dict()
    else:
        error_obj = {"error": str(error), "type": type(error).__name__}
    error_obj["exit_code"] = get_exit_code_for_exception(error)
    click.echo(json.dumps(error_obj, ensure_ascii=False), err=err)


class PartialOutputError(Exception):
    """A raw stream failed after some of its bytes reached stdout."""

    def __init__(self, error: RepoError):
        super().__init__(str(error))
        self.error = error


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Clean JSON output on stdout
    - Diagnostics through logging on stderr
    - Consistent error handling and exit codes

    A command may return a dict or list, which is printed as one JSON line,
    or None when it wrote its own output.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
            if result is not None:
                click.echo(json.dumps(result, ensure_ascii=False))
        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except PartialOutputError as e:
            # stdout holds file content; keep it uncorrupted
            logger.error(str(e.error))
            emit_error(e.error, err=True)
            sys.exit(get_exit_code_for_exception(e.error))
        except (RepoError, CommandError) as e:
            logger.error(str(e))
            emit_error(e)
            sys.exit(get_exit_code_for_exception(e))
        except Exception as e:
            logger.error(f"Command failed: {e}")
            emit_error(e)
            sys.exit(get_exit_code_for_exception(e))
        sys.exit(SUCCESS)

    return wrapper


def stream_to_stdout(
    operation: Callable[..., Awaitable[None]],
    raw: bool = False
) -> None:
    """
    Run a streaming repository operation, writing chunks to stdout as they come.

    Args:
        operation: Coroutine function taking (on_chunk, on_error, on_done)
        raw: Chunks are file content; no trailing newline is added

    Raises:
        RepoError: the terminal error reported by the operation
        PartialOutputError: raw content was written before the error
    """
    sys.stdout.flush()
    out = sys.stdout.buffer
    outcome: Dict[str, Any] = {}

    def on_chunk(chunk):
        out.write(chunk if isinstance(chunk, bytes) else chunk.encode('utf-8'))
        out.flush()
        outcome['emitted'] = True

    def on_error(error: RepoError):
        outcome['error'] = error

    def on_done(exit_code: int):
        outcome['exit_code'] = exit_code

    asyncio.run(operation(on_chunk, on_error, on_done))

    if outcome.get('emitted') and not raw:
        out.write(b"\n")
        out.flush()

    if 'error' in outcome:
        if raw and outcome.get('emitted'):
            raise PartialOutputError(outcome['error'])
        raise outcome['error']
