"""Backend interfaces for PDF processing.

Text extraction and page splitting both rely on external tools that may or may
not be installed on the machine running a batch. Each tool is wrapped in a
backend object; callers hold an ordered list of backends and try them in turn.
"""

import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from concierge.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


class BackendUnavailable(Exception):
    """Raised when a backend's tool or library is not installed."""


class ExtractionError(Exception):
    """Raised when an installed backend fails on a specific file."""

    def __init__(self, message: str, backend: str | None = None):
        super().__init__(message)
        self.backend = backend


class TextBackend(ABC):
    """A way of turning a PDF file into plain text."""

    name: str = "text"

    @abstractmethod
    def extract(self, path: Path) -> str:
        """Extract plain text from the PDF at ``path``.

        Raises:
            BackendUnavailable: If the underlying tool is missing
            ExtractionError: If the tool ran but could not extract the file
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def which(tool: str) -> str | None:
    """Locate an executable on PATH."""
    return shutil.which(tool)


def run_tool(
    cmd: list[str],
    backend: str,
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> str:
    """Run an external command and return its stdout.

    Args:
        cmd: Command and arguments
        backend: Backend name used in error messages
        timeout: Seconds before the process is killed
        max_output_bytes: Larger stdout is rejected

    Returns:
        Decoded stdout

    Raises:
        BackendUnavailable: If the executable does not exist
        ExtractionError: On non-zero exit, timeout or oversized output
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise BackendUnavailable(f"{cmd[0]} not found") from e
    except subprocess.TimeoutExpired as e:
        raise ExtractionError(f"{backend} timed out after {timeout}s", backend=backend) from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise ExtractionError(
            f"{backend} exited with {result.returncode}: {stderr[-500:]}", backend=backend
        )

    if len(result.stdout) > max_output_bytes:
        raise ExtractionError(
            f"{backend} output ({len(result.stdout)} bytes) exceeds {max_output_bytes} bytes",
            backend=backend,
        )

    return result.stdout.decode("utf-8", errors="replace")
