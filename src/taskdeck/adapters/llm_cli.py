"""LLM CLI adapter - subprocess wrapper for a prompt-in, text-out CLI."""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class LLMCLIService:
    """
    LLM CLI subprocess adapter.

    Implements LLMService protocol. The prompt is written to stdin of the
    configured command (default: `claude -p`), which keeps long task lists
    out of the argument vector.
    """

    def __init__(
        self,
        command: str = "claude -p",
        cwd: Path | str | None = None,
        timeout: int = 120,
    ):
        self.argv = shlex.split(command)
        self.cwd = Path(cwd) if cwd else None
        self.timeout = timeout

    def is_available(self) -> bool:
        return bool(self.argv) and shutil.which(self.argv[0]) is not None

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt. Returns complete response."""
        if not self.argv:
            raise RuntimeError("No LLM command configured")
        try:
            proc = subprocess.run(
                self.argv,
                input=prompt,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise RuntimeError(f"LLM CLI not found: {self.argv[0]}")
        except subprocess.TimeoutExpired:
            raise RuntimeError(f"LLM CLI timed out after {self.timeout}s")

        if proc.returncode != 0:
            logger.error(f"LLM CLI failed: {proc.stderr}")
            raise RuntimeError(f"LLM CLI failed: {proc.stderr}")
        return proc.stdout
