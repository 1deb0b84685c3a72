import shlex
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from ..utils.config import ConfigManager

# Bundled compiler binaries ship next to the package
BUNDLED_DIR = Path(__file__).resolve().parent.parent / "bin"


@dataclass
class CompileResult:
    success: bool
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    command: List[str] = field(default_factory=list)
    error: str = ""  # launch failure, timeout or missing compiler

    @property
    def diagnostic_text(self) -> str:
        """The text handed to the diagnostic extractor on failure."""
        return self.stderr or self.error


@dataclass
class RunResult:
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    error: str = ""

    @property
    def failed(self) -> bool:
        return bool(self.error) or (self.returncode is not None and self.returncode != 0)


def bundled_compiler_name(platform: str = sys.platform) -> str:
    if platform == "win32":
        return "cple.exe"
    return "cple.out"


class CompilerDriver:
    def __init__(self, config_manager: Optional[ConfigManager] = None):
        # Use provided config or load default
        self.config = config_manager if config_manager else ConfigManager()

        custom = self.config.get("compiler_path")
        if custom and not Path(custom).exists():
            # Stale config: warn and fall back to the bundled compiler
            print(f"Warning: Compiler '{custom}' not found, using bundled compiler.")

    @property
    def timeout(self) -> float:
        return self.config.get("timeout", 30)

    def resolve_compiler_path(self) -> Path:
        """
        Configured compiler if it exists, otherwise the bundled binary for
        this platform. The returned path may not exist.
        """
        custom = self.config.get("compiler_path")
        if custom and Path(custom).exists():
            return Path(custom)
        return BUNDLED_DIR / bundled_compiler_name()

    def build_command(self, source_file: str) -> List[str]:
        command = [str(self.resolve_compiler_path()), str(source_file)]
        # Extra arguments are passed through untouched
        extra = self.config.get("compiler_args") or ""
        command.extend(shlex.split(extra))
        return command

    def compile(self, source_file: str) -> CompileResult:
        """
        Runs the compiler on `source_file` from the file's directory.
        Never raises for process failures; inspect the result instead.
        """
        compiler = self.resolve_compiler_path()
        if not compiler.exists():
            return CompileResult(
                success=False,
                error=f"CPLE compiler not found at: {compiler}",
            )

        command = self.build_command(source_file)
        start = time.time()
        try:
            result = subprocess.run(
                command,
                cwd=str(Path(source_file).parent),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return CompileResult(
                success=False,
                duration=time.time() - start,
                command=command,
                error=f"Compiler timed out after {self.timeout}s",
            )
        except OSError as e:
            return CompileResult(
                success=False,
                duration=time.time() - start,
                command=command,
                error=f"Could not start compiler: {e}",
            )

        duration = time.time() - start
        if result.returncode != 0:
            return CompileResult(
                success=False,
                stdout=result.stdout,
                stderr=result.stderr,
                duration=duration,
                command=command,
                error=f"Command failed with exit code {result.returncode}",
            )
        return CompileResult(
            success=True,
            stdout=result.stdout,
            stderr=result.stderr,
            duration=duration,
            command=command,
        )

    def run_artifact(self, artifact: Path, cwd: Optional[str] = None) -> RunResult:
        """Executes a built program and captures its output."""
        start = time.time()
        try:
            result = subprocess.run(
                [str(artifact)],
                cwd=cwd or str(Path(artifact).parent),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            return RunResult(
                returncode=None,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
                duration=time.time() - start,
                error=f"Program timed out after {self.timeout}s",
            )
        except OSError as e:
            return RunResult(
                returncode=None,
                duration=time.time() - start,
                error=f"Could not start program: {e}",
            )

        return RunResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            duration=time.time() - start,
        )


def _as_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data


def format_command(command: List[str]) -> str:
    """Shell-style rendering used for the output log."""
    return " ".join(shlex.quote(part) for part in command)
