from typing import Callable, Optional
from pathlib import Path
from .compiler.artifacts import ArtifactAccessError, ArtifactTemplateError, locate_artifact
from .compiler.driver import CompilerDriver, RunResult, format_command
from .compiler.probe import new_entries, snapshot_directory
from .parsing import publish_diagnostics
from .utils.config import ConfigManager
from .utils.lang import is_supported
from .utils.state import CpleState
from .utils.watcher import FileWatcher
import os
import sys
import tempfile
import time

RULE = "─" * 60
DOUBLE_RULE = "═" * 60


class CpleEngine:
    def __init__(self, source_file: str, config: Optional[ConfigManager] = None):
        self.config = config if config else ConfigManager()
        self.state = CpleState(source_path=source_file)
        self.driver = CompilerDriver(self.config)
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[CpleState], None]] = None
        self.log_file = os.path.join(tempfile.gettempdir(), "cplebolt_engine.log")

    def _log(self, msg: str):
        with open(self.log_file, "a") as f:
            f.write(f"[{time.time()}] {msg}\n")

    def _emit(self):
        self.state.last_update = time.time()
        if self.on_update_callback:
            self.on_update_callback(self.state)

    def _check_file(self) -> bool:
        if not is_supported(self.state.source_path):
            self.state.output.append_line("❌ Not a CPLE file")
            self.state.status = "not a CPLE file"
            self._emit()
            return False
        return True

    @property
    def output(self):
        return self.state.output

    # --- Lifecycle ---

    def start(self):
        self._reload_source()
        self._emit()
        if self.config.get("compile_on_save"):
            self.watcher.start_watching(self.state.source_path, self._on_file_saved)

    def stop(self):
        self.watcher.stop_watching()

    def close(self):
        """The document was closed: drop its diagnostics."""
        self.state.diagnostics.delete(self.state.source_path)
        self._emit()

    def _on_file_saved(self, path: str):
        self._log(f"Saved {path}, compiling")
        self.compile()

    def _reload_source(self):
        try:
            with open(self.state.source_path, "r") as f:
                self.state.load_source(f.read())
        except OSError as e:
            self._log(f"Could not read source: {e}")

    # --- Commands ---

    def compile(self) -> bool:
        if not self._check_file():
            return False

        self._reload_source()
        source = self.state.source_path
        output = self.state.output

        compiler = self.driver.resolve_compiler_path()
        if not compiler.exists():
            msg = f"CPLE compiler not found at: {compiler}"
            output.append_line(f"❌ Error: {msg}")
            self.state.status = "compiler missing"
            self._log(msg)
            self._emit()
            return False

        # Stale markers must not survive into the new compile
        self.state.diagnostics.delete(source)
        self.state.status = "compiling"
        command = self.driver.build_command(source)
        output.append_line(f"$ {format_command(command)}\n")
        self._log(f"Compiling {source}: {command}")

        result = self.driver.compile(source)
        self.state.last_compile = result
        duration = f"{result.duration:.2f}"

        if not result.success:
            output.append_line("❌ Compilation Failed!\n")
            output.append_line("Error Output:")
            output.append_line(result.diagnostic_text)
            diagnostics = publish_diagnostics(self.state.diagnostics, source, result.diagnostic_text)
            self._log(f"Compile failed in {duration}s with {len(diagnostics)} diagnostics")
            self.state.status = f"failed ({duration}s)"
            self._emit()
            return False

        output.append_line("✅ Compilation Successful!\n")
        if result.stdout.strip():
            output.append_line("Compiler Output:")
            output.append_line(result.stdout)
        output.append_line(f"\n⏱️  Completed in {duration}s")
        self._log(f"Compile succeeded in {duration}s")
        self.state.status = f"compiled ({duration}s)"
        self._emit()
        return True

    def check_syntax(self) -> bool:
        if not self._check_file():
            return False
        self.state.output.append_line("Checking CPLE syntax...")
        return self.compile()

    def run(self) -> Optional[RunResult]:
        if not self.compile():
            return None

        source = self.state.source_path
        output = self.state.output
        extra = self.config.get("artifact_candidates") or []

        try:
            lookup = locate_artifact(source, extra_templates=extra)
        except ArtifactAccessError as e:
            output.append_line(f"❌ Could not search for the compiled program: {e}")
            self._log(f"Artifact lookup error: {e}")
            self.state.status = "lookup failed"
            self._emit()
            return None
        except ArtifactTemplateError as e:
            output.append_line(f"❌ {e}")
            output.append_line("Fix artifact_candidates in your config. Placeholders: {dir} {parent} {grandparent} {base}")
            self._log(f"Bad artifact template: {e}")
            self.state.status = "bad artifact template"
            self._emit()
            return None

        self.state.last_lookup = lookup
        if not lookup.found:
            output.append_line("❌ Could not find the compiled program. Looked for:")
            for candidate in lookup.candidates:
                output.append_line(f"   {candidate}")
            output.append_line("Run the debug command to see which files the compiler creates.")
            self._log("Artifact not found")
            self.state.status = "program not found"
            self._emit()
            return None

        artifact = lookup.path
        output.append_line(f"   ✅ Found: {artifact}\n")
        output.append_line(f"Executing: {artifact.name}\n")
        output.append_line(RULE)
        output.append_line("Program Output:")
        output.append_line(RULE + "\n")

        result = self.driver.run_artifact(artifact, cwd=str(Path(source).parent))
        self.state.last_run = result

        if result.failed:
            output.append_line("\n❌ Runtime Error!\n")
            if result.stderr:
                output.append_line(result.stderr)
            output.append_line(result.error or f"Program exited with code {result.returncode}")
            self.state.status = "runtime error"
        else:
            if result.stdout:
                output.append_line(result.stdout)
            if result.stderr:
                output.append_line("\nStderr:")
                output.append_line(result.stderr)
            if not result.stdout and not result.stderr:
                output.append_line("(No output)")
            self.state.status = "ran"

        output.append_line("\n" + RULE)
        output.append_line(f"⏱️  Execution time: {result.duration:.2f}s")
        self._log(f"Ran {artifact} -> {result.returncode}")
        self._emit()
        return result

    def _snapshot(self, directory: str):
        try:
            return snapshot_directory(directory)
        except OSError as e:
            self.state.output.append_line(f"❌ Could not list {directory}: {e}")
            self._log(f"Directory listing failed: {e}")
            self.state.status = "debug failed"
            self._emit()
            return None

    def debug_compiler(self) -> bool:
        """
        Compiles while watching the source directory, then reports which files
        appeared so the artifact candidate list can be extended.
        """
        if not self._check_file():
            return False

        source = self.state.source_path
        directory = str(Path(source).parent)
        compiler = self.driver.resolve_compiler_path()
        output = self.state.output

        output.clear()
        output.append_line("🔧 CPLE COMPILER DEBUG INFORMATION")
        output.append_line(DOUBLE_RULE + "\n")
        output.append_line("📍 Paths:")
        output.append_line(f"   Compiler: {compiler}")
        output.append_line(f"   File: {source}")
        output.append_line(f"   Directory: {directory}")
        output.append_line(f"   Platform: {sys.platform}\n")

        if not compiler.exists():
            output.append_line("❌ Compiler not found!\n")
            self.state.status = "compiler missing"
            self._emit()
            return False

        output.append_line("✅ Compiler found\n")
        output.append_line(RULE)

        before = self._snapshot(directory)
        if before is None:
            return False
        output.append_line("\n📁 Files in directory BEFORE compilation:")
        for entry in before.values():
            output.append_line(f"   {entry.kind} {entry.name}")

        output.append_line("\n" + RULE)
        output.append_line("\n▶️  Compiling to detect output...\n")
        output.append_line(f"Command: {format_command(self.driver.build_command(source))}\n")

        result = self.driver.compile(source)
        self.state.last_compile = result
        if result.success:
            output.append_line("✅ Compilation output:")
            output.append_line(result.stdout or "(no output)")
        else:
            output.append_line("❌ Compilation failed:")
            output.append_line(result.diagnostic_text)

        after = self._snapshot(directory)
        if after is None:
            return False
        output.append_line("\n" + RULE)
        output.append_line("\n📁 Files in directory AFTER compilation:")
        for entry in after.values():
            marker = " ⭐ NEW" if entry.name not in before else ""
            output.append_line(f"   {entry.kind} {entry.name}{marker}")

        created = new_entries(before, after)
        output.append_line("\n" + RULE)

        if created:
            output.append_line("\n✨ NEW FILES CREATED:")
            for entry in created:
                output.append_line(f"   ✅ {entry.name} ({entry.size_kb} KB)")
                output.append_line(f"      Full path: {Path(directory) / entry.name}")
            output.append_line("\n💡 SOLUTION:")
            output.append_line(f"   Your compiler creates: {created[0].name}")
            output.append_line(
                f'   Add "{{dir}}/{created[0].name}" to artifact_candidates in your config.'
            )
        else:
            output.append_line("\n⚠️  NO NEW FILES CREATED!")
            output.append_line("\n💡 Possible reasons:")
            output.append_line("   1. Compiler outputs to a different directory")
            output.append_line("   2. Compiler needs additional flags (like -o output.exe)")
            output.append_line("   3. Compilation failed but didn't report error")
            output.append_line("   4. Output file has same name as an existing file")
            output.append_line("\n💡 Try adding to compiler_args in your config:")
            output.append_line("   -o output.exe")

        output.append_line("\n" + DOUBLE_RULE)
        output.append_line("Debug complete! Check the output above for details.")
        self._log(f"Debug run: {len(created)} new files")
        self.state.status = "debug complete"
        self._emit()
        return result.success
