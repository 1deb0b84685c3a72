from .artifacts import (
    DEFAULT_CANDIDATES,
    ArtifactAccessError,
    ArtifactLookup,
    ArtifactTemplateError,
    candidate_paths,
    locate_artifact,
)
from .driver import CompileResult, CompilerDriver, RunResult
