from .parsing.diagnostics import Diagnostic, Severity, extract_diagnostics, publish_diagnostics
from .compiler.artifacts import ArtifactAccessError, ArtifactLookup, ArtifactTemplateError, locate_artifact

__version__ = "0.1.0"
