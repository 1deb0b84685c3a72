"""
Artifact discovery: finds the file the CPLE compiler just produced.

The compiler does not report its output name, and the naming varies by
platform and version, so we probe a fixed list of likely locations and take
the first one that exists.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

# Placeholders: {dir} source directory, {parent} and {grandparent} the levels
# above it, {base} the source file name without extension.
DEFAULT_CANDIDATES: Sequence[str] = (
    "{dir}/{base}.exe",
    "{dir}/{base}",
    "{dir}/{base}.out",
    "{dir}/a.out",
    "{dir}/a.exe",
    "{dir}/output.exe",
    "{dir}/out.exe",
    "{parent}/{base}.exe",
    "{parent}/output/{base}.exe",
    "{parent}/{base}",
    "{grandparent}/{base}.exe",
)


class ArtifactAccessError(Exception):
    """An existence check failed for a reason other than 'does not exist'."""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Cannot check {path}: {cause}")
        self.path = path
        self.cause = cause


class ArtifactTemplateError(ValueError):
    """A candidate template uses an unknown placeholder or is malformed."""

    def __init__(self, template: str, cause: Exception):
        super().__init__(f"Invalid artifact candidate {template!r}: {cause!r}")
        self.template = template
        self.cause = cause


@dataclass
class ArtifactLookup:
    path: Optional[Path]
    candidates: List[Path] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.path is not None


def candidate_paths(source_file: str, templates: Iterable[str] = DEFAULT_CANDIDATES) -> List[Path]:
    """
    Expands the templates for `source_file`, preserving their order.
    Relative sources are anchored at the current directory first.
    """
    src = Path(os.path.abspath(source_file))
    directory = src.parent
    fields = {
        "dir": str(directory),
        "parent": str(directory.parent),
        "grandparent": str(directory.parent.parent),
        "base": src.stem,
    }
    paths = []
    for template in templates:
        try:
            paths.append(Path(template.format(**fields)))
        except (KeyError, IndexError, AttributeError, ValueError) as e:
            raise ArtifactTemplateError(template, e) from e
    return paths


def _exists(path: Path) -> bool:
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        raise ArtifactAccessError(path, e) from e
    return True


def locate_artifact(
    source_file: str,
    templates: Iterable[str] = DEFAULT_CANDIDATES,
    extra_templates: Iterable[str] = (),
) -> ArtifactLookup:
    """
    Returns the first candidate that exists. Nothing found is an ordinary
    result (`lookup.found is False`), while a failing check raises
    ArtifactAccessError and a bad template raises ArtifactTemplateError
    before anything is checked.
    """
    candidates = candidate_paths(source_file, list(templates) + list(extra_templates))
    checked = []
    for candidate in candidates:
        checked.append(candidate)
        if _exists(candidate):
            return ArtifactLookup(path=candidate, candidates=checked)
    return ArtifactLookup(path=None, candidates=checked)
