from .diagnostics import (
    DIAGNOSTIC_SOURCE,
    MATCHERS,
    Diagnostic,
    Severity,
    extract_diagnostics,
    parse_line,
    publish_diagnostics,
)
