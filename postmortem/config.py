"""
Run configuration for reporting.

Three locations matter to the presenter:
- log_location: the application's log file (named in footers).
- stack_trace_path: the cumulative trace file (footers + write_backtrace()).
- error_output_path: the per-run aggregate report file.

Resolution order (later wins)
1. defaults under ~/.postmortem/logs/
2. a __reporting__ mapping exposed by the host application's __main__
3. keyword overrides passed to configure()

The result is a read-only mapping; unknown keys are rejected so that a typo
never silently sends a report somewhere unexpected.
"""
import os
from pathlib import Path
from types import MappingProxyType

KEYS = ("log_location", "stack_trace_path", "error_output_path")


def defaults(home=None, /):
    logs = Path(home if home is not None else Path.home() / ".postmortem") / "logs"
    return {
        "log_location": str(logs / "default.log"),
        "stack_trace_path": str(logs / "stack-trace.log"),
        "error_output_path": str(logs / "errors.txt"),
    }


def configure(**overrides):
    options = defaults() | dict(getattr(__import__("__main__"), "__reporting__", {})) | overrides
    if unknown := sorted(set(options) - set(KEYS)):
        raise TypeError("configure() got unexpected option(s): %s" % ", ".join(unknown))
    for key, value in options.items():
        if not isinstance(value, (str, os.PathLike)):
            raise TypeError("configure() option %r must be a path" % key)
        options[key] = os.fspath(value)
    return MappingProxyType(options)


__all__ = (
    "KEYS",
    "defaults",
    "configure",
)
