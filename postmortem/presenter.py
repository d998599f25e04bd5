"""
Postmortem presenter: turns a raised fault into what the operator sees.

Entry points (all guarded)
- show_error(fault, config): classify, resolve the display policy, render and
  print. Aggregate failures also rewrite the report file first.
- present_aggregate(fault, config): the aggregate path on its own.
- write_backtrace(fault, args, config): append a timestamped, chained backtrace
  to the cumulative trace file.

Rendering
- decorated: bold identifier header, body, footer naming the log and/or
  stack-trace locations (each part subject to the display policy).
- undecorated: body only, followed by the command's usage text if the fault is
  tied to a command.

Failure policy
- Any exception raised while reporting is itself dumped raw to the terminal
  ("INTERNAL ERROR", message, traceback) and the process exits with
  INTERNAL_ERROR_EXIT. Reporting code must never fail silently.
"""
import functools
import io
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path

from rich.text import Text

from . import backtrace
from .catalog import Catalog
from .classifier import FaultClassifier, FaultKind
from .config import configure
from .faults import Code, Fault, MultiJobFailure, WrappedFault
from .policy import DisplayPolicy
from .terminal import Terminal
from .utils import flatten

logger = logging.getLogger(__name__)

INTERNAL_ERROR_EXIT = 128


def dump_unexpected_error(exception, terminal=None, /):
    """print an exception raw, bypassing every template. last line of defense."""
    terminal = terminal if terminal is not None else Terminal()
    logger.error("internal error while reporting a fault", exc_info=exception)
    terminal.output("INTERNAL ERROR")
    terminal.output("-=" * 30)
    terminal.output("Message:")
    terminal.output(str(exception))
    terminal.output("Backtrace:")
    terminal.output("".join(traceback.format_tb(exception.__traceback__)).rstrip("\n"))
    terminal.output("=-" * 30)


def _guarded(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except Exception as exception:
            self.dump_unexpected_error(exception)
            sys.exit(INTERNAL_ERROR_EXIT)
    return wrapper


class ErrorPresenter:
    """
    renders faults against one message catalog.

    the catalog, fault resolver and terminal are injected; defaults are the
    bundled catalog, StandardResolver and a stderr Terminal.
    """

    def __init__(self, catalog=None, /, *, resolver=None, terminal=None):
        self.catalog = catalog if catalog is not None else Catalog.default()
        self.classifier = FaultClassifier(resolver)
        self.policy = DisplayPolicy(self.catalog)
        self.terminal = terminal if terminal is not None else Terminal()

    def dump_unexpected_error(self, exception, /):
        dump_unexpected_error(exception, self.terminal)

    @_guarded
    def show_error(self, fault, config, /):
        record = self.classifier.normalize(fault)
        if record.jobs is not None:
            record = self.capture_multiple_failures(record, config)
        self.terminal.output(self.format_error(record, config))

    @_guarded
    def present_aggregate(self, fault, config, /):
        record = self.capture_multiple_failures(self.classifier.normalize(fault), config)
        self.terminal.output(self.format_error(record, config))

    @_guarded
    def write_backtrace(self, fault, args, config, /):
        out = io.StringIO()
        self.add_backtrace_header(out, args)
        # traced as raised: wrappers are peeled but nothing is reclassified
        while isinstance(fault, WrappedFault):
            fault = fault.contained
        self.add_formatted_backtrace(out, fault)
        self.save_backtrace(out, config)

    def capture_multiple_failures(self, record, config, /):
        """
        rewrite the report file with one line per failed job.

        returns the aggregate record with the report path appended to its
        parameters, so the summary tells the operator where to look.
        """
        path = Path(config["error_output_path"])
        lines = []
        for host, fault in self.classifier.normalize_aggregate(record.exception):
            job = self.classifier.normalize(self.classifier.resolver.wrap(fault, host), host)
            line = "Host: %s " % host.hostname
            if job.kind is FaultKind.DOMAIN:
                line += "Error: %s: " % job.identifier
            else:
                line += ": "
            lines.append(line + flatten(self.format_body(job)) + "\n")

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as out:
            out.write("".join(lines))
        logger.debug("wrote %d failed job(s) to %s", len(lines), path)
        return record._replace(parameters=record.parameters + (str(path),))

    def format_error(self, record, config, /):
        attributes = self.policy.resolve(record.identifier)
        if attributes.decorations:
            return self.format_decorated(record, attributes, config)
        return self.format_undecorated(record)

    def format_undecorated(self, record, /):
        parts = ["\n", self.format_body(record)]
        if record.command is not None:
            parts += ["\n", record.command.usage_text()]
        return Text.assemble(*parts)

    def format_decorated(self, record, attributes, config, /):
        parts = ["\n"]
        if attributes.header:
            parts += [self.format_header(record), "\n\n"]
        parts += [self.format_body(record), "\n"]
        if attributes.footer:
            parts += [self.format_footer(attributes, config), "\n"]
        return Text.assemble(*parts)

    def format_header(self, record, /):
        return Text(record.identifier, style="bold")

    def format_body(self, record, /):
        match record.kind:
            case FaultKind.DOMAIN:
                template = self.catalog.get(record.identifier)
            case FaultKind.TRANSPORT if record.host is not None:
                template = self.catalog.get(Code.TRANSPORT)
            case FaultKind.TRANSPORT:
                template = self.catalog.get(Code.TRANSPORT_HOSTLESS)
            case FaultKind.GENERIC:
                template = self.catalog.get(Code.GENERIC)
            case _:
                raise ValueError("unsupported fault kind: %r" % (record.kind,))
        return template.text(*record.parameters)

    def format_footer(self, attributes, config, /):
        match attributes.log, attributes.stack:
            case True, True:
                return self.catalog.get("footer.both").text(config["log_location"], config["stack_trace_path"])
            case True, False:
                return self.catalog.get("footer.log_only").text(config["log_location"])
            case False, True:
                return self.catalog.get("footer.stack_only").text()
            case _:
                return self.catalog.get("footer.neither").text()

    def error_summary(self, fault, /):
        """a single line describing `fault`, for status lines and progress output."""
        if isinstance(fault, (Fault, MultiJobFailure)):
            try:
                return self.catalog.get(fault.identifier).summary(*fault.params)
            except (IndexError, KeyError):
                return self.catalog.get("UNKNOWN").text()
        if isinstance(fault, str):
            return fault
        if isinstance(fault, BaseException) and str(fault):
            return str(fault)
        return self.catalog.get("UNKNOWN").text()

    def add_backtrace_header(self, out, args, /):
        timestamp = datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
        out.write("\n%s\n" % ("-" * 80))
        out.write("%s: Error encountered while running the following:\n" % timestamp)
        out.write("  %s\n" % " ".join(map(str, args)))
        out.write("Backtrace:\n")

    def add_formatted_backtrace(self, out, exception, /):
        backtrace.render(out, exception)

    def save_backtrace(self, output, config, /):
        path = Path(config["stack_trace_path"])
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as out:
            out.write(output.getvalue())
        logger.debug("appended backtrace to %s", path)


def _presenter(config):
    try:
        return ErrorPresenter(), configure() if config is None else config
    except Exception as exception:
        dump_unexpected_error(exception)
        sys.exit(INTERNAL_ERROR_EXIT)


def show_error(fault, config=None, /):
    """report `fault` on stderr with the bundled catalog."""
    presenter, config = _presenter(config)
    presenter.show_error(fault, config)


def present_aggregate(fault, config=None, /):
    presenter, config = _presenter(config)
    presenter.present_aggregate(fault, config)


def write_backtrace(fault, args, config=None, /):
    """append the chained backtrace of `fault` to the trace file."""
    presenter, config = _presenter(config)
    presenter.write_backtrace(fault, args, config)


def error_summary(fault, /):
    return ErrorPresenter().error_summary(fault)


__all__ = (
    "INTERNAL_ERROR_EXIT",
    "ErrorPresenter",
    "dump_unexpected_error",
    "show_error",
    "present_aggregate",
    "write_backtrace",
    "error_summary",
)
