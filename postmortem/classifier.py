"""
Fault classification: anything raised -> FaultRecord.

The classifier is the only place that inspects the shape of a raised fault.
Everything downstream works on FaultRecord, whose `kind` tells the presenter
which message strategy applies:

- DOMAIN: a Fault (or MultiJobFailure) with its own identifier and parameters.
- TRANSPORT: a TransportError; reported under the generic identifier with a
  message naming the connection when the target host is known.
- GENERIC: anything else; the generic identifier with the raw message.

Unwrapping is delegated to a resolver (StandardResolver unless the caller
supplies one), so applications can teach postmortem about their own wrappers.
"""
import logging
from collections import namedtuple
from enum import Enum, auto
from types import MappingProxyType

from .faults import Code, Fault, MultiJobFailure, TransportError, WrappedFault

logger = logging.getLogger(__name__)


class FaultKind(Enum):
    DOMAIN = auto()
    TRANSPORT = auto()
    GENERIC = auto()


FaultRecord = namedtuple("FaultRecord", (
    "kind",
    "identifier",
    "parameters",
    "host",
    "command",
    "cause",
    "jobs",
    "message",
    "exception",
))
FaultRecord.__doc__ = """
normalized, immutable description of one fault.

- identifier is never empty (Code.GENERIC when the fault has none).
- parameters are ordered values for the identifier's message template.
- host/command/cause are None when absent; jobs is None unless aggregate.
"""


class TargetHost:
    """
    minimal host reference: a hostname plus its connection settings.

    connection settings recognized for display: user, port, backend.
    """

    __slots__ = ("hostname", "config")

    def __init__(self, hostname, /, **config):
        if not isinstance(hostname, str):
            raise TypeError("TargetHost() argument must be a string")
        self.hostname = hostname
        self.config = MappingProxyType(config)

    def __repr__(self):
        return "TargetHost(%r)" % self.hostname


def address(host, /):
    """format a host as user@hostname:port, leaving out unset parts."""
    config = getattr(host, "config", {})
    user = "" if config.get("user") is None else "%s@" % config["user"]
    port = "" if config.get("port") is None else ":%s" % config["port"]
    return "%s%s%s" % (user, host.hostname, port)


def backend(host, /):
    return getattr(host, "config", {}).get("backend") or "ssh"


class StandardResolver:
    """
    peels WrappedFault layers and upgrades bare socket faults to TransportError.

    wrap() is the inverse used when a fault captured for one target is
    presented again (as in aggregate reports).
    """

    def unwrap(self, fault, /):
        while isinstance(fault, WrappedFault):
            fault = fault.contained
        if isinstance(fault, (ConnectionError, TimeoutError)):
            try:
                raise TransportError(str(fault) or type(fault).__name__) from fault
            except TransportError as upgraded:
                return upgraded
        return fault

    def wrap(self, fault, target_host=None, /):
        return WrappedFault(fault, target_host)


class FaultClassifier:

    def __init__(self, resolver=None, /):
        self.resolver = resolver if resolver is not None else StandardResolver()

    def normalize(self, fault, target_host=None, /):
        return self._normalize(fault, target_host, set(), True)

    def normalize_aggregate(self, fault, /):
        """the (target host, fault) pairs of an aggregate failure."""
        unwrapped = self.resolver.unwrap(fault)
        if not isinstance(unwrapped, MultiJobFailure):
            raise TypeError("normalize_aggregate() argument must be an aggregate failure")
        return tuple((job.target_host, job.exception) for job in unwrapped.jobs)

    def _normalize(self, fault, target_host, seen, resolve):
        if target_host is None and isinstance(fault, WrappedFault):
            target_host = fault.target_host
        # causes are reported as raised, only the outermost fault is resolved
        exception = self.resolver.unwrap(fault) if resolve else fault
        seen.add(id(exception))
        if target_host is None and isinstance(exception, TransportError):
            target_host = exception.target_host

        jobs = None
        if isinstance(exception, (Fault, MultiJobFailure)):
            kind = FaultKind.DOMAIN
            identifier = exception.identifier or Code.GENERIC
            parameters = tuple(exception.params)
            message = str(exception)
            if isinstance(exception, MultiJobFailure):
                jobs = tuple((job.target_host, job.exception) for job in exception.jobs)
        elif isinstance(exception, TransportError):
            kind = FaultKind.TRANSPORT
            identifier = Code.GENERIC
            message = str(exception)
            if target_host is None:
                parameters = (message,)
            else:
                parameters = (backend(target_host), address(target_host), message)
        else:
            kind = FaultKind.GENERIC
            identifier = Code.GENERIC
            message = str(exception)
            parameters = (message,)

        cause = None
        if isinstance(exception, BaseException):
            following = exception.__cause__
            if following is None and not exception.__suppress_context__:
                following = exception.__context__
            if following is not None and id(following) not in seen:
                cause = self._normalize(following, None, seen, False)

        logger.debug("classified %s as %s/%s", type(exception).__name__, kind.name, identifier)
        return FaultRecord(
            kind=kind,
            identifier=str(identifier),
            parameters=parameters,
            host=target_host,
            command=getattr(exception, "command", None),
            cause=cause,
            jobs=jobs,
            message=message,
            exception=exception,
        )


__all__ = (
    "FaultKind",
    "FaultRecord",
    "TargetHost",
    "StandardResolver",
    "FaultClassifier",
    "address",
    "backend",
)
