"""
Postmortem faults (the things that get reported).

Scope
- Code: canonical, stable string identifiers for the faults this package knows
  about. Every identifier is also a key of the message catalog.
- Fault: base type for domain faults; carries an identifier, ordered parameters
  for the identifier's message template and an optional command reference.
- TransportError: base type for remote-execution/transport faults.
- WrappedFault: a fault captured against a specific target host.
- Job / MultiJobFailure: an aggregate of independent per-target failures.
- InvalidPolicyAttributes: a catalog entry declares unknown display attributes.

Integration
- Application code raises Fault subclasses (or anything else).
- The classifier turns whatever was raised into a FaultRecord; the presenter
  renders the record. Nothing here knows how to render itself.
"""
from enum import StrEnum
from types import MappingProxyType


class Code(StrEnum):
    """
    identifiers reserved by postmortem itself.

    - PMINT0xx: internal/generic faults (GENERIC is the sentinel used for any
      fault that carries no identifier of its own).
    - PMTRN0xx: transport faults, with and without a known target host.
    - PMMUL0xx: aggregate failures.
    - PMDSP0xx: display policy authoring faults.
    """
    GENERIC            = "PMINT001"
    TRANSPORT          = "PMTRN001"
    TRANSPORT_HOSTLESS = "PMTRN002"
    MULTIPLE_FAILURES  = "PMMUL001"
    INVALID_POLICY     = "PMDSP001"


class Fault(Exception):
    """
    a domain fault: an identifier plus the parameters of its message.

    the identifier must name an entry of the message catalog. parameters are
    substituted positionally, so their order matters.
    """

    def __init__(self, identifier, /, *params, command=None):
        if not isinstance(identifier, str) or not identifier:
            raise TypeError("Fault() identifier must be a non-empty string")
        super().__init__(identifier, *params)
        self.identifier = identifier
        self.params = tuple(params)
        self.command = command

    def __str__(self):
        if not self.params:
            return self.identifier
        return "%s: %s" % (self.identifier, ", ".join(map(str, self.params)))


class InvalidPolicyAttributes(Fault):
    """
    raised when a catalog entry overrides display attributes that do not exist.

    `invalid` maps every offending key to the value it was given, so all of them
    can be fixed in one pass.
    """

    def __init__(self, invalid, /):
        self.invalid = MappingProxyType(dict(invalid))
        super().__init__(Code.INVALID_POLICY, ", ".join(map(str, self.invalid)))


class TransportError(Exception):
    """
    a failure of the remote-execution layer (connection, authentication, ...).

    the target host is optional; when known it is used to prefix the message
    with the connection address.
    """

    def __init__(self, message="", /, *, target_host=None):
        super().__init__(message)
        self.message = message
        self.target_host = target_host

    def __str__(self):
        return self.message


class WrappedFault(Exception):
    """
    a fault captured while working against a target host.

    the wrapper only carries context; the classifier peels it off and reports
    the contained fault.
    """

    def __init__(self, contained, /, target_host=None):
        if not isinstance(contained, BaseException):
            raise TypeError("WrappedFault() argument must be an exception")
        super().__init__(contained)
        self.contained = contained
        self.target_host = target_host

    def __str__(self):
        return str(self.contained)


class Job:
    """one unit of work that ran against one target host and failed."""

    __slots__ = ("target_host", "exception")

    def __init__(self, target_host, exception, /):
        self.target_host = target_host
        self.exception = exception

    def __repr__(self):
        return "Job(%r, %r)" % (self.target_host, self.exception)


class MultiJobFailure(ExceptionGroup):
    """
    an aggregate of per-target failures from one run.

    this is a domain fault (identifier MULTIPLE_FAILURES). the presenter writes
    the per-job details to the report file and shows only a summary.
    """

    def __new__(cls, jobs, /, *params):
        jobs = tuple(jobs)
        return super().__new__(cls, "multiple jobs failed", [job.exception for job in jobs])

    def __init__(self, jobs, /, *params):
        self.jobs = tuple(jobs)
        super().__init__("multiple jobs failed", [job.exception for job in self.jobs])
        self.identifier = Code.MULTIPLE_FAILURES
        self.params = tuple(params)
        self.command = None

    def derive(self, exceptions):
        # split()/subgroup() must not try to rebuild jobs from bare exceptions
        return ExceptionGroup(self.message, exceptions)


__all__ = (
    "Code",
    "Fault",
    "InvalidPolicyAttributes",
    "TransportError",
    "WrappedFault",
    "Job",
    "MultiJobFailure",
)
