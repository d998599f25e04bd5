"""
Fault classification tests.

Scope
- Domain, transport and generic faults map to the right kind/identifier.
- Wrappers are peeled and contribute their target host.
- Optional fields (command, cause, jobs) are populated only when present.
- Aggregates expose their (host, fault) pairs.
"""
import unittest
from unittest import TestCase

from postmortem.classifier import FaultClassifier, FaultKind, StandardResolver, TargetHost, address, backend
from postmortem.faults import Code, Fault, Job, MultiJobFailure, TransportError, WrappedFault


class Command:
    def usage_text(self):
        return "usage: tool run TARGET"


class ClassifierTest(TestCase):

    def setUp(self) -> None:
        self.classifier = FaultClassifier()

    def testDomainFault(self):
        record = self.classifier.normalize(Fault("TOOL001", "alpha", "beta"))
        self.assertIs(record.kind, FaultKind.DOMAIN)
        self.assertEqual(record.identifier, "TOOL001")
        self.assertEqual(record.parameters, ("alpha", "beta"))
        self.assertIsNone(record.command)
        self.assertIsNone(record.jobs)

    def testDomainFaultCommand(self):
        command = Command()
        record = self.classifier.normalize(Fault("TOOL002", command=command))
        self.assertIs(record.command, command)

    def testGenericFaultUsesSentinel(self):
        record = self.classifier.normalize(KeyError("missing"))
        self.assertIs(record.kind, FaultKind.GENERIC)
        self.assertEqual(record.identifier, Code.GENERIC)
        self.assertEqual(record.parameters, (str(KeyError("missing")),))

    def testTransportFaultWithoutHost(self):
        record = self.classifier.normalize(TransportError("connection refused"))
        self.assertIs(record.kind, FaultKind.TRANSPORT)
        self.assertEqual(record.identifier, Code.GENERIC)
        self.assertEqual(record.parameters, ("connection refused",))
        self.assertIsNone(record.host)

    def testTransportFaultWithHost(self):
        host = TargetHost("web1", user="deploy", port=2222)
        record = self.classifier.normalize(TransportError("timed out"), host)
        self.assertIs(record.host, host)
        self.assertEqual(record.parameters, ("ssh", "deploy@web1:2222", "timed out"))

    def testTransportFaultCarriesItsHost(self):
        host = TargetHost("db1")
        record = self.classifier.normalize(TransportError("reset", target_host=host))
        self.assertEqual(record.parameters, ("ssh", "db1", "reset"))

    def testWrapperIsPeeled(self):
        host = TargetHost("web2")
        record = self.classifier.normalize(WrappedFault(Fault("TOOL003"), host))
        self.assertEqual(record.identifier, "TOOL003")
        self.assertIs(record.host, host)

    def testNestedWrappersArePeeled(self):
        record = self.classifier.normalize(WrappedFault(WrappedFault(ValueError("deep"))))
        self.assertIs(record.kind, FaultKind.GENERIC)
        self.assertEqual(record.message, "deep")

    def testConnectionErrorsBecomeTransportFaults(self):
        original = ConnectionRefusedError("refused")
        record = self.classifier.normalize(original)
        self.assertIs(record.kind, FaultKind.TRANSPORT)
        self.assertIsInstance(record.exception, TransportError)
        self.assertIs(record.exception.__cause__, original)
        self.assertIs(record.cause.exception, original)

    def testCauseChainIsClassified(self):
        try:
            try:
                raise ValueError("root")
            except ValueError as error:
                raise Fault("TOOL004") from error
        except Fault as fault:
            record = self.classifier.normalize(fault)
        self.assertEqual(record.cause.message, "root")
        self.assertIs(record.cause.kind, FaultKind.GENERIC)
        self.assertIsNone(record.cause.cause)

    def testCyclicCauseTerminates(self):
        first, second = ValueError("first"), ValueError("second")
        first.__cause__, second.__cause__ = second, first
        record = self.classifier.normalize(first)
        self.assertEqual(record.cause.message, "second")
        self.assertIsNone(record.cause.cause)

    def testAggregate(self):
        h1, h2 = TargetHost("h1"), TargetHost("h2")
        failure = MultiJobFailure([Job(h1, Fault("E1")), Job(h2, ValueError("oops"))])
        record = self.classifier.normalize(failure)
        self.assertIs(record.kind, FaultKind.DOMAIN)
        self.assertEqual(record.identifier, Code.MULTIPLE_FAILURES)
        self.assertEqual([host for host, _ in record.jobs], [h1, h2])
        self.assertEqual(self.classifier.normalize_aggregate(failure), record.jobs)

    def testNormalizeAggregateRejectsSingleFault(self):
        with self.assertRaises(TypeError):
            self.classifier.normalize_aggregate(ValueError("single"))

    def testCustomResolver(self):
        class Resolver(StandardResolver):
            def unwrap(self, fault, /):
                return Fault("REMAPPED", str(fault))

        record = FaultClassifier(Resolver()).normalize(OSError("disk"))
        self.assertEqual(record.identifier, "REMAPPED")
        self.assertEqual(record.parameters, ("disk",))


class AddressTest(TestCase):

    def testFullAddress(self):
        self.assertEqual(address(TargetHost("web", user="root", port=22)), "root@web:22")

    def testUserOnly(self):
        self.assertEqual(address(TargetHost("web", user="root")), "root@web")

    def testPortOnly(self):
        self.assertEqual(address(TargetHost("web", port=5985)), "web:5985")

    def testBareHost(self):
        self.assertEqual(address(TargetHost("web")), "web")

    def testBackend(self):
        self.assertEqual(backend(TargetHost("web")), "ssh")
        self.assertEqual(backend(TargetHost("win", backend="winrm")), "winrm")


if __name__ == '__main__':
    unittest.main()
