"""
Text helper and terminal sink tests.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from postmortem.terminal import Terminal
from postmortem.utils import first_line, flatten


class FlattenTest(TestCase):

    def testNewlinesAndRunsCollapse(self):
        self.assertEqual(flatten("bad\n  thing"), "bad thing")

    def testEndsAreStripped(self):
        self.assertEqual(flatten("\n  Failed to connect:\n\n    refused\n"), "Failed to connect: refused")

    def testSingleSpacesArePreserved(self):
        self.assertEqual(flatten("a b  c"), "a b c")

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            flatten(None)


class FirstLineTest(TestCase):

    def testFirstLine(self):
        self.assertEqual(first_line("summary\ndetails"), "summary")

    def testEmpty(self):
        self.assertEqual(first_line(""), "")


class TerminalTest(TestCase):

    def setUp(self) -> None:
        self.stream = io.StringIO()
        self.terminal = Terminal(Console(file=self.stream, color_system=None, width=40))

    def testStringsAreVerbatim(self):
        self.terminal.output("[red]not markup[/red]")
        self.assertEqual(self.stream.getvalue(), "[red]not markup[/red]\n")

    def testLinesAreJoined(self):
        self.terminal.output(["first", "second"])
        self.assertEqual(self.stream.getvalue(), "first\nsecond\n")

    def testLongLinesAreNotWrapped(self):
        self.terminal.output("x" * 100)
        self.assertEqual(self.stream.getvalue(), "x" * 100 + "\n")

    def testTextKeepsStyles(self):
        self.terminal.output(Text("bold", style="bold"))
        self.assertEqual(self.stream.getvalue(), "bold\n")


if __name__ == '__main__':
    unittest.main()
