# python
"""
Faults module behavioral tests.

Scope
- Validate trigger(): raise outside shell mode, print and exit inside it.
- Validate copy.replace option merging and per-instance status overrides.
- Validate rich rendering (header, message, hint, host docs and codes).
- Validate warnings surfacing through the warnings module.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argroute.faults import (
    CommandException,
    FaultCode,
    FlagError,
    MissingCommandError,
    UnknownCommandError,
    UnknownFlagError,
    UnreachableSlotWarning,
    getdoc,
    trigger,
)


def plain():
    stream = io.StringIO()
    return Console(file=stream, color_system=None, force_terminal=False, width=120), stream


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownCommandError) as context:
            trigger(UnknownCommandError("invalid command: x"), prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")
        self.assertEqual(str(context.exception), "invalid command: x")

    def testShellModeExitsWithClassStatus(self):
        console, stream = plain()
        with self.assertRaises(SystemExit) as context:
            trigger(MissingCommandError("missing command"), shell=True, console=console, prog="tool")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("missing command", stream.getvalue())

    def testFlagErrorsExitWithTwo(self):
        console, _ = plain()
        with self.assertRaises(SystemExit) as context:
            trigger(UnknownFlagError("flag provided but not defined: -x"), shell=True, console=console)
        self.assertEqual(context.exception.code, 2)

    def testStatusOverride(self):
        console, _ = plain()
        with self.assertRaises(SystemExit) as context:
            trigger(FlagError("boom"), shell=True, console=console, status=64)
        self.assertEqual(context.exception.code, 64)

    def testRejectsForeignObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testReplaceMergesOptions(self):
        fault = UnknownCommandError("invalid command: x", hint="try y")
        copied = copy.replace(fault, prog="tool")
        self.assertIsNot(copied, fault)
        self.assertEqual(copied.message, fault.message)
        self.assertEqual(dict(copied.options), {"hint": "try y", "prog": "tool"})
        self.assertEqual(dict(fault.options), {"hint": "try y"})


class TestRendering(TestCase):
    """Behavioral tests for rich rendering of faults."""

    def testHeaderMessageAndHint(self):
        console, stream = plain()
        fault = UnknownCommandError("invalid command: x", prog="tool", hint="did you mean 'y'?")
        console.print(fault)
        output = stream.getvalue()
        self.assertIn("[ tool — 11103 | Unknown Command ]", output)
        self.assertIn("invalid command: x", output)
        self.assertIn(" → did you mean 'y'?", output)

    def testUncodedFaultRendersPlaceholder(self):
        console, stream = plain()
        console.print(CommandException("generic"))
        self.assertIn("[ argroute — ----- | Command Error ]", stream.getvalue())

    def testHostCodesAndDocs(self):
        main = sys.modules["__main__"]
        with (
            mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_COMMAND: "E-CMD"}, create=True),
            mock.patch.object(main, "__docs__", {FaultCode.UNKNOWN_COMMAND: "see the manual"}, create=True),
        ):
            console, stream = plain()
            console.print(UnknownCommandError("invalid command: x", prog="tool"))
            self.assertEqual(getdoc(FaultCode.UNKNOWN_COMMAND), "see the manual")
        self.assertIn("E-CMD", stream.getvalue())
        self.assertIn("see the manual", stream.getvalue())

    def testFancyRenderingUsesPanel(self):
        console, stream = plain()
        console.print(UnknownCommandError("invalid command: x", prog="tool", fancy=True))
        self.assertIn("╭", stream.getvalue())

    def testGetdocIgnoresUnknownCodes(self):
        self.assertIsNone(getdoc(12345))

    def testNormalizeDefaultsToValue(self):
        self.assertEqual(FaultCode.MISSING_PREARG.normalize(), "11101")


class TestWarnings(TestCase):
    """Behavioral tests for CommandWarning surfacing."""

    def testWarningsGoThroughWarningsModule(self):
        with self.assertWarns(UnreachableSlotWarning):
            trigger(UnreachableSlotWarning("copy: argument(s) <dest> follow a variadic slot"))

    def testShellWarningsArePrintedWithoutExit(self):
        console, stream = plain()
        trigger(UnreachableSlotWarning("slot hazard", prog="tool"), shell=True, console=console)
        self.assertIn("Unreachable Argument Slot", stream.getvalue())
        self.assertIn("slot hazard", stream.getvalue())


if __name__ == "__main__":
    unittest.main()
