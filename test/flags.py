# python
"""
Flags module behavioral tests.

Scope
- Validate Flag construction rules (names, converters, metavars, zero defaults).
- Validate FlagSet.parse syntax: single/double dashes, inline values, boolean flags,
  '--' and '-' terminators, and value flags consuming dash-prefixed tokens.
- Validate parse errors (syntax, unknown flag, missing value, invalid value) and
  their payload (command, flag, hint, status).
- Validate introspection (isset, visit, visit_all, lookup, mapping access).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argroute import Flag, FlagSet, boolean
from argroute.faults import (
    BadFlagSyntaxError,
    FaultCode,
    FlagError,
    FlagValueRequiredError,
    HelpRequestedError,
    InvalidFlagValueError,
    UnknownFlagError,
)


class TestFlag(TestCase):
    """Behavioral tests for Flag declarations."""

    def testBooleanLiterals(self):
        for text in ("1", "t", "T", "TRUE", "true", "True"):
            self.assertIs(boolean(text), True)
        for text in ("0", "f", "F", "FALSE", "false", "False"):
            self.assertIs(boolean(text), False)
        with self.assertRaises(ValueError):
            boolean("yes")

    def testNamesRequired(self):
        with self.assertRaises(TypeError):
            Flag()

    def testNamesRejectDashesAndEquals(self):
        with self.assertRaises(ValueError):
            Flag("-force")
        with self.assertRaises(ValueError):
            Flag("a=b")
        with self.assertRaises(ValueError):
            Flag("")

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Flag("x", "x")

    def testBoolTypeMapsToBooleanConverter(self):
        flag = Flag("verbose", type=bool)
        self.assertTrue(flag.boolean)
        self.assertIs(flag.value, False)
        self.assertIsNone(flag.metavar)

    def testMetavarDefaults(self):
        self.assertEqual(Flag("name").metavar, "string")
        self.assertEqual(Flag("count", type=int).metavar, "int")
        self.assertEqual(Flag("ratio", type=float).metavar, "float")
        self.assertEqual(Flag("path", type=lambda text: text).metavar, "value")
        self.assertEqual(Flag("path", metavar="PATH").metavar, "PATH")

    def testZeroDefaults(self):
        self.assertTrue(Flag("name").zero)
        self.assertFalse(Flag("name", default="origin").zero)
        self.assertTrue(Flag("count", type=int).zero)
        self.assertFalse(Flag("count", type=int, default=3).zero)

    def testDescrDefaultsToNone(self):
        self.assertIsNone(Flag("name").descr)
        self.assertEqual(Flag("name", descr="who").descr, "who")

    def testCanonicalName(self):
        self.assertEqual(Flag("force", "f").name, "force")


class TestFlagSetParse(TestCase):
    """Behavioral tests for FlagSet.parse syntax."""

    def setUp(self):
        self.flags = FlagSet("deploy", command="deploy")
        self.force = self.flags.boolean("force", "f", descr="skip confirmation")
        self.replicas = self.flags.integer("replicas", default=1)
        self.message = self.flags.string("message")

    def testBooleanDoesNotConsumeNextToken(self):
        self.assertEqual(self.flags.parse(["-force", "prod"]), ["prod"])
        self.assertIs(self.force.value, True)

    def testDoubleDashIsEquivalent(self):
        self.flags.parse(["--force", "--replicas", "4"])
        self.assertIs(self.force.value, True)
        self.assertEqual(self.replicas.value, 4)

    def testInlineValues(self):
        self.flags.parse(["-replicas=3", "--message=hello world"])
        self.assertEqual(self.replicas.value, 3)
        self.assertEqual(self.message.value, "hello world")

    def testInlineBooleanValue(self):
        self.flags.parse(["-force=false"])
        self.assertIs(self.force.value, False)
        self.assertTrue(self.flags.isset("force"))

    def testValueFlagConsumesDashToken(self):
        self.flags.parse(["-message", "-x"])
        self.assertEqual(self.message.value, "-x")

    def testDoubleDashTerminatorIsConsumed(self):
        self.assertEqual(self.flags.parse(["-f", "--", "-replicas=2"]), ["-replicas=2"])
        self.assertEqual(self.replicas.value, 1)

    def testSingleDashStopsParsing(self):
        self.assertEqual(self.flags.parse(["-", "-force"]), ["-", "-force"])
        self.assertIs(self.force.value, False)

    def testNonFlagStopsParsing(self):
        self.assertEqual(self.flags.parse(["prod", "-force"]), ["prod", "-force"])
        self.assertEqual(self.flags.args, ["prod", "-force"])

    def testAliasesShareOneFlag(self):
        self.flags.parse(["-f"])
        self.assertTrue(self.flags.isset("force"))
        self.assertTrue(self.flags.isset("f"))
        self.assertIs(self.flags["force"], True)
        self.assertEqual(len(self.flags), 3)

    def testParseResetsPreviousValues(self):
        self.flags.parse(["-force", "-replicas=9"])
        self.flags.parse([])
        self.assertIs(self.force.value, False)
        self.assertEqual(self.replicas.value, 1)
        self.assertFalse(self.flags.isset("force"))

    def testExplicitDefaultCountsAsSet(self):
        self.flags.parse(["-message="])
        self.assertTrue(self.flags.isset("message"))
        self.assertEqual(self.message.value, "")


class TestFlagSetErrors(TestCase):
    """Behavioral tests for FlagSet.parse failures."""

    def setUp(self):
        self.flags = FlagSet("deploy", command="deploy")
        self.flags.boolean("force")
        self.flags.integer("replicas")
        self.flags.string("message")

    def testBadSyntax(self):
        for token in ("---force", "-=x", "--=x"):
            with self.assertRaises(BadFlagSyntaxError) as context:
                self.flags.parse([token])
            self.assertEqual(context.exception.message, "bad flag syntax: %s" % token)

    def testUnknownFlagCarriesSuggestion(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.flags.parse(["-forc"])
        error = context.exception
        self.assertEqual(error.message, "flag provided but not defined: -forc")
        self.assertEqual(error.flag, "forc")
        self.assertEqual(error.command, "deploy")
        self.assertEqual(error.options["hint"], "did you mean '-force'?")
        self.assertEqual(error.code, FaultCode.UNKNOWN_FLAG)

    def testUnknownFlagWithoutSuggestion(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.flags.parse(["-zzz"])
        self.assertIsNone(context.exception.options["hint"])

    def testValueRequired(self):
        with self.assertRaises(FlagValueRequiredError) as context:
            self.flags.parse(["-message"])
        self.assertEqual(context.exception.message, "flag needs an argument: -message")

    def testInvalidInteger(self):
        with self.assertRaises(InvalidFlagValueError) as context:
            self.flags.parse(["-replicas=many"])
        self.assertTrue(context.exception.message.startswith("invalid value 'many' for flag -replicas"))

    def testInvalidBoolean(self):
        with self.assertRaises(InvalidFlagValueError) as context:
            self.flags.parse(["-force=maybe"])
        self.assertEqual(
            context.exception.message,
            "invalid boolean value 'maybe' for flag -force: parse error",
        )

    def testFlagErrorsExitWithStatusTwo(self):
        with self.assertRaises(FlagError) as context:
            self.flags.parse(["-nope"])
        self.assertEqual(context.exception.status, 2)

    def testUndeclaredHelpRequestsHelp(self):
        for token in ("-h", "--help", "-help=true"):
            with self.assertRaises(HelpRequestedError) as context:
                self.flags.parse([token, "prod"])
            error = context.exception
            self.assertEqual(error.status, 0)
            self.assertEqual(error.code, FaultCode.HELP_REQUESTED)
            self.assertEqual(error.command, "deploy")

    def testDeclaredHelpIsAnOrdinaryFlag(self):
        flags = FlagSet("connect")
        host = flags.string("h", descr="host")
        self.assertEqual(flags.parse(["-h", "example.org"]), [])
        self.assertEqual(host.value, "example.org")

    def testGlobalSetHasNoCommand(self):
        flags = FlagSet("tool")
        with self.assertRaises(UnknownFlagError) as context:
            flags.parse(["-x"])
        self.assertIsNone(context.exception.command)


class TestFlagSetIntrospection(TestCase):
    """Behavioral tests for FlagSet lookup and enumeration."""

    def testDuplicateNamesAcrossFlagsRejected(self):
        flags = FlagSet()
        flags.boolean("force", "f")
        with self.assertRaises(ValueError):
            flags.string("f")

    def testVisitAndVisitAllAreSorted(self):
        flags = FlagSet()
        flags.boolean("zeta")
        flags.boolean("alpha")
        flags.boolean("mid")
        flags.parse(["-zeta", "-alpha"])
        self.assertEqual([flag.name for flag in flags.visit()], ["alpha", "zeta"])
        self.assertEqual([flag.name for flag in flags.visit_all()], ["alpha", "mid", "zeta"])
        self.assertEqual([flag.name for flag in flags], ["alpha", "mid", "zeta"])

    def testLookupAndContains(self):
        flags = FlagSet()
        force = flags.boolean("force", "f")
        self.assertIs(flags.lookup("f"), force)
        self.assertIsNone(flags.lookup("nope"))
        self.assertIn("force", flags)
        self.assertNotIn("nope", flags)

    def testMissingKeyRaisesKeyError(self):
        with self.assertRaises(KeyError):
            FlagSet()["nope"]

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            FlagSet(3)


if __name__ == "__main__":
    unittest.main()
