"""
Lexer tests (token grammar, collected faults, declared defaults).

Conventions
- Test method names follow CamelCase per project convention.
- argv slices carry a program name at index 0 and are parsed from index 1,
  the way the engine parses live command lines.
"""
import unittest
from unittest import TestCase

from cliengine import (
    InvalidValueError,
    MalformedSwitchError,
    MissingValueError,
    ParsedArguments,
    ParsedSwitch,
    RepeatedSwitchError,
    SwitchDefinition,
    SwitchDefinitionSet,
    UnexpectedValueError,
    UnknownSwitchError,
    inrange,
    parse,
)


class TestParse(TestCase):
    """Token grammar and the resulting ParsedArguments."""

    def setUp(self):
        self.definitions = SwitchDefinitionSet([
            SwitchDefinition("verbose", "-v", "--verbose", repeatable=True),
            SwitchDefinition("force", "-f", "--force"),
            SwitchDefinition("level", "-l", "--level", metavar="LEVEL", type=int, default=1, validator=inrange(1, 5)),
            SwitchDefinition("output", "-o", "--output", metavar="FILE", required=True),
        ])

    def parse(self, *tokens):
        return parse(["prog", *tokens], 1, self.definitions)

    def testEmptyLineOnlyCarriesDefaults(self):
        parsed = self.parse()
        self.assertEqual(parsed.switches, {"level": ParsedSwitch(0, [1], True)})
        self.assertEqual(parsed.args, [])
        self.assertEqual(parsed.errors, [])

    def testPositionalsInterleaveWithSwitches(self):
        parsed = self.parse("a", "-f", "b")
        self.assertEqual(parsed.args, ["a", "b"])
        self.assertEqual(parsed.switches["force"], ParsedSwitch(1, [], False))

    def testShortCluster(self):
        parsed = self.parse("-vvf")
        self.assertEqual(parsed.switches["verbose"].invocations, 2)
        self.assertEqual(parsed.switches["force"].invocations, 1)

    def testRepeatableAcrossTokens(self):
        parsed = self.parse("-v", "--verbose", "-v")
        self.assertEqual(parsed.switches["verbose"], ParsedSwitch(3, [], False))

    def testLongInlineValue(self):
        parsed = self.parse("--level=3")
        self.assertEqual(parsed.switches["level"], ParsedSwitch(1, [3], False))

    def testLongOptionalWithoutValueUsesDefault(self):
        parsed = self.parse("--level")
        self.assertEqual(parsed.switches["level"], ParsedSwitch(1, [1], True))

    def testShortAttachedValue(self):
        parsed = self.parse("-l4")
        self.assertEqual(parsed.switches["level"], ParsedSwitch(1, [4], False))

    def testOptionalArgumentNeverTakesNextToken(self):
        parsed = self.parse("-l", "4")
        self.assertEqual(parsed.switches["level"], ParsedSwitch(1, [1], True))
        self.assertEqual(parsed.args, ["4"])

    def testRequiredArgumentTakesNextToken(self):
        for tokens in (("--output", "x.txt"), ("-o", "x.txt"), ("-ox.txt",), ("--output=x.txt",)):
            with self.subTest(tokens=tokens):
                parsed = self.parse(*tokens)
                self.assertEqual(parsed.switches["output"], ParsedSwitch(1, ["x.txt"], False))
                self.assertEqual(parsed.args, [])

    def testClusterEndsAtArgumentSwitch(self):
        parsed = self.parse("-vfo", "x.txt")
        self.assertEqual(parsed.switches["verbose"].invocations, 1)
        self.assertEqual(parsed.switches["force"].invocations, 1)
        self.assertEqual(parsed.switches["output"].values, ["x.txt"])

    def testDoubleDashEndsSwitchParsing(self):
        parsed = self.parse("-f", "--", "-v", "--level=2")
        self.assertEqual(parsed.args, ["-v", "--level=2"])
        self.assertNotIn("verbose", parsed.switches)

    def testSingleDashIsPositional(self):
        self.assertEqual(self.parse("-").args, ["-"])

    def testMissingRequiredValue(self):
        parsed = self.parse("--output")
        self.assertEqual(len(parsed.errors), 1)
        self.assertIsInstance(parsed.errors[0], MissingValueError)
        self.assertIn("--output", parsed.errors[0].message)

    def testUnexpectedValue(self):
        parsed = self.parse("--force=yes")
        self.assertIsInstance(parsed.errors[0], UnexpectedValueError)
        self.assertNotIn("force", parsed.switches)

    def testUnknownSwitchSuggestsCloseFlag(self):
        parsed = self.parse("--forc")
        self.assertIsInstance(error := parsed.errors[0], UnknownSwitchError)
        self.assertIn("--force", error.options["suggestions"])
        self.assertEqual(error.options["hint"], "did you mean '--force'?")

    def testUnknownShortInsideCluster(self):
        parsed = self.parse("-vzf")
        self.assertEqual([type(error) for error in parsed.errors], [UnknownSwitchError])
        self.assertEqual(parsed.switches["force"].invocations, 1)

    def testRepeatedSwitch(self):
        parsed = self.parse("-f", "--force")
        self.assertIsInstance(parsed.errors[0], RepeatedSwitchError)
        self.assertEqual(parsed.switches["force"].invocations, 1)

    def testInvalidValueFromValidator(self):
        parsed = self.parse("--level=9")
        self.assertIsInstance(error := parsed.errors[0], InvalidValueError)
        self.assertIn("between 1 and 5", error.message)

    def testInvalidValueFromType(self):
        parsed = self.parse("-labc")
        self.assertIsInstance(parsed.errors[0], InvalidValueError)

    def testMalformedLongSwitch(self):
        parsed = self.parse("--=value")
        self.assertIsInstance(parsed.errors[0], MalformedSwitchError)

    def testLexingContinuesAfterErrors(self):
        parsed = self.parse("--nope", "a", "-f", "--level=7", "b")
        self.assertEqual(len(parsed.errors), 2)
        self.assertEqual(parsed.args, ["a", "b"])
        self.assertIn("force", parsed.switches)

    def testErrorsCarryMessages(self):
        parsed = self.parse("--nope", "--output")
        self.assertTrue(all(isinstance(error.message, str) and error.message for error in parsed.errors))

    def testStartAndSkip(self):
        parsed = parse(["build", "-f", "x"], 0, self.definitions, skip=0)
        self.assertEqual(parsed.args, ["x"])
        self.assertIn("force", parsed.switches)

    def testStartPastTheEnd(self):
        parsed = parse(["prog"], 1, self.definitions)
        self.assertEqual(parsed.args, [])
        self.assertEqual(parsed.errors, [])

    def testNegativeStartRejected(self):
        with self.assertRaises(ValueError):
            parse(["prog"], -1, self.definitions)


class TestParsedArguments(TestCase):
    """Helpers on the parse result."""

    def testValueReturnsLastValue(self):
        parsed = ParsedArguments({"level": ParsedSwitch(2, [1, 3])})
        self.assertEqual(parsed.value("level"), 3)

    def testValueFallsBack(self):
        parsed = ParsedArguments({"force": ParsedSwitch(1)})
        self.assertIsNone(parsed.value("force"))
        self.assertEqual(parsed.value("missing", "x"), "x")

    def testEquality(self):
        self.assertEqual(ParsedArguments({"a": ParsedSwitch(1)}, ["x"]), ParsedArguments({"a": ParsedSwitch(1)}, ["x"]))
        self.assertNotEqual(ParsedArguments(args=["x"]), ParsedArguments(args=["y"]))


if __name__ == "__main__":
    unittest.main()
