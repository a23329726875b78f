"""
Switch execution tests (handler results, context, sequencer).

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from cliengine import (
    Complete,
    Context,
    Continue,
    MalformedResultError,
    Outcome,
    ParsedArguments,
    ParsedSwitch,
    SwitchDefinitionSet,
    run,
    switch,
)


class TestOutcomes(TestCase):
    """Continue / Complete variants."""

    def testContinueIsSingleton(self):
        self.assertIs(Continue(), Continue())
        self.assertIsNone(Continue().code)
        self.assertIs(copy.copy(Continue()), Continue())

    def testCompleteCarriesCode(self):
        self.assertEqual(Complete(3).code, 3)
        self.assertEqual(Complete().code, 0)
        self.assertEqual(Complete(2), Complete(2))
        self.assertNotEqual(Complete(2), Complete(1))
        self.assertEqual(repr(Complete(2)), "Complete(2)")

    def testCompleteRejectsBadCodes(self):
        with self.assertRaises(TypeError):
            Complete("1")
        with self.assertRaises(TypeError):
            Complete(True)
        with self.assertRaises(ValueError):
            Complete(-1)

    def testOutcomeIsAbstract(self):
        with self.assertRaises(TypeError):
            Outcome()

    def testMatchStatement(self):
        match Complete(4):
            case Complete(code):
                self.assertEqual(code, 4)
            case _:
                self.fail("Complete did not match")


class TestContext(TestCase):
    """Per-invocation context."""

    def testFieldsAndOptions(self):
        class Engine:
            output = "writer"

        engine = Engine()
        context = Context(engine, {"user": 1}, verbosity=2)
        self.assertIs(context.engine, engine)
        self.assertEqual(context.output, "writer")
        self.assertEqual(context.additional, {"user": 1})
        self.assertEqual(context.options.verbosity, 2)
        self.assertIsNone(context.command)
        self.assertIsNone(context.parsed)


class TestRun(TestCase):
    """The switch execution sequencer."""

    def setUp(self):
        self.calls = []

    def handler(self, name, result):
        @switch(name, "--" + name)
        def callback(invocations, values, defaulted, context):
            self.calls.append(name)
            return result

        return callback

    def testRunsInDefinitionOrder(self):
        definitions = SwitchDefinitionSet([self.handler("one", Continue()), self.handler("two", Continue())])
        parsed = ParsedArguments({"two": ParsedSwitch(1), "one": ParsedSwitch(1)})
        self.assertIs(run(definitions, parsed, None), Continue())
        self.assertEqual(self.calls, ["one", "two"])

    def testSkipsAbsentSwitches(self):
        definitions = SwitchDefinitionSet([self.handler("one", Continue()), self.handler("two", Continue())])
        run(definitions, ParsedArguments({"two": ParsedSwitch(1)}), None)
        self.assertEqual(self.calls, ["two"])

    def testCompleteShortCircuits(self):
        definitions = SwitchDefinitionSet([
            self.handler("one", Continue()),
            self.handler("two", Complete(0)),
            self.handler("three", Continue()),
        ])
        parsed = ParsedArguments({name: ParsedSwitch(1) for name in ("one", "two", "three")})
        self.assertEqual(run(definitions, parsed, None), Complete(0))
        self.assertEqual(self.calls, ["one", "two"])

    def testMalformedResultIsFatal(self):
        definitions = SwitchDefinitionSet([self.handler("one", None), self.handler("two", Continue())])
        parsed = ParsedArguments({"one": ParsedSwitch(1), "two": ParsedSwitch(1)})
        with self.assertRaises(MalformedResultError) as context:
            run(definitions, parsed, None)
        self.assertIsNone(context.exception.result)
        self.assertIsInstance(context.exception, TypeError)
        self.assertEqual(self.calls, ["one"])

    def testHandlerReceivesParsedEntry(self):
        received = []

        @switch("level", "--level", metavar="LEVEL")
        def level(invocations, values, defaulted, context):
            received.append((invocations, values, defaulted, context))
            return Continue()

        run(SwitchDefinitionSet([level]), ParsedArguments({"level": ParsedSwitch(2, ["a", "b"], False)}), "ctx")
        self.assertEqual(received, [(2, ["a", "b"], False, "ctx")])

    def testEmptyWalkContinues(self):
        self.assertIs(run(SwitchDefinitionSet(), ParsedArguments(), None), Continue())


if __name__ == "__main__":
    unittest.main()
