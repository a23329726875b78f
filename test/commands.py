"""
Command and command registry tests.

Scope
- Validate construction-time faults for malformed command metadata.
- Validate @command binding and result normalization.
- Validate registry uniqueness, default command and name ordering.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Command, command, CommandRegistry).
"""
import unittest
from unittest import TestCase

from cliengine import (
    Command,
    CommandRegistry,
    MalformedResultError,
    SwitchDefinition,
    SwitchDefinitionSet,
    command,
)


class TestCommand(TestCase):
    """Behavioral tests for Command construction and dispatch."""

    def testMetadata(self):
        instance = Command("build", descr="build it", details="builds everything", args={"target": "what to build"})
        self.assertEqual(instance.name, "build")
        self.assertEqual(instance.descr, "build it")
        self.assertEqual(instance.details, "builds everything")
        self.assertEqual(dict(instance.args), {"target": "what to build"})
        self.assertEqual(len(instance.switches), 0)
        self.assertIsNone(instance.callback)

    def testArgsAcceptNamesAndPairs(self):
        instance = Command("copy", args=["source", ("target", "where to copy")])
        self.assertEqual(list(instance.args.items()), [("source", None), ("target", "where to copy")])

    def testArgsAreReadOnly(self):
        instance = Command("copy", args=["source"])
        with self.assertRaises(TypeError):
            instance.args["other"] = None

    def testDuplicateArgsRejected(self):
        with self.assertRaises(ValueError):
            Command("copy", args=["source", "source"])

    def testStringArgsRejected(self):
        with self.assertRaises(TypeError):
            Command("copy", args="source")

    def testSwitchesAreNormalizedToASet(self):
        force = SwitchDefinition("force", "-f")
        instance = Command("build", switches=[force])
        self.assertIsInstance(instance.switches, SwitchDefinitionSet)
        self.assertIs(instance.switches["force"], force)
        self.assertIs(Command("test", switches=force).switches["force"], force)

    def testNonSwitchesRejected(self):
        with self.assertRaises(TypeError):
            Command("build", switches=["-f"])

    def testInvalidNamesRejected(self):
        for name in ("", "-build", "two words"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    Command(name)
        with self.assertRaises(TypeError):
            Command(None)

    def testEmptyDescriptionRejected(self):
        with self.assertRaises(ValueError):
            Command("build", descr="   ")

    def testDecoratorBindsCallback(self):
        @command("build")
        def build(context, args):
            return 3

        self.assertIsInstance(build, Command)
        self.assertEqual(build.process_command(None, []), 3)
        self.assertEqual(build(None, []), 3)

    def testDecoratorAppliesOnlyOnce(self):
        decorator = command("build")
        decorator(lambda context, args: 0)
        with self.assertRaises(TypeError):
            decorator(lambda context, args: 0)

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            command("build")(42)

    def testCallbackReceivesContextAndArgs(self):
        received = []

        @command("build")
        def build(context, args):
            received.append((context, args))

        self.assertEqual(build.process_command("ctx", ("a", "b")), 0)
        self.assertEqual(received, [("ctx", ["a", "b"])])

    def testNoneMeansSuccess(self):
        self.assertEqual(command("build")(lambda context, args: None)(None, []), 0)

    def testUnboundCommandSucceeds(self):
        self.assertEqual(Command("build").process_command(None, []), 0)

    def testMalformedResults(self):
        for result in ("0", 1.0, True, [0]):
            with self.subTest(result=result):
                instance = command("build")(lambda context, args: result)
                with self.assertRaises(MalformedResultError):
                    instance.process_command(None, [])


class TestCommandRegistry(TestCase):
    """Registration, lookup and default command."""

    def setUp(self):
        self.registry = CommandRegistry()
        self.build = Command("build")
        self.test = Command("test")

    def testLookup(self):
        self.registry.register(self.build)
        self.assertIs(self.registry.lookup("build"), self.build)
        self.assertIsNone(self.registry.lookup("deploy"))
        self.assertIn("build", self.registry)

    def testLastRegistrationWins(self):
        self.registry.register(self.build)
        replacement = self.registry.register(Command("build"))
        self.assertIs(self.registry.lookup("build"), replacement)
        self.assertEqual(len(self.registry), 1)

    def testReplacingTheDefaultRepointsIt(self):
        self.registry.set_default(self.build)
        replacement = self.registry.register(Command("build"))
        self.assertIs(self.registry.default, replacement)

    def testSetDefaultReplacesARegisteredCommand(self):
        self.registry.register(self.build)
        replacement = self.registry.set_default(Command("build"))
        self.assertIs(self.registry.default, replacement)
        self.assertIs(self.registry.lookup("build"), replacement)

    def testReRegisteringSameCommandIsHarmless(self):
        self.registry.register(self.build)
        self.registry.register(self.build)
        self.assertEqual(len(self.registry), 1)

    def testRegisterRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            self.registry.register("build")

    def testDefaultCommand(self):
        self.assertFalse(self.registry.has_default())
        self.assertIsNone(self.registry.default)
        self.registry.set_default(self.build)
        self.assertTrue(self.registry.has_default())
        self.assertIs(self.registry.default, self.build)
        self.assertIs(self.registry.lookup("build"), self.build)

    def testIterationIsSortedByName(self):
        self.registry.register(self.test)
        self.registry.register(self.build)
        self.registry.register(Command("deploy"))
        self.assertEqual([instance.name for instance in self.registry], ["build", "deploy", "test"])
        self.assertEqual(self.registry.names, ["build", "deploy", "test"])


if __name__ == "__main__":
    unittest.main()
