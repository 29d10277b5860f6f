"""
Definitions module behavioral tests (argument definitions and the registry).

Scope
- ArgumentDefinition construction (text kept verbatim), immutability and equality.
- validate(): empty name/description/usage are rejected with DefinitionError.
- ensure_help(): default help injection and case-insensitive detection.
- Registry: ordering, normalized lookups, duplicate rejection.
"""
import unittest
from unittest import TestCase

from lightargs import (
    HELP,
    ArgumentDefinition,
    ComparisonPolicy,
    DefinitionError,
    FaultCode,
    Registry,
    ensure_help,
    validate,
)


class TestArgumentDefinition(TestCase):

    def testDefaults(self):
        d = ArgumentDefinition("output", "Where to write.", "--output <PATH>")
        self.assertFalse(d.flag)
        self.assertFalse(d.required)
        self.assertEqual(d.token, "--output")

    def testFieldsAreKeptAsGiven(self):
        d = ArgumentDefinition(" output", " Where to write. ", "  --output <PATH>")
        self.assertEqual(d.name, " output")
        self.assertEqual(d.description, " Where to write. ")
        self.assertEqual(d.usage, "  --output <PATH>")
        self.assertEqual(d.token, "-- output")

    def testFieldsAreReadOnly(self):
        d = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        with self.assertRaises(AttributeError):
            d.name = "quiet"

    def testNonStringFieldsRejected(self):
        with self.assertRaises(TypeError):
            ArgumentDefinition(None, "Print more.", "--verbose")
        with self.assertRaises(TypeError):
            ArgumentDefinition("verbose", 1, "--verbose")

    def testEqualityAndHash(self):
        a = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        b = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        c = ArgumentDefinition("verbose", "Print more.", "--verbose")
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, c)

    def testReplace(self):
        d = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        r = d.__replace__(required=True)
        self.assertTrue(r.required)
        self.assertTrue(r.flag)
        self.assertFalse(d.required)

    def testRepr(self):
        d = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        self.assertEqual(
            repr(d),
            "argument-definition(name='verbose', description='Print more.', usage='--verbose', flag=True, required=False)",
        )


class TestValidate(TestCase):

    def testValidDefinitionPasses(self):
        d = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        self.assertIs(validate(d), d)

    def testMissingName(self):
        with self.assertRaises(DefinitionError) as context:
            validate(ArgumentDefinition("", "Print more.", "--verbose"))
        self.assertIn("missing a name", str(context.exception))

    def testWhitespaceIsNotEmpty(self):
        d = ArgumentDefinition("   ", "   ", "   ")
        self.assertIs(validate(d), d)

    def testMissingDescriptionNamesArgument(self):
        with self.assertRaises(DefinitionError) as context:
            validate(ArgumentDefinition("verbose", "", "--verbose"))
        self.assertEqual(context.exception.argument, "verbose")
        self.assertIn("'--verbose' is missing a description", str(context.exception))

    def testMissingUsageNamesArgument(self):
        with self.assertRaises(DefinitionError) as context:
            validate(ArgumentDefinition("verbose", "Print more.", ""))
        self.assertEqual(context.exception.argument, "verbose")
        self.assertIn("missing a usage string", str(context.exception))

    def testRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            validate({"name": "verbose"})


class TestEnsureHelp(TestCase):

    def testInjectsDefaultHelp(self):
        d = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
        definitions = ensure_help([d])
        self.assertEqual(definitions, (d, HELP))

    def testDefaultHelpShape(self):
        self.assertEqual(HELP.name, "help")
        self.assertTrue(HELP.flag)
        self.assertFalse(HELP.required)
        self.assertEqual(HELP.description, "Displays the help page.")
        self.assertEqual(HELP.usage, "--help")

    def testKeepsCustomHelpInAnyCasing(self):
        custom = ArgumentDefinition("HeLp", "Custom help.", "--HeLp", flag=True)
        self.assertEqual(ensure_help([custom]), (custom,))

    def testDoesNotMutateInput(self):
        definitions = [ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)]
        ensure_help(definitions)
        self.assertEqual(len(definitions), 1)


class TestRegistry(TestCase):

    def setUp(self):
        self.definitions = [
            ArgumentDefinition("optionalArg", "An optional non-flag arg.", "--optionalArg <VALUE>"),
            ArgumentDefinition("requiredFlagArg", "A required flag arg.", "--requiredFlagArg", flag=True, required=True),
        ]

    def testOrderWithSynthesizedHelpLast(self):
        registry = Registry(self.definitions)
        self.assertEqual([d.name for d in registry], ["optionalArg", "requiredFlagArg", "help"])
        self.assertTrue(registry.synthesized)
        self.assertIs(registry.help, HELP)
        self.assertEqual(len(registry), 3)

    def testCustomHelpIsKept(self):
        custom = ArgumentDefinition("help", "Custom help.", "--help", flag=True)
        registry = Registry([custom, *self.definitions])
        self.assertFalse(registry.synthesized)
        self.assertIs(registry.help, custom)
        self.assertEqual(len(registry), 3)

    def testCaseSensitiveLookup(self):
        registry = Registry(self.definitions, ComparisonPolicy.CASE_SENSITIVE)
        self.assertIn("optionalArg", registry)
        self.assertNotIn("optionalarg", registry)
        with self.assertRaises(KeyError):
            registry["OPTIONALARG"]

    def testCaseInsensitiveLookup(self):
        registry = Registry(self.definitions, ComparisonPolicy.CASE_INSENSITIVE)
        self.assertIn("OPTIONALARG", registry)
        self.assertEqual(registry["optionalarg"].name, "optionalArg")

    def testFirstInvalidDefinitionAborts(self):
        with self.assertRaises(DefinitionError) as context:
            Registry([
                *self.definitions,
                ArgumentDefinition("broken", "", "--broken"),
                ArgumentDefinition("", "Nameless.", "--x"),
            ])
        self.assertEqual(context.exception.argument, "broken")

    def testDuplicatesRejected(self):
        with self.assertRaises(DefinitionError) as context:
            Registry([*self.definitions, self.definitions[0]])
        self.assertIs(context.exception.code, FaultCode.DUPLICATED_DEFINITION)

    def testDuplicatesUnderCaseInsensitivePolicy(self):
        other = ArgumentDefinition("OptionalArg", "Shadow.", "--OptionalArg <VALUE>")
        Registry([*self.definitions, other], ComparisonPolicy.CASE_SENSITIVE)
        with self.assertRaises(DefinitionError):
            Registry([*self.definitions, other], ComparisonPolicy.CASE_INSENSITIVE)

    def testRejectsSingleDefinition(self):
        with self.assertRaises(TypeError):
            Registry(self.definitions[0])

    def testRejectsBadPolicy(self):
        with self.assertRaises(TypeError):
            Registry(self.definitions, "case-sensitive")


if __name__ == "__main__":
    unittest.main()
