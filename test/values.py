# python
"""
Values module behavioral tests (coercion, display, accumulation, ownership).

Scope
- Validate parse/format for every value kind, including the uniform
  "cannot be interpreted as <kind>" message.
- Validate accumulating kinds append and count every successful parse.
- Validate file-backed kinds open on parse, propagate OSError untouched, and
  leave the cell unchanged on failure.

Conventions
- Test method names follow CamelCase per project convention.
- File tests work inside a private temporary directory.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from unittest import TestCase

from pennant import (
    BoolValue,
    IntValue,
    FloatValue,
    StringValue,
    OpenValue,
    CreateValue,
    StringListValue,
    OpenListValue,
    FormatError,
    FaultCode,
    CommandException,
)


class TestBoolValue(TestCase):
    """Behavioral tests for boolean cells."""

    def testTruthySpellingsFormatCanonically(self):
        for raw in ("true", "TRUE", "True", "1", "t", "T", "yes", "YES", "on", "On"):
            with self.subTest(raw=raw):
                value = BoolValue(False)
                value.parse(raw)
                self.assertIs(value.value, True)
                self.assertEqual(value.format(), "true")

    def testFalsySpellingsFormatCanonically(self):
        for raw in ("false", "FALSE", "0", "f", "F", "no", "No", "off", "OFF"):
            with self.subTest(raw=raw):
                value = BoolValue(True)
                value.parse(raw)
                self.assertIs(value.value, False)
                self.assertEqual(value.format(), "false")

    def testUnknownSpellingRejected(self):
        value = BoolValue(True)
        with self.assertRaises(FormatError) as caught:
            value.parse("maybe")
        self.assertEqual(str(caught.exception), "`maybe` cannot be interpreted as bool")
        self.assertIs(value.value, True)

    def testEmptyTokenRejected(self):
        with self.assertRaises(FormatError):
            BoolValue().parse("")

    def testStrMatchesFormat(self):
        self.assertEqual(str(BoolValue(True)), "true")


class TestIntValue(TestCase):
    """Behavioral tests for integer cells."""

    def testDecimalText(self):
        value = IntValue(0)
        value.parse("42")
        self.assertEqual(value.value, 42)
        self.assertEqual(value.format(), "42")

    def testSignedText(self):
        value = IntValue()
        value.parse("-17")
        self.assertEqual(value.value, -17)
        value.parse("+5")
        self.assertEqual(value.format(), "5")

    def testFormatReparsesToSameInteger(self):
        for raw in ("0", "-1", "007", "9223372036854775807", "-9223372036854775808"):
            with self.subTest(raw=raw):
                first, second = IntValue(), IntValue()
                first.parse(raw)
                second.parse(first.format())
                self.assertEqual(first.value, second.value)

    def testOverflowRejected(self):
        for raw in ("9223372036854775808", "-9223372036854775809", "1" * 40):
            with self.subTest(raw=raw):
                with self.assertRaises(FormatError):
                    IntValue().parse(raw)

    def testNonNumericRejected(self):
        for raw in ("abc", "", " 1", "1 ", "1_000", "1.5", "0x10", "١٢"):
            with self.subTest(raw=raw):
                value = IntValue(7)
                with self.assertRaises(FormatError):
                    value.parse(raw)
                self.assertEqual(value.value, 7)

    def testMessageNamesInputAndKind(self):
        with self.assertRaises(FormatError) as caught:
            IntValue().parse("r")
        self.assertEqual(str(caught.exception), "`r` cannot be interpreted as int")
        self.assertEqual(caught.exception.options["code"], FaultCode.UNINTERPRETABLE_VALUE)
        self.assertEqual(caught.exception.options["input"], "r")

    def testFormatErrorIsValueErrorAndCommandException(self):
        with self.assertRaises(ValueError):
            IntValue().parse("nope")
        with self.assertRaises(CommandException):
            IntValue().parse("nope")


class TestFloatValue(TestCase):
    """Behavioral tests for float cells."""

    def testShortestDisplay(self):
        cases = {
            "1.5": "1.5",
            "100": "100",
            "0.5": "0.5",
            "1e6": "1e+06",
            "123456": "123456",
            "1234567": "1.234567e+06",
            "0.0001": "0.0001",
            "0.00001": "1e-05",
            "-2.5": "-2.5",
            "0": "0",
            ".25": "0.25",
            "3.": "3",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                value = FloatValue()
                value.parse(raw)
                self.assertEqual(value.format(), expected)

    def testSpecialValues(self):
        value = FloatValue()
        value.parse("inf")
        self.assertEqual(value.format(), "+Inf")
        value.parse("-Infinity")
        self.assertEqual(value.format(), "-Inf")
        value.parse("NaN")
        self.assertEqual(value.format(), "NaN")

    def testHexText(self):
        value = FloatValue()
        value.parse("0x1p-2")
        self.assertEqual(value.value, 0.25)

    def testFormatReparsesToSameFloat(self):
        for raw in ("3.141592653589793", "1e-300", "123456789.125", "6.02214076e23", "0.1"):
            with self.subTest(raw=raw):
                first, second = FloatValue(), FloatValue()
                first.parse(raw)
                second.parse(first.format())
                self.assertEqual(first.value, second.value)

    def testOutOfRangeRejected(self):
        with self.assertRaises(FormatError):
            FloatValue().parse("1e400")

    def testMalformedRejected(self):
        for raw in ("abc", "", "1.2.3", " 1.0", "1_0", "e5", "--1", "ınf", "ınfınıty", "１.5"):
            with self.subTest(raw=raw):
                value = FloatValue(2.0)
                with self.assertRaises(FormatError) as caught:
                    value.parse(raw)
                self.assertEqual(str(caught.exception), "`%s` cannot be interpreted as float" % raw)
                self.assertEqual(value.value, 2.0)


class TestStringValue(TestCase):
    """Behavioral tests for text cells."""

    def testAnyTextAccepted(self):
        value = StringValue("init")
        for raw in ("", "-x", "with spaces", "ünïcode", "123"):
            value.parse(raw)
            self.assertEqual(value.value, raw)
            self.assertEqual(value.format(), raw)

    def testReprUsesTypename(self):
        self.assertEqual(repr(StringValue("a")), "string-value(value='a')")
        self.assertEqual(repr(IntValue(3)), "int-value(value=3)")


class TestFileValues(TestCase):
    """Behavioral tests for file-backed single-valued cells."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)
        self.path = os.path.join(self.directory.name, "input.txt")
        with open(self.path, "w", encoding="utf-8") as file:
            file.write("hello\n")

    def testOpenValueOpensForReading(self):
        with OpenValue() as value:
            value.parse(self.path)
            self.assertEqual(value.value.read(), "hello\n")
            self.assertEqual(value.format(), self.path)
        self.assertTrue(value.value.closed)

    def testOpenValueUnsetFormatsEmpty(self):
        self.assertEqual(OpenValue().format(), "")
        self.assertIsNone(OpenValue().value)

    def testOpenValueMissingPathPropagatesOSError(self):
        value = OpenValue()
        missing = os.path.join(self.directory.name, "missing.txt")
        with self.assertRaises(FileNotFoundError) as caught:
            value.parse(missing)
        self.assertNotIsInstance(caught.exception, CommandException)
        self.assertIsNone(value.value)

    def testOpenValueKeepsPreviousHandleOnFailure(self):
        with OpenValue() as value:
            value.parse(self.path)
            before = value.value
            with self.assertRaises(OSError):
                value.parse(os.path.join(self.directory.name, "missing.txt"))
            self.assertIs(value.value, before)

    def testOpenValueBinaryMode(self):
        with OpenValue(mode="rb") as value:
            value.parse(self.path)
            self.assertEqual(value.value.read(), b"hello\n")

    def testCreateValueCreatesAndTruncates(self):
        with CreateValue() as value:
            value.parse(self.path)
            self.assertEqual(value.mode, "w")
            value.value.write("bye")
        with open(self.path, encoding="utf-8") as file:
            self.assertEqual(file.read(), "bye")

    def testCreateValueUnwritablePathPropagatesOSError(self):
        value = CreateValue()
        with self.assertRaises(OSError):
            value.parse(os.path.join(self.directory.name, "no", "such", "dir.txt"))
        self.assertIsNone(value.value)
        self.assertEqual(value.format(), "")

    def testLibraryDoesNotCloseOnItsOwn(self):
        value = OpenValue()
        value.parse(self.path)
        self.addCleanup(value.close)
        self.assertFalse(value.value.closed)


class TestAccumulatingValues(TestCase):
    """Behavioral tests for repeated (append-only) cells."""

    def testStringListAppendsInOrder(self):
        value = StringListValue()
        for count, raw in enumerate(("a", "b", "c"), 1):
            value.parse(raw)
            self.assertEqual(len(value), count)
        self.assertEqual(value.format(), "[a, b, c]")
        self.assertEqual(value.value, ("a", "b", "c"))
        self.assertEqual(list(value), ["a", "b", "c"])

    def testStringListEmptyFormat(self):
        self.assertEqual(StringListValue().format(), "[]")

    def testStringListCopiesInitialSequence(self):
        initial = ["x"]
        value = StringListValue(initial)
        value.parse("y")
        self.assertEqual(initial, ["x"])
        self.assertEqual(len(value), 2)

    def testOpenListCountsSuccessfulParses(self):
        with tempfile.TemporaryDirectory() as directory:
            paths = []
            for name in ("one.txt", "two.txt"):
                paths.append(path := os.path.join(directory, name))
                with open(path, "w", encoding="utf-8") as file:
                    file.write(name)

            with OpenListValue() as value:
                value.parse(paths[0])
                with self.assertRaises(FileNotFoundError):
                    value.parse(os.path.join(directory, "missing.txt"))
                value.parse(paths[1])
                self.assertEqual(len(value), 2)
                self.assertEqual(value.format(), "[%s, %s]" % tuple(paths))
                self.assertEqual([file.read() for file in value], ["one.txt", "two.txt"])
            self.assertTrue(all(file.closed for file in value))


if __name__ == "__main__":
    unittest.main()
