r"""
Pennant typed values: the cells argument slots parse into.

Overview
- Value: abstract cell holding one typed datum with two behaviors:
  • parse(raw): coerce a raw token and mutate the cell (FormatError on failure).
  • format(): display text for the current datum (never fails).

- Single-valued variants (each parse replaces the datum)
  • BoolValue, IntValue, FloatValue, StringValue
  • OpenValue (opens for reading), CreateValue (creates/truncates for writing)

- Accumulating variants (each parse appends, nothing is ever replaced)
  • StringListValue, OpenListValue

Coercion
- Type-coercion failures all read "`<raw>` cannot be interpreted as <kind>",
  whichever variant raised them.
- File-backed variants open their file inside parse; the OSError raised by
  open() propagates untouched and the cell keeps its previous datum.

Ownership
- Handles acquired by parse belong to the value. The library never closes
  them; scope them with `with value:` or call value.close().

Example
    >>> count = IntValue(1)
    >>> count.parse("42")
    >>> count.value, count.format()
    (42, '42')
"""
import decimal
import functools
import math
import operator
import re
from abc import ABCMeta, abstractmethod

from .faults import FaultCode, FormatError
from .utils import *


class ValueType(ABCMeta):
    """
    Metaclass giving every value kind a stable identity and representation.

    Responsibilities
    - __typename__: hyphenated, lowercased class name ("open-list-value").
    - __repr__ / __rich_repr__ built from the names in __introspectable__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _uninterpretable(raw, kind):
    return FormatError(
        "`%s` cannot be interpreted as %s" % (raw, kind),
        title="uninterpretable value",
        code=FaultCode.UNINTERPRETABLE_VALUE,
        input=raw,
        kind=kind,
        hint="pass a value of type %s" % kind,
    )


class Value(metaclass=ValueType):
    """
    Abstract typed cell.

    Subclasses store their datum in self._value and implement parse/format.
    str(value) always equals value.format().
    """
    __introspectable__ = ("value",)

    value = mirror("value")

    # label shown after a switch name in help; None for presence-only kinds
    metavar = None

    @abstractmethod
    def parse(self, raw, /):
        ...

    @abstractmethod
    def format(self):
        ...

    def __str__(self):
        return self.format()


class BoolValue(Value):
    """Boolean cell; accepts the usual truthy/falsy spellings, any case."""

    _truthy = frozenset({"1", "t", "true", "yes", "on"})
    _falsy = frozenset({"0", "f", "false", "no", "off"})

    def __init__(self, init=False, /):
        self._value = bool(init)

    def parse(self, raw, /):
        if (folded := raw.lower()) in self._truthy:
            self._value = True
        elif folded in self._falsy:
            self._value = False
        else:
            raise _uninterpretable(raw, "bool")

    def format(self):
        return "true" if self._value else "false"


class IntValue(Value):
    """Signed 64-bit integer cell (base-10 text only)."""

    metavar = "int"

    minimum = -(1 << 63)
    maximum = (1 << 63) - 1

    def __init__(self, init=0, /):
        self._value = int(init)

    def parse(self, raw, /):
        # int() alone would accept whitespace, underscores and non-ASCII digits
        if not re.fullmatch(r"[+-]?[0-9]+", raw, re.ASCII):
            raise _uninterpretable(raw, "int")
        if not self.minimum <= (value := int(raw)) <= self.maximum:
            raise _uninterpretable(raw, "int")
        self._value = value

    def format(self):
        return str(self._value)


def _shortest(number):
    """
    Shortest round-tripping rendering of a float in %g layout.

    The digits come from repr() (already the shortest round-trip); the layout
    switches to exponent form when the decimal exponent is below -4 or at least 6.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"

    sign, digits, exponent = decimal.Decimal(repr(number)).normalize().as_tuple()
    digits = "".join(map(str, digits))
    point = len(digits) + exponent  # position of the decimal point within digits
    magnitude = point - 1
    sign = "-" if sign else ""

    if magnitude < -4 or magnitude >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return "%s%se%s%02d" % (sign, mantissa, "-" if magnitude < 0 else "+", abs(magnitude))
    if point <= 0:
        return "%s0.%s%s" % (sign, "0" * -point, digits)
    if point >= len(digits):
        return "%s%s%s" % (sign, digits, "0" * (point - len(digits)))
    return "%s%s.%s" % (sign, digits[:point], digits[point:])


class FloatValue(Value):
    """64-bit float cell; decimal, scientific, hex (0x1p-2) and inf/nan text."""

    metavar = "float"

    _special = re.compile(r"[+-]?(inf|infinity|nan)", re.IGNORECASE | re.ASCII)
    _decimal = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?", re.ASCII)
    _hex = re.compile(r"[+-]?0[xX]([0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+", re.ASCII)

    def __init__(self, init=0.0, /):
        self._value = float(init)

    def parse(self, raw, /):
        if self._special.fullmatch(raw):
            value = float(raw)
        elif self._decimal.fullmatch(raw):
            value = float(raw)
        elif self._hex.fullmatch(raw):
            try:
                value = float.fromhex(raw)
            except OverflowError:
                raise _uninterpretable(raw, "float") from None
        else:
            raise _uninterpretable(raw, "float")
        # finite text rounding to infinity is out of range
        if math.isinf(value) and not self._special.fullmatch(raw):
            raise _uninterpretable(raw, "float")
        self._value = value

    def format(self):
        return _shortest(self._value)


class StringValue(Value):
    """Text cell; every token is accepted verbatim."""

    metavar = "string"

    def __init__(self, init="", /):
        self._value = str(init)

    def parse(self, raw, /):
        self._value = raw

    def format(self):
        return self._value


def _name(file):
    return str(getattr(file, "name", ""))


def _open(path, mode, encoding):
    if "b" in mode:
        return open(path, mode)
    return open(path, mode, encoding=encoding)


class FileValue(Value):
    """
    Owned file-handle cell.

    parse(path) opens the file with this cell's mode and keeps the handle.
    The OSError raised by open() is propagated unchanged and the cell keeps
    whatever it held before. Handles are released only through close() or by
    leaving a `with` block over the value.
    """
    __introspectable__ = ("value", "mode")

    mode = mirror("mode")

    metavar = "file"
    default = "r"

    def __init__(self, init=None, /, *, mode=Unset, encoding=None):
        self._value = init
        self._mode = coalesce(mode, self.default)
        self._encoding = encoding

    def parse(self, raw, /):
        self._value = _open(raw, self._mode, self._encoding)

    def format(self):
        return _name(self._value) if self._value is not None else ""

    def close(self):
        if self._value is not None:
            self._value.close()

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        self.close()


class OpenValue(FileValue):
    """File opened for reading when its path is parsed."""

    default = "r"


class CreateValue(FileValue):
    """File created (or truncated) for writing when its path is parsed."""

    default = "w"


class ListValue(Value):
    """
    Accumulating cell: parse appends, nothing is replaced.

    len(value) is the number of held elements; the initial sequence is copied.
    """

    def __init__(self, init=(), /):
        self._value = list(init)

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(tuple(self._value))

    def _display(self, element):
        return str(element)

    def format(self):
        return "[%s]" % ", ".join(map(self._display, self._value))


class StringListValue(ListValue):
    """Repeated text slot."""

    metavar = "string"

    def parse(self, raw, /):
        self._value.append(raw)


class OpenListValue(ListValue):
    """Repeated read-only file slot; every parsed path adds one open handle."""
    __introspectable__ = ("value", "mode")

    mode = mirror("mode")
    metavar = "file"

    def __init__(self, init=(), /, *, mode="r", encoding=None):
        super().__init__(init)
        self._mode = mode
        self._encoding = encoding

    def parse(self, raw, /):
        self._value.append(_open(raw, self._mode, self._encoding))

    def _display(self, element):
        return _name(element)

    def close(self):
        for file in self._value:
            file.close()

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        self.close()


def accumulates(value, /):
    """
    Return True when the value appends on every parse instead of replacing.
    """
    return isinstance(value, ListValue)


def owns(value, /):
    """
    Return True when the value holds file handles it is responsible for.
    """
    return isinstance(value, FileValue | OpenListValue)


__all__ = (
    # Base types
    "Value",
    "FileValue",
    "ListValue",

    # Single-valued kinds
    "BoolValue",
    "IntValue",
    "FloatValue",
    "StringValue",
    "OpenValue",
    "CreateValue",

    # Accumulating kinds
    "StringListValue",
    "OpenListValue",

    # Predicates
    "accumulates",
    "owns",
)
