r"""
Pennant argument containers: bind a leaf command's tokens to typed values.

Overview
- Optional: switches (-x, --name) mapped to values.
  • `--name=text` and `--name text` both hand `text` to value.parse.
  • a bare `--name` on a BoolValue parses "true".
  • `--` ends switch processing; a lone `-` and negative numbers are
    ordinary tokens unless registered.
- Positional: ordered, named slots filled left to right. One accumulating
  value may close the list and swallows every token that is left.
- arguments(): fresh (Positional, Optional) pair, built per invocation.
- usage(): leaf help text shown for -h/--help.

Ownership
- Both containers are context managers; leaving the block closes every
  file-backed value they hold. Nothing is closed implicitly otherwise.

Example
    >>> positional, optional = arguments()
    >>> verbose = optional.add(BoolValue(), "-v", "--verbose")
    >>> target = positional.add(StringValue(), "TARGET")
    >>> positional.parse(optional.parse(["-v", "build"]))
    []
    >>> verbose.value, target.value
    (True, 'build')
"""
import re
from collections import deque

from .faults import *
from .utils import *
from .values import BoolValue, Value, accumulates, owns


def _help(name):
    return name.startswith("-h") or name == "--help"


class Optional:
    """
    Switch container.

    Registration
    - add(value, *names, descr=...) registers one value under every name.
      Names follow shell conventions: "-x", "-name", "--long-name"; unicode
      letters are allowed, underscores and leading digits are not.
    """

    def __init__(self):
        self._switches = {}
        self._entries = []

    switches = mirror("switches")

    def add(self, value, /, *names, descr=Unset):
        """
        Register `value` under the given switch names and return it.

        Raises
        - TypeError: value is not a Value, no names, or descr is not a string.
        - ValueError: a name is malformed or already taken.
        """
        if not isinstance(value, Value):
            raise TypeError("optional value must be a value instance")
        if not names:
            raise TypeError("optional must specify at least one name")
        if not isinstance(descr, str | Unset):
            raise TypeError("optional 'descr' must be a string")

        seen = set()
        for name in names:
            if not isinstance(name, str):
                raise TypeError("optional names must be strings")
            elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
                raise ValueError("optional name %r is not a valid shell-style option name" % name)
            elif name in seen or name in self._switches:
                raise ValueError("optional name %r is already in use" % name)
            seen.add(name)

        self._switches.update(dict.fromkeys(names, value))
        self._entries.append((names, value, coalesce(descr, "")))
        return value

    def parse(self, tokens, /, *, help=Unset):
        """
        Consume every switch in `tokens` and return the other tokens in order.

        Parameters
        - tokens: Iterable[str]
        - help: callable returning help text. When given, an unregistered
          -h*/--help token raises HelpRequested with that text.

        Raises
        - UnknownSwitchError, MissingValueError, HelpRequested, and whatever
          value.parse raises (FormatError, OSError).
        """
        tokens = deque(tokens)
        leftover = []
        while tokens:
            token = tokens.popleft()
            if token == "--":
                leftover.extend(tokens)
                break
            if token == "-" or not token.startswith("-"):
                leftover.append(token)
                continue

            name, assigned, inline = token.partition("=")
            try:
                value = self._switches[name]
            except KeyError:
                if help is not Unset and _help(name):
                    raise HelpRequested(help(), title="help", code=FaultCode.HELP_REQUESTED) from None
                # negative numbers are positionals unless a switch claims them
                if re.fullmatch(r"-\.?[0-9].*", token):
                    leftover.append(token)
                    continue
                raise UnknownSwitchError(
                    "unknown option `%s`" % name,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_SWITCH,
                    input=name,
                    hint="pass --help to see all available options",
                ) from None

            if assigned:
                value.parse(inline)
            elif isinstance(value, BoolValue):
                value.parse("true")
            elif tokens:
                value.parse(tokens.popleft())
            else:
                raise MissingValueError(
                    "option `%s` expects a value" % name,
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    input=name,
                    hint="pass it as %s=<%s> or %s <%s>" % (name, value.metavar, name, value.metavar),
                )
        return leftover

    def rows(self):
        """
        (names, descr) rows for help listings, in registration order.
        """
        rows = []
        for names, value, descr in self._entries:
            label = ", ".join(names)
            if value.metavar:
                label += " " + value.metavar
            rows.append((label, descr))
        return rows

    def close(self):
        for _, value, _ in self._entries:
            if owns(value):
                value.close()

    def __len__(self):
        return len(self._entries)

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        self.close()

    def __repr__(self):
        return "optional(%s)" % ", ".join("/".join(names) for names, _, _ in self._entries)


class Positional:
    """
    Ordered slot container.

    Registration
    - add(value, name, descr=...) appends a slot. After an accumulating slot
      nothing else can be registered.
    """

    def __init__(self):
        self._slots = []

    def add(self, value, name, /, descr=Unset):
        """
        Register `value` as the next positional slot and return it.

        Raises
        - TypeError: bad value/name/descr types, or a slot follows an
          accumulating one.
        - ValueError: empty or duplicated name.
        """
        if not isinstance(value, Value):
            raise TypeError("positional value must be a value instance")
        if not isinstance(name, str):
            raise TypeError("positional name must be a string")
        elif not (name := name.strip()):
            raise ValueError("positional name cannot be empty")
        if not isinstance(descr, str | Unset):
            raise TypeError("positional 'descr' must be a string")
        if any(name == other for other, _, _ in self._slots):
            raise ValueError("positional name %r is already in use" % name)
        if self._slots and accumulates(self._slots[-1][1]):
            raise TypeError("positional slot %r cannot follow an accumulating slot" % name)
        self._slots.append((name, value, coalesce(descr, "")))
        return value

    def parse(self, tokens, /):
        """
        Assign `tokens` to the slots in order and return what is left.

        Raises
        - MissingPositionalError when a single-valued slot gets no token.
        - whatever value.parse raises (FormatError, OSError).
        """
        tokens = deque(tokens)
        for name, value, _ in self._slots:
            if accumulates(value):
                while tokens:
                    value.parse(tokens.popleft())
                break
            if not tokens:
                raise MissingPositionalError(
                    "missing argument %s" % name,
                    title="missing argument",
                    code=FaultCode.MISSING_POSITIONAL,
                    input=name,
                    hint="pass a value for %s" % name,
                )
            value.parse(tokens.popleft())
        return list(tokens)

    def synopsis(self):
        """
        Slot names as shown on the usage line ("SOURCE FILES...").
        """
        return " ".join(name + ("..." if accumulates(value) else "") for name, value, _ in self._slots)

    def rows(self):
        return [(name, descr) for name, _, descr in self._slots]

    def close(self):
        for _, value, _ in self._slots:
            if owns(value):
                value.close()

    def __len__(self):
        return len(self._slots)

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        self.close()

    def __repr__(self):
        return "positional(%s)" % ", ".join(name for name, _, _ in self._slots)


def arguments():
    """
    Create a fresh, empty (Positional, Optional) pair.
    """
    return Positional(), Optional()


def usage(name, descr, positional, optional, /):
    """
    Render leaf help text.

        name: descr

        usage: name [options] SOURCE FILES...

        arguments:
          SOURCE  where to read from

        options:
          -v, --verbose  talk more
    """
    synopsis = " ".join(part for part in (
        name,
        "[options]" if len(optional) else "",
        positional.synopsis(),
    ) if part)
    sections = ["%s: %s" % (name, descr), "usage: %s" % synopsis]
    if len(positional):
        sections.append("arguments:\n%s" % columns(positional.rows()))
    if len(optional):
        sections.append("options:\n%s" % columns(optional.rows()))
    return "\n\n".join(sections)


__all__ = (
    "Positional",
    "Optional",
    "arguments",
    "usage",
)
