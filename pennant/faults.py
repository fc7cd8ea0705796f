"""
Pennant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- CommandException / CommandWarning: base types carrying a message plus
  read-only options (code, title, hint and any payload such as the offending
  token) and knowing how to render themselves through rich.

Message contract
- str(fault) is exactly the message. The plain runner writes it verbatim to
  stderr, so messages never carry styling of their own.
- __rich__ adds a "[ prog — code | Title ]" header, colour and the hint only
  when the fault was replaced with colorful=True. Help text stays headerless.

Taxonomy
- FormatError: a raw token could not be coerced to a value's target type.
- MissingCommandError / UnknownCommandError: dispatch could not route.
- HelpRequested: a help token short-circuited parsing (explain and exit).
- UnknownSwitchError / MissingValueError / MissingPositionalError /
  UnparsedTokensError: a leaf command's tokens did not fit its slots.
- I/O failures are plain OSErrors and are never wrapped.

Integration
- Host applications may define __styles__ (palette overrides) and __codes__
  (code relabelling) in __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping
    - routing (111xx)
      • MISSING_COMMAND, UNKNOWN_COMMAND, HELP_REQUESTED
    - values (112xx)
      • UNINTERPRETABLE_VALUE
    - switches (113xx)
      • UNKNOWN_SWITCH, MISSING_VALUE
    - positionals (114xx)
      • MISSING_POSITIONAL, UNPARSED_TOKENS
    - warnings (12xxx)
      • DUPLICATED_COMMAND
    """
    # --- routing errors (111xx) ---
    MISSING_COMMAND         = 11101
    UNKNOWN_COMMAND         = 11102
    HELP_REQUESTED          = 11103

    # --- value errors (112xx) ---
    UNINTERPRETABLE_VALUE   = 11201

    # --- switch errors (113xx) ---
    UNKNOWN_SWITCH          = 11301
    MISSING_VALUE           = 11302

    # --- positional errors (114xx) ---
    MISSING_POSITIONAL      = 11401
    UNPARSED_TOKENS         = 11402

    # --- warnings (12xxx) ---
    DUPLICATED_COMMAND      = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _render(fault, styles, body, title, /, *, framed=True):
    """
    Build the rich renderable for a fault.

    Plain faults render as their bare message. Colorful faults that carry a
    code get the full layout:

        [ prog — 11102 | Unknown Command ]
        unknown command name `deploy`
         → run 'prog --help' to see all available commands
    """
    options = fault.options
    if not options.get("colorful", False):
        return Text(str(fault))
    message = Text(str(fault), styles[body])
    if not framed or "code" not in options:
        return message

    prog = getattr(__import__("__main__"), "__prog__", options.get("prog", ""))
    header = Text.assemble(
        "[ ",
        *(((prog, styles["prog-name"]), " — ") if prog else ()),
        (FaultCode(options["code"]).normalize(), styles["code"]),
        " | ",
        (str(options.get("title", type(fault).__name__)).title(), styles[title]),
        " ]",
    )
    if not options.get("hint"):
        return Group(header, message)
    hint = Text.assemble((" → ", styles["hint-arrow"]), (options["hint"], styles["hint"]))
    return Group(header, message, hint)


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "help-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        # help text is an answer, not a fault: no header
        if isinstance(self, HelpRequested):
            return _render(self, styles, "help-message", "error-title", framed=False)
        return _render(self, styles, "error-message", "error-title")

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class FormatError(CommandException, ValueError): ...
class MissingCommandError(CommandException): ...
class UnknownCommandError(CommandException): ...
class HelpRequested(CommandException): ...
class UnknownSwitchError(CommandException): ...
class MissingValueError(CommandException): ...
class MissingPositionalError(CommandException): ...
class UnparsedTokensError(CommandException): ...


class CommandWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })
        return _render(self, styles, "warning-message", "warning-title")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicatedCommandWarning(CommandWarning): ...


__all__ = (
    "CommandException",
    "FormatError",
    "MissingCommandError",
    "UnknownCommandError",
    "HelpRequested",
    "UnknownSwitchError",
    "MissingValueError",
    "MissingPositionalError",
    "UnparsedTokensError",
    "CommandWarning",
    "DuplicatedCommandWarning",
    "FaultCode",
)
