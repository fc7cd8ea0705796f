"""
Pennant command layer: route tokens through a tree of named subcommands.

What this module provides
- Context: the immutable per-dispatch record (name, descr, args) handed to
  every command.
- Program: a named collection of subcommands, compilable into a single
  command so programs nest without special-casing.
- route(): one dispatch step returning a tagged outcome
  (Routed | Help | Failed) instead of overloading the error channel.
- list_commands(): the subcommand listing used by help and error text.
- run(): top-level entry mapping success/failure to an exit status.

Commands
- A command is any callable taking a Context. It returns normally on success
  and raises on failure; the exception travels up unchanged to run().

Dispatch rules (per level)
- no tokens left             → MissingCommandError "<name> expected a command."
- head starts with -h/--help → HelpRequested "<name>: <descr>" (wins over lookup)
- head is not registered     → UnknownCommandError "unknown command name `<head>`"
- otherwise                  → invoke the child with "<name> <head>" and args[1:]

Quick start
    from pennant import Program, arguments, IntValue, run

    program = Program()

    @program.command("count", "print a number")
    def count(context):
        positional, optional = arguments()
        number = positional.add(IntValue(), "N")
        context.parse(positional, optional)
        print(number.value)

    if __name__ == "__main__":
        raise SystemExit(run("tool", "a demo tool", program.compile()))

Threading
- Programs are populated during single-threaded initialization and only read
  during dispatch; registering while a dispatch is running is unsupported.
"""
import copy
import inspect
import shlex
import sys
import warnings
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from .arguments import usage
from .faults import *
from .utils import *

console = Console(stderr=True, highlight=False, soft_wrap=True)


class Context:
    """
    Immutable record passed down the dispatch tree.

    Fields
    - name: invocation name so far ("git remote add").
    - descr: description of the command being invoked.
    - args: remaining tokens, as a tuple.

    A Context never outlives the dispatch call it was built for; each level
    builds a fresh one through descend().
    """
    __slots__ = ("_name", "_descr", "_args")

    __introspectable__ = (
        "name",
        "descr",
        "args",
    )

    name = mirror("name")
    descr = mirror("descr")
    args = mirror("args")

    def __init__(self, name, descr, args=(), /):
        if not isinstance(name, str):
            raise TypeError("context 'name' must be a string")
        if not isinstance(descr, str):
            raise TypeError("context 'descr' must be a string")
        args = tuple(args)
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError("context 'args' must be strings")
        self._name = name
        self._descr = descr
        self._args = args

    def descend(self, key, descr, /):
        """
        Build the child context for subcommand `key`: extended name, the
        child's description and the head token shifted off.
        """
        return type(self)("%s %s" % (self._name, key), descr, self._args[1:])

    def parse(self, positional, optional, /):
        """
        Bind this context's tokens to a leaf command's slots.

        Switches are consumed first (anywhere before "--"), the rest is
        assigned to positional slots in order. Leftover tokens are an error.
        """
        leftover = positional.parse(optional.parse(
            self._args,
            help=lambda: usage(self._name, self._descr, positional, optional),
        ))
        if leftover:
            raise UnparsedTokensError(
                "unexpected arguments %s" % " ".join("`%s`" % token for token in leftover),
                title="unparsed input",
                code=FaultCode.UNPARSED_TOKENS,
                leftover=tuple(leftover),
                hint="run '%s --help' to see valid forms" % self._name,
            )

    def __eq__(self, other):
        if not isinstance(other, Context):
            return NotImplemented
        return (self._name, self._descr, self._args) == (other._name, other._descr, other._args)

    def __hash__(self):
        return hash((self._name, self._descr, self._args))

    def __repr__(self):
        return "context(name=%r, descr=%r, args=%r)" % (self._name, self._descr, self._args)

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)


class Entry(NamedTuple):
    """A registered subcommand: its description and the command to run."""
    descr: str
    command: object


class Routed(NamedTuple):
    """Dispatch found a child: invoke `command` with `context`."""
    command: object
    context: Context


class Help(NamedTuple):
    """Dispatch met a help token: `error` carries the text to show."""
    error: HelpRequested


class Failed(NamedTuple):
    """Dispatch could not route: `error` explains why."""
    error: CommandException


class Program:
    """
    Named collection of subcommands.

    Responsibilities
    - Registration: add(name, descr, command) or the @program.command(...)
      decorator. Names are matched by exact string equality.
    - Routing: route(context) performs one dispatch step and returns a tagged
      outcome; compile() turns that into a plain command.

    Notes
    - Insertion order is kept; listings are sorted by name.
    - Re-registering a name replaces the previous entry with a warning.
    """

    def __init__(self):
        self._entries = {}

    entries = mirror("entries")

    def add(self, name, descr, command, /):
        """
        Register `command` under `name` with a one-line description.

        Returns the command so the call can be used inline.
        """
        if not isinstance(name, str) or not name:
            raise TypeError("program command name must be a non-empty string")
        if not isinstance(descr, str):
            raise TypeError("program command description must be a string")
        if not callable(command):
            raise TypeError("program command must be callable")
        if name in self._entries:
            warnings.warn(DuplicatedCommandWarning(
                "command name %r is already registered and will be replaced" % name,
                title="duplicated command",
                code=FaultCode.DUPLICATED_COMMAND,
                name=name,
            ), stacklevel=2)
        self._entries[name] = Entry(descr, command)
        return command

    def command(self, name, descr=Unset, /):
        """
        Decorator form of add(); the description defaults to the docstring.

            @program.command("build")
            def build(context):
                '''compile the sources'''
        """
        def wrapper(command, /):
            summary = coalesce(descr, (inspect.getdoc(command) or "").partition("\n")[0])
            return self.add(name, summary, command)

        return rename(wrapper, "command")

    def route(self, context, /):
        """
        Perform one dispatch step for `context`.

        Returns
        - Routed(command, child_context) when the head token names a subcommand.
        - Help(HelpRequested) when the head token asks for help.
        - Failed(error) when there is no head token or it is unknown.
        """
        if not context.args:
            return Failed(MissingCommandError(
                "%s expected a command.\n\n%s" % (context.name, list_commands(self)),
                title="missing command",
                code=FaultCode.MISSING_COMMAND,
                hint="pick one of the listed commands",
            ))

        head = context.args[0]
        if head.startswith("-h") or head == "--help":
            return Help(HelpRequested(
                "%s: %s\n\n%s" % (context.name, context.descr, list_commands(self)),
                title="help",
                code=FaultCode.HELP_REQUESTED,
            ))

        try:
            entry = self._entries[head]
        except KeyError:
            return Failed(UnknownCommandError(
                "unknown command name `%s`" % head,
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                token=head,
                hint="run '%s --help' to see all available commands" % context.name,
            ))

        return Routed(entry.command, context.descend(head, entry.descr))

    def compile(self):
        """
        Compile the subcommands into a single command.

        The compiled command routes one level and then either invokes the
        child (whose result propagates unchanged) or raises the outcome's error.
        """
        @rename("program")
        def program(context, /):
            match self.route(context):
                case Routed(command, child):
                    return command(child)
                case Help(error) | Failed(error):
                    raise error

        return program

    def __contains__(self, name):
        return name in self._entries

    def __iter__(self):
        return iter(tuple(self._entries))

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return "program(%s)" % ", ".join(map(repr, self._entries))


def list_commands(program, /):
    """
    Render the subcommand listing of a program.

        commands:
          build  compile the sources
          test   run the test-suite
    """
    if not len(program):
        return "commands:\n  (none)"
    rows = [(name, entry.descr) for name, entry in sorted(program.entries.items())]
    return "commands:\n%s" % columns(rows)


def _tokens(prompt):
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("run() tokens must be a string or an iterable of strings")
        return tokens
    raise TypeError("run() tokens must be a string or an iterable of strings")


def run(name, descr, command, tokens=Unset, /, *, colorful=False):
    """
    Run `command` once against the process tokens and return an exit status.

    Parameters
    - name, descr: root invocation name and description.
    - command: any command (a compiled Program or a plain leaf callable).
    - tokens:
      • Unset: sys.argv[1:].
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: used as-is.
    - colorful: render faults through rich with header, colour and hint
      instead of the bare message.

    Returns
    - 0 on success.
    - 1 on any failure, after writing the failure's message and a newline to
      stderr. Help requests take the same path.
    """
    if not callable(command):
        raise TypeError("run() command must be callable")
    context = Context(name, descr, _tokens(tokens))
    try:
        command(context)
    except Exception as error:
        if not colorful:
            # rich would expand tabs and drop control codes
            console.file.write("%s\n" % error)
            console.file.flush()
        elif isinstance(error, CommandException):
            console.print(copy.replace(error, colorful=True, prog=name))
        else:
            console.print(Text(str(error)))
        return 1
    return 0


__all__ = (
    # Public API surface for consumers of pennant.commands.
    # These names are re-exported from the package __init__.
    "Context",
    "Entry",
    "Routed",
    "Help",
    "Failed",
    "Program",
    "list_commands",
    "run",
)
