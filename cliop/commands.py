"""
cliop command layer: register options, parse arguments, dispatch sub-commands.

What this module provides
- Command: one command surface. It owns its option definitions, typed
  bindings, argument store, error state and sub-commands, and runs the parse
  cycle over a token sequence.
- Subcommand: a named entry handled either by a function or by a nested
  Command that parses its own arguments.
- Factories and helpers:
  • command(...): create a Command or a decorator that produces one.
  • invoke(command, prompt): run a command from sys.argv, a shell-like
    string or a token sequence.

Parse cycle (Command.parse, and Command.feed after sub-command matching)
  1. clear the store and register the reserved options (help, version, config)
  2. tokenize the command line
  3. --help / --version: print usage or version and return FaultCode.HELP
     (only when no sub-command is active)
  4. move leading positionals into options declaring a bind index
  5. read the config file (unless --config=NONE) and tokenize it below the
     command line in precedence
  6. push resolved values into the bound variables
  7. required options, then unknown options
Each step stops the cycle as soon as an error is recorded. Errors are only
recorded for kinds in the catch set, and stay recorded until clear_error().

Quick start
    from cliop import Command, invoke

    class Settings:
        name = "world"
        count = 1
        loud = False

    settings = Settings()
    greet = Command("greet", "print a greeting", version="1.0.0")
    greet.set("-n #1 $GREET_NAME --name= [world]", "who to greet", settings, "name")
    greet.option("c", "count", "how many times", "1", target=settings, attribute="count")
    greet.flag("l", "loud", "shout", settings, "loud")

    @greet.fallback
    def main(argv, command):
        for _ in range(settings.count):
            print(("Hello %s!" % settings.name).upper() if settings.loud else "Hello %s!" % settings.name)

    if __name__ == "__main__":
        raise SystemExit(greet.feed())
"""
import builtins
import os.path
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import Attribute, Option, Store
from .bindings import Binding, BindType, convert, resolve
from .configs import read_config
from .faults import ErrorState, FaultCode
from .utils import *

HELP = "help"
VERSION = "version"
CONFIG = "config"
NO_CONFIG = "NONE"


def _program():
    """Invocation name of the running program (host-overridable via __main__.__prog__)."""
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0] if sys.argv else ""))


def _tokens(prompt, caller, /):
    """
    Normalize a prompt into a list of tokens.

    - str: shell-like string split with shlex.split.
    - Iterable[str]: items copied as-is (empty items are kept; the tokenizer
      skips them).
    """
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError(f"{caller}() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError(f"{caller}() argument must be a string or an iterable of strings")


class Subcommand:
    """
    A sub-command entry.

    Exactly one of handler/command is set:
    - handler: callable(argv, parent) run after the parent parsed the arguments.
    - command: nested Command running its own full cycle.
    """

    name = mirror("name")
    descr = mirror("descr")
    handler = mirror("handler")
    command = mirror("command")

    def __init__(self, name, descr, target, /):
        if not isinstance(name, str):
            raise TypeError("subcommand 'name' must be a string")
        if not isinstance(descr, str | Text):
            raise TypeError("subcommand 'descr' must be a string")
        self._name = name
        self._descr = descr
        self._handler = None
        self._command = None
        if isinstance(target, Command):
            self._command = target
        elif callable(target):
            self._handler = target
        else:
            raise TypeError("subcommand target must be a callable or a command")

    def __repr__(self):
        kind = "command" if self._command is not None else "handler"
        return "subcommand(name=%r, descr=%r, %s)" % (self._name, self._descr, kind)


class Command:
    """
    A command surface: option registry, parser and dispatcher.

    Construction
    - name: command name shown in usage (adopted from argv[0] on the first
      feed() when empty).
    - descr: short description shown in usage.
    - version: version text printed by --version.
    - handler: callable(argv, command) run after a successful feed().
    - colorful: style the usage screen (palette overridable through a
      __styles__ mapping in __main__).
    - fancy: wrap the usage screen in a panel.

    Reading results
    - has(name), get(name | position), get_as(name, type), get_default(name), command[key]
    - args, argv, argc, arg0, store, error, matched

    Subclassing
    - Override run(argv) to handle a successful feed() without a handler.
    - Bind attributes of self (bind("name", self, "name")) to fill them from
      the parsed arguments.
    """

    name = mirror("name")
    descr = mirror("descr")
    options = mirror("options")
    subcommands = mirror("commands")
    matched = mirror("subcommand")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, name="", descr="", /, *, version="", handler=None, colorful=False, fancy=False):
        if not isinstance(name, str):
            raise TypeError("command 'name' must be a string")
        if not isinstance(descr, str | Text):
            raise TypeError("command 'descr' must be a string")
        if not isinstance(version, str):
            raise TypeError("command 'version' must be a string")
        if handler is not None and not callable(handler):
            raise TypeError("command 'handler' must be callable")

        self._name = name
        self._descr = descr
        self._version = version
        self._handler = handler
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

        self._options = []
        self._bindings = {}
        self._commands = []
        self._subcommand = None
        self._fallback = Unset
        self._store = Store()
        self._error = ErrorState()

    # --- metadata --------------------------------------------------------

    def command_name(self, name=Unset, descr=Unset, handler=Unset, /):
        """
        Get or set the command metadata.

        - command_name() returns the name.
        - command_name(name[, descr[, handler]]) sets the given fields and
          returns the command for chaining.
        """
        if name is Unset:
            return self._name
        if not isinstance(name, str):
            raise TypeError("command_name() 'name' must be a string")
        self._name = name
        if descr is not Unset:
            self._descr = descr
        if handler is not Unset:
            if handler is not None and not callable(handler):
                raise TypeError("command_name() 'handler' must be callable")
            self._handler = handler
        return self

    def version(self, version=Unset, /):
        """Get the version text, or set it and return the command for chaining."""
        if version is Unset:
            return self._version
        if not isinstance(version, str):
            raise TypeError("version() argument must be a string")
        self._version = version
        return self

    def fallback(self, fallback, /):
        """
        Register the callable run by run() when no handler applies.

        Contract
        - fallback is called as fallback(argv, command); its result becomes the
          result of feed() (None counts as 0).
        - Can be set only once per command.

        Returns
        - The same callable, enabling decorator-style usage: @cmd.fallback
        """
        if not callable(fallback):
            raise TypeError("command fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError("command fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    # --- error policy ----------------------------------------------------

    @property
    def error(self):
        return self._error

    def catch(self, *codes):
        self._error.catch(*codes)
        return self

    def catch_all(self):
        self._error.catch_all()
        return self

    def ignore(self, *codes):
        self._error.ignore(*codes)
        return self

    def subcommand_only(self):
        """Reject a first argument that names no sub-command (COMMAND_UNKNOWN)."""
        return self.catch(FaultCode.COMMAND_UNKNOWN)

    def option_only(self):
        """Reject options that were never registered (OPTION_UNKNOWN)."""
        return self.catch(FaultCode.OPTION_UNKNOWN)

    def has_error(self):
        return self._error.failed

    def clear_error(self):
        self._error.clear()
        return self

    # --- option registry -------------------------------------------------

    def find_option(self, long, /):
        for option in self._options:
            if option.long == long:
                return option
        return None

    def find_flag(self, short, /):
        if not short:
            return None
        for option in self._options:
            if option.short == short:
                return option
        return None

    def add_option(self, option, /):
        """
        Register an option definition.

        Checks, in order, each applied only when its kind is caught (a failed
        check records the error and drops the definition):
        - OPTION_INVALID: long name empty, starting with "-" or holding "=".
        - OPTION_REDEFINE: long name already registered.
        - FLAG_INVALID: short name is not an ASCII letter (context "char%<ord>").
        - FLAG_REDEFINE: short name already registered.

        Returns
        - the command, for chaining.
        """
        if not isinstance(option, Option):
            raise TypeError("add_option() argument must be an option")

        errors = self._error
        if errors.caught(FaultCode.OPTION_INVALID) and malformed(option.long):
            errors.set(FaultCode.OPTION_INVALID, option.long)
            return self
        if errors.caught(FaultCode.OPTION_REDEFINE) and self.find_option(option.long) is not None:
            errors.set(FaultCode.OPTION_REDEFINE, option.long)
            return self
        if errors.caught(FaultCode.FLAG_INVALID) and option.short:
            if not (option.short.isascii() and option.short.isalpha()):
                errors.set(FaultCode.FLAG_INVALID, "char%%%d" % ord(option.short))
                return self
        if errors.caught(FaultCode.FLAG_REDEFINE) and self.find_flag(option.short) is not None:
            errors.set(FaultCode.FLAG_REDEFINE, option.short)
            return self

        self._options.append(option)
        return self

    def flag(self, short, long, descr="", target=Unset, attribute=Unset, /):
        """Register a presence-only flag, optionally bound to a boolean slot."""
        self.add_option(Option(short, long, descr))
        if target is not Unset:
            self.bind(long, target, coalesce(attribute, long), type=bool)
        return self

    def option(self, short, long, descr="", default="", attrs=Attribute.ARGUMENT, *, target=Unset, attribute=Unset, type=Unset):
        """
        Register an option; attrs defaults to an argument-taking option.

        Passing attrs=0 registers a flag (default is then meaningless).
        """
        self.add_option(Option(short, long, descr, default=default, attrs=attrs))
        if target is not Unset:
            self.bind(long, target, coalesce(attribute, long), type=type)
        return self

    def required(self, short, long, descr="", *, target=Unset, attribute=Unset, type=Unset):
        """Register an argument-taking option that must be given."""
        return self.option(
            short, long, descr, "", Attribute.ARGUMENT | Attribute.REQUIRED,
            target=target, attribute=attribute, type=type,
        )

    def set(self, spec, descr="", target=Unset, attribute=Unset, /, type=Unset):
        """
        Register an option from the spec-string grammar (see Option.parse).

        With a target, the option's long name is also bound to
        target.<attribute> (attribute defaults to the long name).
        """
        option = Option.parse(spec, descr)
        self.add_option(option)
        if target is not Unset and option.long:
            self.bind(option.long, target, coalesce(attribute, option.long), type=type)
        return self

    def bind(self, long, target, slot, /, type=Unset):
        """
        Bind an option to a typed slot, replacing any previous binding.

        The slot is target.<slot> for objects and target[slot] for mutable
        mappings. The type is explicit (bool, str, int, float, list, list[str],
        list[int], list[float] or a BindType) or inferred from the current slot
        value.
        """
        if not isinstance(long, str):
            raise TypeError("bind() option name must be a string")
        self._bindings[long] = Binding(target, slot, type=type)
        return self

    # --- sub-commands ----------------------------------------------------

    def find_command(self, name, /):
        for subcommand in self._commands:
            if subcommand.name == name:
                return subcommand
        return None

    def subcommand(self, name, descr, target, /):
        """
        Register a sub-command handled by a function or by a nested Command.

        A nested Command adopts the sub-command name and description.
        SUBCMD_INVALID (malformed name) and SUBCMD_REDEFINE (duplicate name)
        drop the entry when caught.
        """
        subcommand = Subcommand(name, descr, target)

        errors = self._error
        if errors.caught(FaultCode.SUBCMD_INVALID) and malformed(name):
            errors.set(FaultCode.SUBCMD_INVALID, name)
            return self
        if errors.caught(FaultCode.SUBCMD_REDEFINE) and self.find_command(name) is not None:
            errors.set(FaultCode.SUBCMD_REDEFINE, name)
            return self

        if subcommand.command is not None:
            subcommand.command.command_name(name, descr)
        self._commands.append(subcommand)
        return self

    # --- results ---------------------------------------------------------

    @property
    def store(self):
        return self._store

    @property
    def args(self):
        return self._store.options

    @property
    def argv(self):
        return self._store.positionals

    @property
    def argc(self):
        return len(self._store.positionals)

    @property
    def arg0(self):
        return self._name

    def has(self, name, /):
        """
        Whether an option was given (command line or config file).

        A single letter also matches the option owning that short name.
        """
        if not name:
            return False
        if name in self._store:
            return True
        if len(name) == 1 and (option := self.find_flag(name)) is not None:
            return self.has(option.long)
        return False

    def get(self, key, /):
        """
        Resolved string value of an option or a positional argument.

        Keys
        - int: 1-based positional ("" when out of range); 0 is the same as "--".
        - "--": every positional joined with SEPARATOR.
        - name: stored value, else the environment/default (see get_default),
          else for a single letter the value of the option owning that short name.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            if key == 0:
                return self.get("--")
            positionals = self._store.positionals
            return positionals[key - 1] if 0 < key <= len(positionals) else ""
        if not isinstance(key, str):
            raise TypeError("get() argument must be a string or an integer")

        if key == "--":
            return join(self._store.positionals)
        if not key:
            return ""
        if key in self._store:
            return self._store.get(key)

        value = self.get_default(key)
        if not value and len(key) == 1 and (option := self.find_flag(key)) is not None:
            value = self.get(option.long)
        return value

    def get_default(self, long, /):
        """Value of the option's environment variable when non-empty, else its default."""
        option = self.find_option(long)
        if option is None:
            return ""
        if option.env and (value := os.environ.get(option.env, "")):
            return value
        return option.default

    def get_as(self, key, type, /):
        """
        Resolved value of an option or positional converted to a Python type.

        The key is read as get(key) does; type accepts what bind() accepts
        (bool, str, int, float, list, list[str], list[int], list[float] or a
        BindType). A bool is the presence of the option.

        Returns
        - the converted value, or Unset when the value is empty or cannot be
          converted. When ARGTYPE_UNMATCH is caught, malformed numeric text
          records it (context "<key>=<offending element>") instead.
        """
        kind = resolve(type)
        if kind is BindType.BOOL:
            return self.has(key) if isinstance(key, str) else bool(self.get(key))
        if not (value := self.get(key)):
            return Unset
        try:
            return convert(kind, value, self._error.caught(FaultCode.ARGTYPE_UNMATCH))
        except ValueError as error:
            self._error.set(FaultCode.ARGTYPE_UNMATCH, "%s=%s" % (key, error.args[0]))
            return Unset

    def __getitem__(self, key):
        return self.get(key)

    def clear(self):
        """Forget the parsed arguments and the matched sub-command."""
        self._store.clear()
        self._subcommand = None
        return self

    # --- parse cycle -----------------------------------------------------

    def _reserve(self):
        if self.find_option(CONFIG) is None:
            self.add_option(Option(None, CONFIG, "read arguments from config file",
                                   default=_program() + ".ini", attrs=Attribute.ARGUMENT))
        if self.find_option(VERSION) is None:
            self.add_option(Option(None, VERSION, "print version"))
        if self.find_option(HELP) is None:
            self.add_option(Option(None, HELP, "print help message"))

    def _save(self, target, value, /):
        if isinstance(target, Option):
            if target.argument:
                self._store.save(target.long, value, repeated=target.repeated)
            else:
                self._store.save(target.long, value)
        else:
            self._store.save(target, value)

    def _tokenize(self, tokens, /):
        """
        Classify tokens into the store.

        Pending state is either a known Option awaiting its value or the raw
        name of an unknown long option.
        """
        ended = False
        pending = None

        for token in tokens:
            if not token:
                continue
            if token == "--" and not ended:
                ended = True
                continue
            if ended:
                self._store.append(token)
                continue

            if pending is not None:
                if malformed(token):
                    self._error.set(FaultCode.ARGUMENT_INVALID, token)
                self._save(pending, token)
                pending = None
                if self._error.failed:
                    return self._error.code
                continue

            name = undash(token)
            if "=" in name:
                key, _, value = name.partition("=")
                option = self.find_option(key)
                self._save(option if option is not None else key, value)
                continue

            count = dashes(token)
            if count == 0 or count == len(token):
                self._store.append(token)
            elif count == 1:
                for index, letter in enumerate(name):
                    option = self.find_flag(letter)
                    if option is None:
                        self._store.save(letter, "1")
                    elif option.argument:
                        if rest := name[index + 1:]:
                            self._save(option, rest)
                        else:
                            pending = option
                        break
                    else:
                        self._store.mark(option.long)
            else:
                option = self.find_option(name)
                if option is None:
                    pending = name
                elif option.argument:
                    pending = option
                else:
                    self._store.mark(option.long)

        if pending is not None:
            self._error.set(FaultCode.OPTION_INCOMPLETE, pending.long if isinstance(pending, Option) else pending)
        return self._error.code

    def _position(self):
        """Move leading positionals into the options declaring a bind index."""
        positionals = self._store.positionals
        if not positionals:
            return

        size = min(len(positionals), len(self._options))
        slots = [None] * size
        highest = 0
        strict = self._error.caught(FaultCode.POSITION_BIND)

        for option in self._options:
            if not option.index:
                continue
            if option.index <= size:
                if strict and slots[option.index - 1] is not None:
                    self._error.set(FaultCode.POSITION_BIND, "redefined of %s#%d" % (option.long, option.index))
                    return
                slots[option.index - 1] = option
                highest = max(highest, option.index)
            elif strict:
                self._error.set(FaultCode.POSITION_BIND, "beyond range of %s#%d" % (option.long, option.index))
                return

        if strict:
            for index in range(1, highest):
                if slots[index - 1] is None:
                    self._error.set(FaultCode.POSITION_BIND, "no preposition bound index #%d" % index)
                    return

        moved = 0
        for option in slots:
            if option is None or option.long in self._store:
                break
            self._save(option, positionals[moved])
            moved += 1
        self._store.consume(moved)

    def _merge(self):
        """Tokenize the config file below the command line in precedence."""
        path = self.get(CONFIG)
        if path == NO_CONFIG:
            return
        tokens = read_config(path, self._error)
        if self._error.failed:
            return
        self._store.freeze()
        self._tokenize(tokens)

    def _resolve(self):
        """Push resolved values into every bound slot."""
        strict = self._error.caught(FaultCode.ARGTYPE_UNMATCH)
        for long, binding in self._bindings.items():
            if binding.kind is BindType.BOOL:
                binding.write(self.has(long))
                continue
            if not (value := self.get(long)):
                continue
            try:
                converted = convert(binding.kind, value, strict)
            except ValueError as error:
                self._error.set(FaultCode.ARGTYPE_UNMATCH, "%s=%s" % (long, error.args[0]))
                return
            if converted is not Unset:
                binding.write(converted)

    def _validate(self):
        if self._error.caught(FaultCode.OPTION_REQUIRED):
            for option in self._options:
                if option.required and option.long not in self._store:
                    self._error.set(FaultCode.OPTION_REQUIRED, option.long)
                    return
        if self._error.caught(FaultCode.OPTION_UNKNOWN):
            for key in self._store.options:
                if self.find_option(key) is None:
                    self._error.set(FaultCode.OPTION_UNKNOWN, key)
                    return

    def _cycle(self, tokens, /):
        self._store.clear()
        if self._error.failed:
            return self._error.code

        self._reserve()
        if self._tokenize(tokens):
            return self._error.code

        if self._subcommand is None:
            if self.has(HELP):
                self.help()
                return FaultCode.HELP
            if self.has(VERSION):
                self.help_version()
                return FaultCode.HELP

        for step in (self._position, self._merge, self._resolve, self._validate):
            step()
            if self._error.failed:
                return self._error.code
        return FaultCode.NONE

    def parse(self, tokens, /):
        """
        Run the parse cycle over tokens, without sub-command dispatch.

        Parameters
        - tokens: a shell-like string or a sequence of tokens (no program name).

        Returns
        - FaultCode.NONE on success, FaultCode.HELP after printing usage or
          version, otherwise the recorded error kind.
        """
        tokens = _tokens(tokens, "parse")
        self._subcommand = None
        return self._cycle(tokens)

    def _match(self, argv, /):
        if not self._commands:
            return 0, None
        if len(argv) > 1 and (subcommand := self.find_command(argv[1])) is not None:
            return 1, subcommand
        for name in (argv[0], os.path.basename(argv[0]), _program()):
            if (subcommand := self.find_command(name)) is not None:
                return 0, subcommand
        return 0, None

    def feed(self, argv=Unset, /):
        """
        Parse a full command line (program name first) and dispatch it.

        Behavior
        - A recorded error (e.g. from registration) is returned right away.
        - The command adopts argv[0] as its name when it has none.
        - Sub-command matching tries argv[1], then argv[0], its basename and the
          program name (symlink-style invocation).
        - A nested Command receives argv from the matched position and runs its
          own cycle; its result is returned.
        - Otherwise the local cycle parses what follows the matched position,
          COMMAND_UNKNOWN is checked when caught, and the first available of
          the sub-command handler, the command handler and run() is called.

        Parameters
        - argv: Unset (sys.argv), a shell-like string or a token sequence.

        Raises
        - ValueError: when argv is empty.
        """
        argv = list(sys.argv) if argv is Unset else _tokens(argv, "feed")
        if not argv:
            raise ValueError("feed() argument must hold at least the program name")

        if self._error.failed:
            return self._error.code
        if not self._name:
            self._name = argv[0]

        shift, self._subcommand = self._match(argv)
        if self._subcommand is not None and self._subcommand.command is not None:
            return self._subcommand.command.feed(argv[shift:])

        if code := self._cycle(argv[shift + 1:]):
            return code

        if self._subcommand is None and self._commands and self._error.caught(FaultCode.COMMAND_UNKNOWN):
            self._error.set(FaultCode.COMMAND_UNKNOWN, argv[1] if len(argv) > 1 else argv[0])
            return self._error.code

        if self._subcommand is not None:
            result = self._subcommand.handler(argv[shift:], self)
        elif self._handler is not None:
            result = self._handler(argv, self)
        else:
            result = self.run(argv)
        return 0 if result is None else result

    def run(self, argv, /):
        """Default action after a successful feed(): the fallback, or 0."""
        if self._fallback is not Unset:
            return self._fallback(argv, self)
        return 0

    def __call__(self, argv=Unset, /):
        return self.feed(argv)

    def __invoke__(self, prompt=Unset):
        """
        Execute this command with a prompt.

        - Unset: sys.argv.
        - str / Iterable[str]: the arguments after the program name; the
          command name (or the program name) is put in front.
        """
        if prompt is Unset:
            return self.feed()
        return self.feed([self._name or _program(), *_tokens(prompt, "invoke")])

    # --- rendering -------------------------------------------------------

    def _styles(self):
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",
            "version-section": "bold #22C55E",
            "group-label": "bold #FFFFFF",
            "command-name": "bold #36C5F0",
            "option-name": "bold #00E6FF",
            "description": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(fragment, style):
            if not fragment:
                return Text()
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if self._colorful else "")

        return styler

    def usage(self):
        """
        Build the usage screen as a rich renderable.

        Layout
        - "Usage: <name> [command] [options] [arguments] ..."
        - version and description
        - "Command:" table (when sub-commands exist)
        - "Option:" table, one row per option in its spec-string form
        """
        text = self._styles()
        renders = []

        head = Text.assemble(text("Usage:", "usage-label"), " ", text(self._name or _program(), "program-name"))
        head.append_text(text(" command" * bool(self._commands) + " [options] [arguments] ...", "usage-section"))
        renders.append(head)

        meta = [text(self._version, "version-section"), text(self._descr, "description-section")]
        if meta := [fragment for fragment in meta if fragment]:
            renders.append(Text("  ").join(meta))

        if self._commands:
            renders.append(text("Command:", "group-label"))
            table = Table.grid(padding=(0, 2))
            table.add_column()
            table.add_column()
            for subcommand in self._commands:
                table.add_row(Text("  ") + text(subcommand.name, "command-name"), text(subcommand.descr, "description"))
            renders.append(table)

        renders.append(text("Option:", "group-label"))
        table = Table.grid(padding=(0, 2))
        table.add_column()
        table.add_column()
        for option in self._options:
            table.add_row(Text("  ") + text(str(option), "option-name"), text(option.descr, "description"))
        renders.append(table)

        renderable = Group(*renders)
        if self._fancy:
            renderable = Panel(
                renderable,
                title=text(f"[ {self._name or _program()} HELP ]".upper(), "panel-title"),
                title_align="left",
            )
        return renderable

    def help(self):
        """Print the usage screen on standard output."""
        Console().print(self.usage())

    def help_version(self):
        """Print the version text on standard output."""
        Console().print(self._version, highlight=False, markup=False)

    def __repr__(self):
        return "command(name=%r, options=%d, subcommands=%d)" % (self._name, len(self._options), len(self._commands))


def command(*args, **kwargs):
    """
    Create a Command, or return a decorator that builds it around a handler.

    Invocation modes
    - Direct handler:
        cmd = command(func)
      Returns a Command named after func whose handler is func.
    - Decorator:
        @command("tool", "does things", version="1.0")
        def tool(argv, command): ...
      Returns a decorator producing a Command with the given metadata and the
      decorated function as its handler.

    Handlers are called as handler(argv, command).
    """
    if len(args) == 1 and not kwargs and callable(args[0]) and not isinstance(args[0], str):
        handler, = args
        return Command(handler.__name__, handler.__doc__ or "", handler=handler)

    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(*args, handler=handler, **kwargs)

    return wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commands or handlers.

    Parameters
    - object: a Command (anything with __invoke__) or a plain handler callable.
    - prompt: Unset (sys.argv), a shell-like string, or an iterable of tokens
      following the program name.

    Returns
    - the result of the command's feed().

    Raises
    - TypeError: when object cannot be invoked or prompt has a wrong type.
    """
    if hasattr(object, "__invoke__") and builtins.callable(object.__invoke__):
        return object.__invoke__(prompt)
    if builtins.callable(object):
        return invoke(command(object), prompt)
    raise TypeError("invoke() first argument must implement __invoke__ method")


__all__ = (
    "Command",
    "Subcommand",
    "command",
    "invoke",
)
