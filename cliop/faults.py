"""
cliop faults (error kinds, catch policy, and reporting).

Scope
- FaultCode: canonical, stable numeric identifiers for every error kind plus the
  HELP sentinel returned after printing usage or version. Codes are grouped by
  domain to keep logs/searches predictable; 0 is reserved for "no error".
- ErrorState: the per-command catch policy. Only kinds in the catch set are
  surfaced as failures; everything else is tolerated and parsing continues.
  Only the most recent error is retained, together with a free-text context.
- Reporter: a single process-wide function receiving (code, message) for every
  recorded error. The default prints “E<code>: <message>” on standard error
  through a rich console. Replace it with set_reporter(); the previous reporter
  is returned so callers can restore it.
- getdoc(): the short description for a code, optionally overridden by the host.

Integration
- Registration and parsing steps ask ErrorState.caught(code) before treating a
  questionable condition as a failure, then call ErrorState.set(code, context).
- Command.feed()/parse() return the recorded code.
"""
from enum import IntEnum

from rich.console import Console
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - success / sentinel
      • NONE (0), HELP (usage or version was printed)
    - registration (1010x)
      • OPTION_INVALID, OPTION_REDEFINE, FLAG_INVALID, FLAG_REDEFINE,
        SUBCMD_INVALID, SUBCMD_REDEFINE
    - tokens (1011x)
      • OPTION_INCOMPLETE, ARGUMENT_INVALID, POSITION_BIND
    - config files (1012x)
      • CONFIG_UNREADABLE, CONFIG_INVALID
    - bindings (1013x)
      • ARGTYPE_UNMATCH
    - validation (1014x)
      • OPTION_REQUIRED, OPTION_UNKNOWN, COMMAND_UNKNOWN

    spacing leaves room for future additions without reshuffling existing codes.
    """
    NONE                = 0
    HELP                = 10000

    # --- registration errors (1010x) ---
    OPTION_INVALID      = 10101
    OPTION_REDEFINE     = 10102
    FLAG_INVALID        = 10103
    FLAG_REDEFINE       = 10104
    SUBCMD_INVALID      = 10105
    SUBCMD_REDEFINE     = 10106

    # --- token errors (1011x) ---
    OPTION_INCOMPLETE   = 10111
    ARGUMENT_INVALID    = 10112
    POSITION_BIND       = 10113

    # --- config errors (1012x) ---
    CONFIG_UNREADABLE   = 10121
    CONFIG_INVALID      = 10122

    # --- binding errors (1013x) ---
    ARGTYPE_UNMATCH     = 10131

    # --- validation errors (1014x) ---
    OPTION_REQUIRED     = 10141
    OPTION_UNKNOWN      = 10142
    COMMAND_UNKNOWN     = 10143

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_DOCS = {
    FaultCode.HELP: "only show information as demanded",
    FaultCode.OPTION_INVALID: "option name may confuse or invalid",
    FaultCode.OPTION_REDEFINE: "option name is redefined",
    FaultCode.FLAG_INVALID: "flag letter invalid",
    FaultCode.FLAG_REDEFINE: "flag letter is redefined",
    FaultCode.SUBCMD_INVALID: "sub-command name may confuse or invalid",
    FaultCode.SUBCMD_REDEFINE: "sub-command name is redefined",
    FaultCode.OPTION_INCOMPLETE: "no argument for the last option",
    FaultCode.ARGUMENT_INVALID: "argument may confuse or invalid",
    FaultCode.POSITION_BIND: "position argument bound index mistake",
    FaultCode.CONFIG_UNREADABLE: "can't read config file",
    FaultCode.CONFIG_INVALID: "config line may confuse or invalid",
    FaultCode.ARGTYPE_UNMATCH: "argument bound type is unmatch",
    FaultCode.OPTION_REQUIRED: "required option absent",
    FaultCode.OPTION_UNKNOWN: "unexpected option encountered",
    FaultCode.COMMAND_UNKNOWN: "unsupported command",
}


def getdoc(code, /):
    """
    short description for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - otherwise the built-in description is returned; unknown codes yield "".
    """
    if not isinstance(code, int):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return _DOCS.get(code, "")


def _print(code, message, /):
    """default reporter: one line on standard error."""
    label = FaultCode(code).normalize() if code in FaultCode else str(code)
    console.print(Text.assemble(("E" + label, "bold red"), ": ", message), highlight=False)


_reporter = _print


def get_reporter():
    """Return the process-wide reporter currently in use."""
    return _reporter


def set_reporter(reporter, /):
    """
    Install a process-wide reporter and return the previous one.

    contract
    - reporter is called as reporter(code, message) for every recorded error.
    - passing None restores the default rich-console reporter.
    - there is no automatic scoping: callers that override the reporter
      temporarily must restore the returned one themselves.
    """
    global _reporter
    if reporter is not None and not callable(reporter):
        raise TypeError("set_reporter() argument must be callable or None")
    previous, _reporter = _reporter, reporter if reporter is not None else _print
    return previous


def report(code, message, /):
    """Forward one error to the current reporter."""
    _reporter(code, message)


class ErrorState:
    """
    Catch policy plus the last recorded error.

    The catch set starts empty: the library is permissive unless the caller
    opts in to specific kinds. Codes outside the set are never recorded.

    Attributes
    - code: FaultCode of the last recorded error (FaultCode.NONE when clean).
    - context: free text attached to the last error ("" when clean).
    """

    def __init__(self):
        self._catch = set()
        self._code = FaultCode.NONE
        self._context = ""

    @property
    def code(self):
        return self._code

    @property
    def context(self):
        return self._context

    @property
    def failed(self):
        """Whether an error is currently recorded."""
        return self._code != FaultCode.NONE

    def catch(self, *codes):
        for code in codes:
            self._catch.add(FaultCode(code))
        return self

    def catch_all(self):
        self._catch.update(code for code in FaultCode if code not in (FaultCode.NONE, FaultCode.HELP))
        return self

    def ignore(self, *codes):
        for code in codes:
            self._catch.discard(FaultCode(code))
        return self

    def caught(self, code, /):
        return code in self._catch

    def set(self, code, context="", /):
        """
        Record an error when its kind is caught; code 0 clears the state.

        Returns True when the error was recorded (and reported).
        """
        if code == FaultCode.NONE:
            self.clear()
            return False
        if not self.caught(code):
            return False
        self._code = FaultCode(code)
        self._context = str(context)
        report(self._code, str(self))
        return True

    def clear(self):
        self._code = FaultCode.NONE
        self._context = ""

    def __bool__(self):
        # true while clean, so `if not command.error:` reads as "something failed"
        return self._code == FaultCode.NONE

    def __int__(self):
        return int(self._code)

    def __str__(self):
        if self._code == FaultCode.NONE:
            return ""
        text = getdoc(self._code)
        if self._context:
            text += ": " + self._context
        return text

    def __repr__(self):
        return "error-state(code=%r, context=%r, catch=%r)" % (
            self._code, self._context, sorted(self._catch)
        )


__all__ = (
    "FaultCode",
    "ErrorState",
    "getdoc",
    "get_reporter",
    "set_reporter",
    "report",
)
