"""
cliop configuration files: turn an ini-like file into command-line tokens.

Format (one entry per line, surrounding whitespace ignored)
- blank lines and lines starting with "#" or ";" are comments.
- "[group]" opens a section; keys below it are prefixed with "group.".
- "key = value" becomes the token "key=value" (leading dashes stripped from
  the key, both sides trimmed).
- "--" or "[--]" ends the options: it is emitted as "--" and every following
  line is emitted verbatim as a positional argument.
- any other line is emitted as-is, unless CONFIG_INVALID is caught.

The tokens are meant for the same tokenizer as the command line; precedence
between the two sources is handled by the caller.
"""
from .faults import FaultCode


def read_config(path, errors, /):
    """
    Read a configuration file into a list of tokens.

    Parameters
    - path: file to read ("" is treated as unreadable).
    - errors: the ErrorState deciding which conditions are failures.

    Behavior
    - An unreadable file records CONFIG_UNREADABLE (context: the path) when
      caught and yields no tokens; otherwise it is silently skipped.
    - A line that is neither a comment, a section, a key/value pair nor part
      of the raw tail records CONFIG_INVALID (context: the line) when caught,
      and reading stops there.

    Returns
    - list[str]: the tokens read before any failure.
    """
    tokens = []
    try:
        with open(path, encoding="utf-8") as stream:
            lines = stream.read().splitlines()
    except (OSError, UnicodeDecodeError):
        errors.set(FaultCode.CONFIG_UNREADABLE, path)
        return tokens

    raw = False
    group = ""
    for line in map(str.strip, lines):
        if not line or line[0] in "#;":
            continue

        if line in ("--", "[--]"):
            raw = True
            tokens.append("--")
            continue
        if raw:
            tokens.append(line)
            continue

        if len(line) > 2 and line[0] == "[" and line[-1] == "]":
            group = line[1:-1]
            continue

        key, equal, value = line.partition("=")
        if equal:
            key = key.strip().lstrip("-")
            if group:
                key = group + "." + key
            line = key + "=" + value.strip()
        elif errors.caught(FaultCode.CONFIG_INVALID):
            errors.set(FaultCode.CONFIG_INVALID, line)
            return tokens

        tokens.append(line)

    return tokens


__all__ = (
    "read_config",
)
