"""Lenient printf-style formatting for catalog texts.

Catalog texts are written by translators and the argument count is not
validated against the placeholders, so substitution must never raise.
Problems are rendered inline instead:

- a placeholder without an argument: ``%!s(MISSING)``
- an argument the verb cannot format: ``%!d(str=abc)``
- arguments left over: ``%!(EXTRA int=1, str=x)``

``%v`` formats any value like ``%s``, ``%q`` double-quotes it, ``%t`` prints
a boolean, ``%b`` prints an integer in binary and ``%T`` prints the type
name. Integer verbs never truncate: ``%d`` of a float is ``%!d(float=3.7)``.
``%x`` and ``%X`` of a string print its UTF-8 bytes in hex.
"""

import re
from typing import Any, Sequence

_DIRECTIVE = re.compile(
    r"%(?P<flags>[-+# 0]*)(?P<width>\d+)?(?:\.(?P<precision>\d+))?(?P<verb>[a-zA-Z%])"
)

# Verbs the % operator handles natively
_NATIVE_VERBS = set("diouxXeEfFgGcrsa")
_INTEGER_VERBS = set("diouxX")


def _describe(arg: Any) -> str:
    return f"{type(arg).__name__}={arg}"


def _quote(arg: Any) -> str:
    text = str(arg).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def _hex(verb: str, arg) -> str:
    data = arg.encode("utf-8") if isinstance(arg, str) else arg
    text = data.hex()
    return text.upper() if verb == "X" else text


def _as_text(verb: str, arg: Any) -> str:
    if verb == "v":
        return str(arg)
    if verb == "T":
        return type(arg).__name__
    if verb == "q":
        return _quote(arg)
    if verb == "t":
        if not isinstance(arg, bool):
            raise TypeError(f"%t requires a bool, got {type(arg).__name__}")
        return "true" if arg else "false"
    if verb == "b":
        if isinstance(arg, bool) or not isinstance(arg, int):
            raise TypeError(f"%b requires an int, got {type(arg).__name__}")
        return format(arg, "b")
    raise ValueError(f"unsupported verb %{verb}")


def format_one(directive: re.Match, arg: Any) -> str:
    """Format a single argument for one matched directive."""
    verb = directive.group("verb")
    fmt = directive.group("flags") or ""
    if directive.group("width"):
        fmt += directive.group("width")
    if directive.group("precision") is not None:
        fmt += "." + directive.group("precision")

    try:
        if verb in _INTEGER_VERBS and (isinstance(arg, bool) or not isinstance(arg, int)):
            if verb in "xX" and isinstance(arg, (str, bytes)):
                return ("%" + fmt + "s") % (_hex(verb, arg),)
            raise TypeError(f"%{verb} requires an int, got {type(arg).__name__}")
        if verb in _NATIVE_VERBS:
            return ("%" + fmt + verb) % (arg,)
        return ("%" + fmt + "s") % (_as_text(verb, arg),)
    except (TypeError, ValueError, OverflowError):
        return f"%!{verb}({_describe(arg)})"


def sprintf(template: str, args: Sequence[Any]) -> str:
    """Substitute ``args`` positionally into ``template``.

    Args:
        template: Text with printf-style placeholders.
        args: Values, consumed in order.

    Returns:
        The formatted text. Never raises for a mismatched argument count
        or type.
    """
    out = []
    pos = 0
    used = 0
    for directive in _DIRECTIVE.finditer(template):
        out.append(template[pos : directive.start()])
        pos = directive.end()

        verb = directive.group("verb")
        if verb == "%":
            out.append("%")
            continue
        if used >= len(args):
            out.append(f"%!{verb}(MISSING)")
            continue
        out.append(format_one(directive, args[used]))
        used += 1
    out.append(template[pos:])

    if used < len(args):
        extra = ", ".join(_describe(arg) for arg in args[used:])
        out.append(f"%!(EXTRA {extra})")
    return "".join(out)
