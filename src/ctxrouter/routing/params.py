"""Route parameter parsing and pattern compilation.

Patterns use two parameter markers:

- ``:name`` captures one segment: ``/user/:id``, ``job.:id.clean``
- ``*name`` captures the remainder, separators included: ``/files/*path``

Everything else in a pattern is literal text.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote

PARAM_RE: re.Pattern[str] = re.compile(r"([:*])([A-Za-z_]\w*)")

# (regex for one captured value) per parameter kind and route separator
CAPTURES: dict[tuple[str, str], str] = {
    (":", "/"): r"[^/]+",
    (":", "."): r"[^/.]+",
    ("*", "/"): r".+",
    ("*", "."): r".+",
}


def has_params(pattern: str) -> bool:
    """True if *pattern* contains at least one parameter marker.

    Patterns without parameters are stored for exact lookup.
    """
    return PARAM_RE.search(pattern) is not None


def param_names(pattern: str) -> list[str]:
    """Return the parameter names of *pattern* in order of appearance."""
    return [m.group(2) for m in PARAM_RE.finditer(pattern)]


@dataclass(frozen=True, slots=True)
class Matcher:
    """A compiled pattern. Call it with a raw value.

    Returns the captured parameters on a match, ``None`` otherwise::

        m = compile_matcher("/user/:id", "/")
        m("/user/42")    # {"id": "42"}
        m("/user/42/x")  # None
    """

    pattern: str
    regex: re.Pattern[str]
    names: tuple[str, ...]

    def __call__(self, raw: str) -> dict[str, str] | None:
        match = self.regex.fullmatch(raw)
        if match is None:
            return None
        return {name: unquote(match.group(name)) for name in self.names}


def compile_matcher(pattern: str, separator: str = "/") -> Matcher:
    """Compile *pattern* into a :class:`Matcher`.

    *separator* is ``"/"`` for path-style patterns and ``"."`` for
    dot-identity patterns; a ``:name`` capture never crosses it.

    Raises ``ValueError`` for an unknown separator or a repeated
    parameter name.
    """
    if separator not in ("/", "."):
        msg = f"Unknown route separator: {separator!r}"
        raise ValueError(msg)

    parts: list[str] = []
    names: list[str] = []
    last_end = 0

    for m in PARAM_RE.finditer(pattern):
        kind, name = m.group(1), m.group(2)
        if name in names:
            msg = f"Duplicate parameter {name!r} in route pattern {pattern!r}"
            raise ValueError(msg)
        parts.append(re.escape(pattern[last_end : m.start()]))
        parts.append(f"(?P<{name}>{CAPTURES[kind, separator]})")
        names.append(name)
        last_end = m.end()

    parts.append(re.escape(pattern[last_end:]))
    return Matcher(pattern=pattern, regex=re.compile("".join(parts)), names=tuple(names))
