# scanner/pattern.py

"""
Selector template grammar.

A rule line is literal text interleaved with ``%X...%`` directives, where
``X`` is one uppercase letter and ``...`` a comma separated argument list:

    %N01,10%  numbers 01..10, zero padded to the width of the first argument
    %N1,10%   numbers 1..10
    %Na,z%    letters a..z
    %D%       the whole domain
    %D1%      first label from the left
    %D-1%     last label
    %D1,2%    first through second label, joined with dots
    %La,b,c%  each of the listed strings (empty entries allowed)
    %Ofoo%    nothing, then "foo"

All whitespace is removed from a line before it is tokenized, so columns in a
rule file are only cosmetic.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger("dkimscan.pattern")

COMMENT_PREFIXES = ("#", ";")
TERMINATOR = "EoF"

_WHITESPACE_RE = re.compile(r"\s+")
_DIRECTIVE_RE = re.compile(r"\A%([A-Z])(.*)%\Z")


class RuleError(ValueError):
    """A rule line is malformed; generation for the whole run must stop."""


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class NumericRange:
    """%N: inclusive range of integers, or of single letters."""

    start: str
    end: str

    @classmethod
    def from_args(cls, args):
        if len(args) != 2:
            raise RuleError(f"bad args to %N expansion: {args!r}")
        start, end = args
        if not cls._is_letter_range(start, end):
            try:
                int(start)
                int(end)
            except ValueError:
                raise RuleError(f"bad args to %N expansion: {args!r}") from None
        return cls(start, end)

    @staticmethod
    def _is_letter_range(start, end):
        return len(start) == 1 and len(end) == 1 and start.isalpha() and end.isalpha()

    @property
    def is_alphabetic(self):
        return self._is_letter_range(self.start, self.end)

    @property
    def pad_width(self):
        """Width to zero-pad to, or 0 when the first argument has no leading zero."""
        if not self.is_alphabetic and self.start.startswith("0"):
            return len(self.start)
        return 0


@dataclass(frozen=True)
class DomainParts:
    """%D: the domain, one label, or an inclusive slice of labels."""

    indexes: tuple = ()

    @classmethod
    def from_args(cls, args):
        if len(args) > 2:
            raise RuleError(f"bad args to %D expansion: {args!r}")
        try:
            return cls(tuple(int(arg) for arg in args))
        except ValueError:
            raise RuleError(f"bad args to %D expansion: {args!r}") from None


@dataclass(frozen=True)
class ListItems:
    """%L: each item in order; the empty string is a valid item."""

    items: tuple = ()

    @classmethod
    def from_args(cls, args):
        return cls(tuple(args))


@dataclass(frozen=True)
class OptionalSuffix:
    """%O: the prefix alone, then the prefix with the suffix appended."""

    suffix: str

    @classmethod
    def from_args(cls, args):
        if len(args) != 1:
            raise RuleError(f"bad args to %O expansion: {args!r}")
        return cls(args[0])


DIRECTIVES = {
    "N": NumericRange,
    "D": DomainParts,
    "L": ListItems,
    "O": OptionalSuffix,
}


def strip_whitespace(line):
    return _WHITESPACE_RE.sub("", line)


def iter_rule_lines(lines):
    """Yield template lines from a rule stream.

    Blank lines and comments are skipped; a line reading ``EoF`` ends the
    stream.
    """
    for raw in lines:
        line = strip_whitespace(raw)
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        if line == TERMINATOR:
            logger.debug("Rule terminator reached")
            return
        yield line


def _split_pieces(line):
    """Break a line into literal runs and ``%...%`` spans, in order."""
    pieces = []
    while True:
        idx = line.find("%")
        if idx < 0:
            break
        if idx:
            pieces.append(line[:idx])
            line = line[idx:]
        end = line.find("%", 1)
        if end < 0:
            break
        pieces.append(line[:end + 1])
        line = line[end + 1:]
    if line:
        pieces.append(line)
    return pieces


def parse_directive(piece):
    """Return the directive token for a ``%X...%`` span, or None if it is not one."""
    match = _DIRECTIVE_RE.match(piece)
    if not match:
        return None
    kind, body = match.groups()
    token_cls = DIRECTIVES.get(kind)
    if token_cls is None:
        raise RuleError(f"unknown expansion %{kind} in {piece!r}")
    args = body.split(",") if body else []
    return token_cls.from_args(args)


def compile_rule(line):
    """Compile one rule line into a list of tokens, leftmost first."""
    tokens = []
    for piece in _split_pieces(strip_whitespace(line)):
        token = parse_directive(piece)
        if token is None:
            # a stray '%' span is plain text
            if tokens and isinstance(tokens[-1], Literal):
                tokens[-1] = Literal(tokens[-1].text + piece)
            else:
                tokens.append(Literal(piece))
        else:
            tokens.append(token)
    return tokens
