# scanner/generator.py

import logging

from .pattern import (
    DomainParts,
    ListItems,
    Literal,
    NumericRange,
    OptionalSuffix,
    compile_rule,
    iter_rule_lines,
)

logger = logging.getLogger("dkimscan.generator")


def expand_literal(token, prefix, context):
    yield prefix + token.text


def expand_numeric_range(token, prefix, context):
    if token.is_alphabetic:
        for code in range(ord(token.start), ord(token.end) + 1):
            yield prefix + chr(code)
        return

    width = token.pad_width
    for n in range(int(token.start), int(token.end) + 1):
        if width:
            yield f"{prefix}{n:0{width}d}"
        else:
            yield f"{prefix}{n}"


def _label_index(index, count):
    """Convert a 1-based (or negative) label index and clamp it into range."""
    if index > 0:
        index -= 1
    index = min(index, count - 1)
    return max(index, -count)


def expand_domain_parts(token, prefix, context):
    labels = context.labels
    count = len(labels)

    if not token.indexes:
        yield prefix + context.domain
    elif len(token.indexes) == 1:
        yield prefix + labels[_label_index(token.indexes[0], count)]
    else:
        first, last = (_label_index(i, count) for i in token.indexes)
        # positions first..last counting upward, negatives wrap like list indexes
        yield prefix + ".".join(labels[i] for i in range(first, last + 1))


def expand_list(token, prefix, context):
    for item in token.items:
        yield prefix + item


def expand_optional(token, prefix, context):
    yield prefix
    yield prefix + token.suffix


EXPANDERS = {
    Literal: expand_literal,
    NumericRange: expand_numeric_range,
    DomainParts: expand_domain_parts,
    ListItems: expand_list,
    OptionalSuffix: expand_optional,
}


def expand_token(token, prefix, context):
    """Yield ``prefix`` extended by each value ``token`` produces."""
    return EXPANDERS[type(token)](token, prefix, context)


def iter_candidates(tokens, context, prefix=""):
    """Lazily yield every candidate for a compiled rule, depth first."""
    stack = [iter([prefix])]
    depth = len(tokens)
    while stack:
        try:
            value = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        level = len(stack) - 1
        if level == depth:
            yield value
        else:
            stack.append(expand_token(tokens[level], value, context))


def expand(tokens, context, sink):
    """Call ``sink`` once per candidate of a compiled rule."""
    for candidate in iter_candidates(tokens, context):
        sink(candidate)


def generate(lines, context):
    """Yield candidates for every rule in a rule stream, rule by rule.

    Rules are compiled as they are reached, so a malformed rule raises
    :class:`RuleError` only once generation gets to it. Duplicate candidates
    across rules are not filtered.
    """
    for number, line in enumerate(iter_rule_lines(lines), 1):
        tokens = compile_rule(line)
        logger.debug("Rule %d: %s -> %d tokens", number, line, len(tokens))
        yield from iter_candidates(tokens, context)
