# tests/test_generator.py

"""Tests for candidate selector generation."""

import string
import unittest

from scanner.domain import DomainContext
from scanner.generator import expand, expand_token, generate, iter_candidates
from scanner.pattern import (
    DomainParts,
    ListItems,
    NumericRange,
    OptionalSuffix,
    RuleError,
    compile_rule,
)


def values(token, prefix="", domain="a.b.co.uk"):
    return list(expand_token(token, prefix, DomainContext(domain)))


def candidates(rule, domain="example.com"):
    return list(iter_candidates(compile_rule(rule), DomainContext(domain)))


class TestNumericRange(unittest.TestCase):

    def test_zero_padded(self):
        self.assertEqual(values(NumericRange("01", "05")), ["01", "02", "03", "04", "05"])

    def test_unpadded(self):
        self.assertEqual(values(NumericRange("1", "5")), ["1", "2", "3", "4", "5"])

    def test_letters(self):
        self.assertEqual(values(NumericRange("a", "z")), list(string.ascii_lowercase))

    def test_descending_is_empty(self):
        self.assertEqual(values(NumericRange("5", "1")), [])
        self.assertEqual(values(NumericRange("z", "a")), [])

    def test_padding_width_not_widened(self):
        """Width comes from the first argument even when values outgrow it."""
        self.assertEqual(values(NumericRange("08", "100"))[-3:], ["98", "99", "100"])

    def test_single_zero(self):
        self.assertEqual(values(NumericRange("0", "3")), ["0", "1", "2", "3"])

    def test_prefix_kept(self):
        self.assertEqual(values(NumericRange("1", "2"), prefix="k"), ["k1", "k2"])


class TestDomainParts(unittest.TestCase):
    """Label selection on a.b.co.uk."""

    def test_whole_domain(self):
        self.assertEqual(values(DomainParts(())), ["a.b.co.uk"])

    def test_last_label(self):
        self.assertEqual(values(DomainParts((-1,))), ["uk"])

    def test_first_label(self):
        self.assertEqual(values(DomainParts((1,))), ["a"])

    def test_slice_from_left(self):
        self.assertEqual(values(DomainParts((1, 2))), ["a.b"])

    def test_slice_from_right(self):
        self.assertEqual(values(DomainParts((-2, -1))), ["co.uk"])

    def test_index_clamped(self):
        self.assertEqual(values(DomainParts((9,))), ["uk"])
        self.assertEqual(values(DomainParts((-9,))), ["a"])

    def test_slice_clamped(self):
        self.assertEqual(values(DomainParts((-3, -1)), domain="example.com"), ["example.com"])

    def test_zero_is_first_label(self):
        self.assertEqual(values(DomainParts((0,))), ["a"])

    def test_mixed_signs_slice(self):
        self.assertEqual(values(DomainParts((2, -1))), [""])

    def test_prefix_kept(self):
        self.assertEqual(values(DomainParts(()), prefix="x-"), ["x-a.b.co.uk"])

    def test_repeated_use_does_not_drift(self):
        """Clamping must not change the token between invocations."""
        token = DomainParts((2,))
        self.assertEqual(values(token), ["b"])
        self.assertEqual(values(token), ["b"])


class TestListAndOptional(unittest.TestCase):

    def test_list_with_empty_item(self):
        self.assertEqual(values(ListItems(("", "x", "y"))), ["", "x", "y"])

    def test_empty_list(self):
        self.assertEqual(values(ListItems(())), [])

    def test_optional(self):
        self.assertEqual(values(OptionalSuffix("foo"), prefix="k"), ["k", "kfoo"])


class TestComposition(unittest.TestCase):
    """Rules expand as nested loops, leftmost outermost."""

    def test_literal_then_range(self):
        self.assertEqual(candidates("ab%N1,2%"), ["ab1", "ab2"])

    def test_rightmost_varies_fastest(self):
        self.assertEqual(
            candidates("%La,b%%N1,2%"),
            ["a1", "a2", "b1", "b2"],
        )

    def test_optional_in_middle(self):
        self.assertEqual(
            candidates("q%N1,2%%O-%x"),
            ["q1x", "q1-x", "q2x", "q2-x"],
        )

    def test_domain_with_suffixes(self):
        self.assertEqual(
            candidates("%D1%%L,-dkim,-google%", domain="example.com"),
            ["example", "example-dkim", "example-google"],
        )

    def test_product_size(self):
        self.assertEqual(len(candidates("%Na,z%%N0,9%")), 260)

    def test_empty_list_yields_nothing(self):
        self.assertEqual(candidates("k%L%%N1,3%"), [])

    def test_is_lazy(self):
        """Large rules are not materialized up front."""
        gen = iter_candidates(compile_rule("%Na,z%%Na,z%%Na,z%%Na,z%"), DomainContext("example.com"))
        self.assertEqual(next(gen), "aaaa")
        self.assertEqual(next(gen), "aaab")

    def test_expand_calls_sink(self):
        seen = []
        expand(compile_rule("s%L1024,2048%"), DomainContext("example.com"), seen.append)
        self.assertEqual(seen, ["s1024", "s2048"])


class TestGenerate(unittest.TestCase):
    """Whole rule streams."""

    def test_rules_in_order_without_dedup(self):
        lines = ["; comment", "default", "%Ldefault,mail%", "EoF", "never"]
        self.assertEqual(
            list(generate(lines, DomainContext("example.com"))),
            ["default", "default", "mail"],
        )

    def test_bad_rule_aborts(self):
        gen = generate(["default", "%N1%"], DomainContext("example.com"))
        self.assertEqual(next(gen), "default")
        with self.assertRaises(RuleError):
            next(gen)

    def test_builtin_rules_compile(self):
        from scanner.rules import load_rules

        gen = generate(load_rules(), DomainContext("example.com"))
        first = [next(gen) for _ in range(3)]
        self.assertEqual(first, ["k1", "k2", "k3"])


if __name__ == "__main__":
    unittest.main()
