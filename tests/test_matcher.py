# -*- coding: utf-8 -*-
import pytest

from ethvanity.config import DEFAULT_PREFIXES, MUTATION_ALPHABET
from ethvanity.utils.matcher import (
    AdjacentRun,
    KeyMutation,
    PrefixSuffix,
    build_match_spec,
    normalize_pattern,
    repeated_patterns,
)

BODY = "1234567890123456789012345678901234"


class TestPrefixSuffix:
    spec = PrefixSuffix(("0xabc", "0xdef"), ("99", "77"))

    def test_neither(self):
        assert not self.spec.matches("0x123456" + BODY)

    def test_prefix_only(self):
        assert not self.spec.matches("0xabc456" + BODY)

    def test_suffix_only(self):
        assert not self.spec.matches("0x123456" + BODY[:-2] + "77")

    def test_both(self):
        assert self.spec.matches("0xabc456" + BODY[:-2] + "99")

    def test_prefix_and_suffix_are_chosen_independently(self):
        assert self.spec.matches("0xdef456" + BODY[:-2] + "99")

    def test_checksummed_case_is_ignored(self):
        assert self.spec.matches("0xABC456" + BODY[:-2] + "99")

    def test_empty_suffix_accepts_any_ending(self):
        assert PrefixSuffix(("0xabc",)).matches("0xabc456" + BODY)


class TestAdjacentRun:
    def test_run_at_start(self):
        assert AdjacentRun(5).matches("0xaaaaa1234" + "0" * 31)

    def test_broken_run(self):
        assert not AdjacentRun(5).matches("0xaaaa1a23" + "0" * 32)

    def test_run_elsewhere_does_not_count(self):
        assert not AdjacentRun(5).matches("0x1aaaaa234" + "0" * 31)

    def test_uppercase_address(self):
        assert AdjacentRun(3).matches("0xFfF1" + "0" * 36)

    @pytest.mark.parametrize("length", [0, 41])
    def test_length_bounds(self, length):
        with pytest.raises(ValueError):
            AdjacentRun(length)


class TestKeyMutation:
    def test_sixteen_siblings(self):
        base = "ab" * 32
        siblings = KeyMutation(PrefixSuffix(("0x",))).siblings(base)
        assert len(siblings) == 16
        assert sorted(s[-1] for s in siblings) == sorted("0123456789abcdef")
        for sibling in siblings:
            assert len(sibling) == 64
            assert sibling[:-1] == base[:-1]

    def test_alphabet_order_is_kept(self):
        spec = KeyMutation(PrefixSuffix(("0x",)))
        assert "".join(s[-1] for s in spec.siblings("0" * 64)) == MUTATION_ALPHABET
        assert spec.fan_out == 16

    @pytest.mark.parametrize("alphabet", ["0123456789abcde", "0123456789abcdeg", "00123456789abcde"])
    def test_invalid_alphabet(self, alphabet):
        with pytest.raises(ValueError):
            KeyMutation(PrefixSuffix(("0x",)), alphabet)

    def test_matches_delegates_to_target(self):
        spec = KeyMutation(PrefixSuffix(("0xabc",), ("99",)))
        assert spec.matches("0xabc456" + BODY[:-2] + "99")
        assert not spec.matches("0x123456" + BODY)


def test_normalize_pattern():
    assert normalize_pattern("ABC") == "0xabc"
    assert normalize_pattern(" 0xDead ") == "0xdead"
    assert normalize_pattern("BEEF", marker=None) == "beef"
    with pytest.raises(ValueError):
        normalize_pattern("0xxyz")


def test_repeated_patterns():
    assert repeated_patterns(3, "0x")[:2] == ("0x000", "0x111")
    assert len(repeated_patterns(5)) == 16
    with pytest.raises(ValueError):
        repeated_patterns(0)


def test_build_match_spec_defaults():
    spec = build_match_spec("prefix-suffix")
    assert spec.prefixes == DEFAULT_PREFIXES
    assert spec.suffixes == ("",)


def test_build_match_spec_variants():
    spec = build_match_spec("mutation", starts_with=["dead"], repeat_suffix=2)
    assert isinstance(spec, KeyMutation)
    assert spec.target.prefixes == ("0xdead",)
    assert spec.target.suffixes == repeated_patterns(2)
    assert build_match_spec("adjacent", adjacent_length=4) == AdjacentRun(4)
    with pytest.raises(ValueError):
        build_match_spec("nonsense")


def test_suffix_only_search_accepts_any_prefix():
    spec = build_match_spec("prefix-suffix", ends_with=["0"])
    assert spec.prefixes == ("0x",)
    assert spec.matches("0x1234" + "5" * 35 + "0")
    assert not spec.matches("0x1234" + "5" * 36)


def test_repeated_prefix_family_includes_f():
    spec = build_match_spec("prefix-suffix", repeat_prefix=3)
    assert "0xfff" in spec.prefixes
    assert len(spec.prefixes) == 16
