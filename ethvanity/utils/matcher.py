# -*- coding: utf-8 -*-
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ethvanity.config import (
    ADDRESS_LENGTH,
    ADDRESS_MARKER,
    DEFAULT_PREFIXES,
    DEFAULT_SUFFIXES,
    MUTATION_ALPHABET,
)

HEX_DIGITS = "0123456789abcdef"


@dataclass(frozen=True)
class PrefixSuffix:
    """Any prefix combined with any suffix, compared on the lowercased address."""

    prefixes: Tuple[str, ...]
    suffixes: Tuple[str, ...] = DEFAULT_SUFFIXES

    fan_out = 1

    def __post_init__(self):
        object.__setattr__(self, "prefixes", tuple(self.prefixes))
        object.__setattr__(self, "suffixes", tuple(self.suffixes))

    def matches(self, address: str) -> bool:
        lowered = address.lower()
        return any(lowered.startswith(p) for p in self.prefixes) and any(
            lowered.endswith(s) for s in self.suffixes
        )


@dataclass(frozen=True)
class KeyMutation:
    """Tests 16 sibling keys that differ from one random key in the last hex digit."""

    target: PrefixSuffix
    alphabet: str = MUTATION_ALPHABET

    def __post_init__(self):
        alphabet = self.alphabet.lower()
        if len(alphabet) != 16 or set(alphabet) != set(HEX_DIGITS):
            raise ValueError("Mutation alphabet must list each hex digit exactly once: {!r}".format(self.alphabet))
        object.__setattr__(self, "alphabet", alphabet)

    @property
    def fan_out(self) -> int:
        return len(self.alphabet)

    def siblings(self, base_hex: str) -> List[str]:
        stem = base_hex[:-1]
        return [stem + ch for ch in self.alphabet]

    def matches(self, address: str) -> bool:
        return self.target.matches(address)


@dataclass(frozen=True)
class AdjacentRun:
    """The first ``length`` characters after the marker are one repeated character."""

    length: int
    marker: str = field(default=ADDRESS_MARKER)

    fan_out = 1

    def __post_init__(self):
        limit = ADDRESS_LENGTH - len(self.marker)
        if not 1 <= int(self.length) <= limit:
            raise ValueError("Adjacent run length must be between 1 and {}".format(limit))
        object.__setattr__(self, "length", int(self.length))

    def matches(self, address: str) -> bool:
        run = address.lower()[len(self.marker):len(self.marker) + self.length]
        return len(set(run)) == 1


def normalize_pattern(text: str, marker: Optional[str] = ADDRESS_MARKER) -> str:
    """Lowercase a user pattern and, for prefixes, put the ``0x`` marker in front."""
    pattern = text.strip().lower()
    body = pattern
    if marker:
        if pattern.startswith(marker):
            body = pattern[len(marker):]
        pattern = marker + body
    invalid = sorted(set(body) - set(HEX_DIGITS))
    if invalid:
        raise ValueError("Invalid characters {} in pattern {!r}".format(", ".join(invalid), text))
    return pattern


def repeated_patterns(length: int, marker: str = "") -> Tuple[str, ...]:
    """All 16 patterns made of one hex digit repeated ``length`` times.

    Includes ``f``, unlike the hard-coded DEFAULT_PREFIXES list.
    """
    if length < 1:
        raise ValueError("Pattern length must be at least 1")
    return tuple(marker + ch * length for ch in HEX_DIGITS)


def build_match_spec(
    mode: str,
    starts_with: Iterable[str] = (),
    ends_with: Iterable[str] = (),
    repeat_prefix: Optional[int] = None,
    repeat_suffix: Optional[int] = None,
    alphabet: Optional[str] = None,
    adjacent_length: Optional[int] = None,
):
    if mode == "adjacent":
        if adjacent_length is None:
            raise ValueError("adjacent mode needs a run length")
        return AdjacentRun(int(adjacent_length))

    prefixes = [normalize_pattern(p) for p in starts_with]
    if repeat_prefix:
        prefixes.extend(repeated_patterns(int(repeat_prefix), ADDRESS_MARKER))
    suffixes = [normalize_pattern(s, marker=None) for s in ends_with]
    if repeat_suffix:
        suffixes.extend(repeated_patterns(int(repeat_suffix)))
    prefixes = tuple(dict.fromkeys(prefixes))
    suffixes = tuple(dict.fromkeys(suffixes))
    if not prefixes:
        # the default family only stands in for an empty search
        prefixes = (ADDRESS_MARKER,) if suffixes else DEFAULT_PREFIXES
    target = PrefixSuffix(prefixes, suffixes or DEFAULT_SUFFIXES)
    if mode == "prefix-suffix":
        return target
    if mode == "mutation":
        return KeyMutation(target, alphabet or MUTATION_ALPHABET)
    raise ValueError("Unknown mode: {}".format(mode))
