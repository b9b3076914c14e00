"""Multi-pattern index over guideline literal and regex conditions.

Literal conditions go into one Aho-Corasick automaton (pyahocorasick),
regex conditions into a RegexSet. Identical patterns share one entry
that maps back to every guideline using them, so two guidelines with
the same literal both fire.

The index is immutable: GuidelineMatcher builds a new one whenever its
guideline set changes.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import ahocorasick

from colloquy.alignment.models import Guideline, LiteralCondition, RegexCondition
from colloquy.exceptions import GuidelineCompilationError


def compile_guideline_pattern(guideline: Guideline) -> re.Pattern[str] | None:
    """Compile a guideline's regex condition.

    Returns None for non-regex conditions.

    Raises:
        GuidelineCompilationError: If the pattern is not a valid regex
    """
    condition = guideline.condition
    if not isinstance(condition, RegexCondition):
        return None
    try:
        return re.compile(condition.pattern)
    except re.error as e:
        raise GuidelineCompilationError(guideline.id, condition.pattern, str(e)) from e


class RegexSet:
    """Set of compiled patterns answering "which of them match this text".

    Mirrors the membership-only API of a regex set: ``matches`` returns
    the indices of matching patterns, in pattern order. Capture groups are
    read from the individual compiled patterns afterwards.

    Unlike an automaton-backed set, ``matches`` runs each pattern in turn,
    so a query costs one scan per distinct pattern rather than a single
    pass over the message. Identical patterns are deduplicated by
    PatternIndex before they get here.
    """

    def __init__(self, patterns: Sequence[re.Pattern[str]]) -> None:
        self._patterns = tuple(patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def matches(self, text: str) -> list[int]:
        return [i for i, pattern in enumerate(self._patterns) if pattern.search(text)]

    def pattern(self, index: int) -> re.Pattern[str]:
        return self._patterns[index]


@dataclass(frozen=True)
class _RegexEntry:
    pattern: re.Pattern[str]
    guideline_indices: tuple[int, ...]


class PatternIndex:
    """Literal automaton plus regex set over one guideline snapshot.

    Guideline indices returned by the query methods refer to positions in
    the sequence the index was built from.
    """

    def __init__(
        self,
        guidelines: Sequence[Guideline],
        automaton: Any | None,
        regex_set: RegexSet | None,
        regex_entries: Sequence[_RegexEntry],
        unconditional: Sequence[int] = (),
    ) -> None:
        self._guidelines = tuple(guidelines)
        self._unconditional = frozenset(unconditional)
        self._automaton = automaton
        self._regex_set = regex_set
        self._regex_entries = tuple(regex_entries)

    @classmethod
    def empty(cls) -> "PatternIndex":
        return cls((), None, None, ())

    @classmethod
    def build(cls, guidelines: Sequence[Guideline]) -> "PatternIndex":
        """Build an index for the given guidelines.

        Raises:
            GuidelineCompilationError: If a regex condition does not compile
        """
        literal_map: dict[str, list[int]] = {}
        regex_map: dict[str, list[int]] = {}
        compiled: dict[str, re.Pattern[str]] = {}
        unconditional: list[int] = []

        for idx, guideline in enumerate(guidelines):
            condition = guideline.condition
            if isinstance(condition, LiteralCondition) and not condition.text:
                unconditional.append(idx)
            elif isinstance(condition, LiteralCondition):
                literal_map.setdefault(condition.text.lower(), []).append(idx)
            elif isinstance(condition, RegexCondition):
                if condition.pattern not in compiled:
                    pattern = compile_guideline_pattern(guideline)
                    if pattern is not None:
                        compiled[condition.pattern] = pattern
                regex_map.setdefault(condition.pattern, []).append(idx)

        automaton = None
        if literal_map:
            automaton = ahocorasick.Automaton()
            for text, indices in literal_map.items():
                automaton.add_word(text, tuple(indices))
            automaton.make_automaton()

        regex_set = None
        entries: list[_RegexEntry] = []
        if regex_map:
            entries = [
                _RegexEntry(pattern=compiled[source], guideline_indices=tuple(indices))
                for source, indices in regex_map.items()
            ]
            regex_set = RegexSet([entry.pattern for entry in entries])

        return cls(guidelines, automaton, regex_set, entries, unconditional)

    @property
    def literal_count(self) -> int:
        """Number of distinct literal patterns."""
        return len(self._automaton) if self._automaton is not None else 0

    @property
    def regex_count(self) -> int:
        """Number of distinct regex patterns."""
        return len(self._regex_set) if self._regex_set is not None else 0

    def match_literal(self, message: str) -> set[int]:
        """Return indices of guidelines whose literal occurs in the message."""
        matched: set[int] = set(self._unconditional)
        if self._automaton is None:
            return matched

        for _end, indices in self._automaton.iter(message.lower()):
            matched.update(indices)
        return matched

    def match_regex(self, message: str) -> dict[int, dict[str, str]]:
        """Return matching guideline indices with their extracted parameters.

        Capture group 1 maps to the guideline's first declared parameter
        name, group 2 to the second, and so on. Groups that did not
        participate in the match are left out.
        """
        if self._regex_set is None:
            return {}

        results: dict[int, dict[str, str]] = {}
        for entry_idx in self._regex_set.matches(message):
            entry = self._regex_entries[entry_idx]
            found = entry.pattern.search(message)
            if found is None:
                continue
            for guideline_idx in entry.guideline_indices:
                names = self._guidelines[guideline_idx].action.parameter_names
                params: dict[str, str] = {}
                for group_no, name in enumerate(names, start=1):
                    if group_no > entry.pattern.groups:
                        break
                    value = found.group(group_no)
                    if value is not None:
                        params[name] = value
                results[guideline_idx] = params
        return results
