"""Guideline matching: pattern index and matcher."""

from colloquy.alignment.matching.matcher import LITERAL_SCORE, REGEX_SCORE, GuidelineMatcher
from colloquy.alignment.matching.pattern_index import (
    PatternIndex,
    RegexSet,
    compile_guideline_pattern,
)

__all__ = [
    "GuidelineMatcher",
    "LITERAL_SCORE",
    "PatternIndex",
    "REGEX_SCORE",
    "RegexSet",
    "compile_guideline_pattern",
]
