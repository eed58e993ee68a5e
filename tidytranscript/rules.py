"""
Rewrite rules for transcript formatting.

Each rule is a compiled pattern paired with a replacement template.  Rules
are applied in order with :func:`apply_rules`, every rule seeing the output
of the one before it, so the order of :data:`TRANSCRIPT_RULES` is part of
the formatting behaviour.

The word lists are kept as plain constants so they can be inspected,
tested and extended without touching the patterns built from them.
"""

import re
from functools import reduce
from typing import Callable, Iterable, List, Match, NamedTuple, Optional, Pattern, Union

# Words that, after a period, usually open a new sentence worth its own
# paragraph in punctuation-sparse ASR output.  Case-sensitive, whole-word.
DISCOURSE_MARKERS = frozenset(
    {
        "However", "But", "So", "Then", "After", "Before", "When", "While",
        "In", "On", "At", "The", "One", "It", "This", "That", "These",
        "Those", "My", "His", "Her", "Their", "Our", "Your", "If",
        "Although", "Though", "Unless", "Since", "Because", "As", "And",
    }
)

GREETINGS = frozenset({"Hi,", "Hello,", "Hey,", "Greetings,", "Welcome,"})

ATTRIBUTION_VERBS = frozenset({"said", "asked", "replied", "exclaimed"})

TERMINATORS = frozenset({".", "!", "?"})

# Zero-width: a level-2 heading marker starts here.  The marker and its
# title must share a line, so a bare "##" before a newline is not a heading.
_HEADING_AHEAD = r"(?=##[^\S\n]+\S)"

# Sentence terminators, escaped for use inside a character class.
_TERM = re.escape("".join(sorted(TERMINATORS)))


class FormattingRule(NamedTuple):
    """A named ``(pattern, replacement)`` pair.

    ``replacement`` is anything :meth:`re.Pattern.sub` accepts: a template
    string or a function of the match.
    """

    name: str
    pattern: Pattern[str]
    replacement: Union[str, Callable[[Match[str]], str]]

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _alternation(words: Iterable[str]) -> Optional[str]:
    """Build a regex alternation, longest words first; ``None`` if empty."""
    ordered = sorted(set(words), key=lambda w: (-len(w), w))
    if not ordered:
        return None
    return "|".join(re.escape(w) for w in ordered)


_TITLE = re.compile(r"\*([^*\n]+)\*:")


def _titles_to_headings(match: Match[str]) -> str:
    return "".join(f"## {title}\n\n" for title in _TITLE.findall(match.group(1)))


def heading_rules() -> List[FormattingRule]:
    """Turn ``*Title*:`` and ``*Title*`` lines into ``## Title`` headings.

    A run of ``*A*: *B*:`` at the start of a line becomes one heading each.
    """
    # Titles exclude "*", so "**bold**:" is emphasis, not a heading.
    return [
        FormattingRule(
            "inline_heading_with_colon",
            re.compile(r"^[^\S\n]*((?:\*[^*\n]+\*:[^\S\n]*)+)", re.MULTILINE),
            _titles_to_headings,
        ),
        FormattingRule(
            "inline_heading",
            re.compile(r"^[^\S\n]*\*([^*\n]+)\*[^\S\n]*$", re.MULTILINE),
            r"## \1",
        ),
    ]


def paragraph_rules(
    discourse_markers: Iterable[str] = DISCOURSE_MARKERS,
    greetings: Iterable[str] = GREETINGS,
    attribution_verbs: Iterable[str] = ATTRIBUTION_VERBS,
) -> List[FormattingRule]:
    """Rules that insert paragraph breaks at sentence, greeting, quote and
    attribution boundaries.

    A rule whose word list is empty is left out rather than compiled into a
    pattern that would match the empty string.
    """
    rules: List[FormattingRule] = []

    markers = _alternation(discourse_markers)
    if markers:
        rules.append(
            FormattingRule(
                "sentence_break",
                re.compile(rf"\.[^\S\n]+({markers})\s"),
                r".\n\n\1 ",
            )
        )

    greeting = _alternation(greetings)
    if greeting:
        rules.append(
            FormattingRule(
                "greeting_break",
                re.compile(rf"\b({greeting})([^{_TERM}]+[{_TERM}])[^\S\n]*"),
                r"\1\2\n\n",
            )
        )

    rules.append(
        FormattingRule(
            "quote_break",
            re.compile(rf'([{_TERM}])\s*"([^"]+)"'),
            r'\1\n\n"\2"',
        )
    )

    verbs = _alternation(attribution_verbs)
    if verbs:
        rules.append(
            FormattingRule(
                "attribution_break",
                re.compile(rf"([{_TERM}])\s+([A-Z][a-z]+\s+(?:{verbs})\b)"),
                r"\1\n\n\2",
            )
        )
    return rules


def heading_isolation_rules() -> List[FormattingRule]:
    """Make sure every ``##`` heading starts its own paragraph.

    The heading itself is only looked ahead at, so several headings on one
    line are all split off in a single pass.
    """
    return [
        FormattingRule(
            "heading_after_text",
            re.compile(rf"([^{_TERM}\s#])[^\S\n]*{_HEADING_AHEAD}"),
            r"\1\n\n",
        ),
        FormattingRule(
            "heading_after_terminator",
            re.compile(rf"([{_TERM}])\s*{_HEADING_AHEAD}"),
            r"\1\n\n",
        ),
    ]


def whitespace_rules() -> List[FormattingRule]:
    return [
        FormattingRule("collapse_spaces", re.compile(r"[^\S\n]+"), " "),
        FormattingRule("collapse_newlines", re.compile(r"\n{3,}"), "\n\n"),
        FormattingRule("trim", re.compile(r"\A\s+|\s+\Z"), ""),
    ]


def build_rules(
    discourse_markers: Iterable[str] = DISCOURSE_MARKERS,
    greetings: Iterable[str] = GREETINGS,
    attribution_verbs: Iterable[str] = ATTRIBUTION_VERBS,
) -> List[FormattingRule]:
    """The full pipeline: headings, paragraph breaks, heading isolation,
    whitespace normalisation."""
    return (
        heading_rules()
        + paragraph_rules(discourse_markers, greetings, attribution_verbs)
        + heading_isolation_rules()
        + whitespace_rules()
    )


def build_paragraph_rules(
    discourse_markers: Iterable[str] = DISCOURSE_MARKERS,
    greetings: Iterable[str] = GREETINGS,
    attribution_verbs: Iterable[str] = ATTRIBUTION_VERBS,
) -> List[FormattingRule]:
    """Paragraph breaks and whitespace only; heading syntax is left alone."""
    return paragraph_rules(discourse_markers, greetings, attribution_verbs) + whitespace_rules()


TRANSCRIPT_RULES = tuple(build_rules())
PARAGRAPH_RULES = tuple(build_paragraph_rules())


def apply_rules(text: str, rules: Iterable[FormattingRule]) -> str:
    """Fold ``text`` through ``rules`` in order."""
    return reduce(lambda current, rule: rule.apply(current), rules, text)
