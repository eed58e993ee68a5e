"""
Transcript formatting.

Speech-to-text services return long runs of punctuated text with no
paragraph structure.  :class:`TranscriptFormatter` rewrites such a
transcript into Markdown-flavoured plain text: ``*Title*`` lines become
``## Title`` headings, likely topic shifts, greetings, quotes and
attributions start new paragraphs, and whitespace is normalised so that
paragraphs are separated by exactly one blank line.

Usage::

    from tidytranscript.transcript_formatter import format_transcript

    print(format_transcript("He left. However nobody noticed."))

The formatter is a pure function of its input.  It never raises for a
string argument and the result is stable: formatting an already formatted
transcript returns it unchanged.
"""

import logging
from typing import Iterable, Optional, Tuple

from .rules import (
    ATTRIBUTION_VERBS,
    DISCOURSE_MARKERS,
    GREETINGS,
    PARAGRAPH_RULES,
    TRANSCRIPT_RULES,
    FormattingRule,
    apply_rules,
    build_paragraph_rules,
    build_rules,
)

logger = logging.getLogger(__name__)

# Upper bound on extra folds.  Real transcripts settle after one or two.
MAX_PASSES = 8


class TranscriptFormatter:
    """Apply an ordered rule list to transcripts.

    Args:
        discourse_markers: Words that trigger a paragraph break after a
            period.  Defaults to :data:`~tidytranscript.rules.DISCOURSE_MARKERS`.
        greetings: Greeting tokens, including their trailing comma.
        attribution_verbs: Verbs such as ``said`` that mark attributed speech.
        headings: When ``False`` only paragraph and whitespace rules run and
            ``*Title*`` or ``##`` lines are left as they are.
    """

    def __init__(
        self,
        discourse_markers: Optional[Iterable[str]] = None,
        greetings: Optional[Iterable[str]] = None,
        attribution_verbs: Optional[Iterable[str]] = None,
        headings: bool = True,
    ):
        self.headings = headings
        if discourse_markers is None and greetings is None and attribution_verbs is None:
            rules = TRANSCRIPT_RULES if headings else PARAGRAPH_RULES
        else:
            build = build_rules if headings else build_paragraph_rules
            rules = tuple(
                build(
                    DISCOURSE_MARKERS if discourse_markers is None else discourse_markers,
                    GREETINGS if greetings is None else greetings,
                    ATTRIBUTION_VERBS if attribution_verbs is None else attribution_verbs,
                )
            )
        self.rules: Tuple[FormattingRule, ...] = rules

    def format(self, text: str) -> str:
        """Return the formatted transcript.

        One fold through the rules is usually enough.  A break inserted by a
        late rule can expose a match for an earlier one (a greeting break
        that leaves ``*Title*:`` at the start of a line, say), so the fold is
        repeated until the text stops changing.
        """
        result = apply_rules(text, self.rules)
        for _ in range(MAX_PASSES):
            again = apply_rules(result, self.rules)
            if again == result:
                return result
            result = again
        logger.warning("Transcript formatting did not settle after %d passes", MAX_PASSES)
        return result


_default_formatter = TranscriptFormatter()


def format_transcript(text: str) -> str:
    """Format ``text`` with the default rules."""
    return _default_formatter.format(text)
