"""
Transcript formatting for speech-to-text output.

The :mod:`~tidytranscript.transcript_formatter` module holds the rule
pipeline that turns raw transcripts into paragraphed Markdown text;
:mod:`~tidytranscript.tasks` and :mod:`~tidytranscript.main` wire it to
Cloud Storage and HTTP.
"""

from .transcript_formatter import TranscriptFormatter, format_transcript

__all__ = ["TranscriptFormatter", "format_transcript"]
