"""
Cloud Storage orchestration for transcript formatting.

Raw transcripts are dropped into the **Raw/** folder of a bucket as plain
``.txt`` files.  :func:`process_transcript_upload` downloads such a file,
runs it through :class:`~tidytranscript.transcript_formatter.TranscriptFormatter`
and writes the result to the **Formatted/** folder under the same name.

Environment variables:

* ``RAW_PREFIX`` – folder watched for raw transcripts (default ``Raw/``).
* ``FORMATTED_PREFIX`` – folder for formatted output (default ``Formatted/``).
* ``FORMAT_HEADINGS`` – set to ``false`` to skip heading conversion.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from google.cloud import storage
from tenacity import retry, stop_after_attempt, wait_exponential

from .transcript_formatter import TranscriptFormatter

logger = logging.getLogger(__name__)

RAW_PREFIX = os.environ.get("RAW_PREFIX", "Raw/")
FORMATTED_PREFIX = os.environ.get("FORMATTED_PREFIX", "Formatted/")


def headings_enabled() -> bool:
    return os.environ.get("FORMAT_HEADINGS", "true").lower() == "true"


@retry(wait=wait_exponential(multiplier=1), stop=stop_after_attempt(3), reraise=True)
def _download_text(bucket: storage.Bucket, blob_name: str) -> str:
    return bucket.blob(blob_name).download_as_text()


@retry(wait=wait_exponential(multiplier=1), stop=stop_after_attempt(3), reraise=True)
def _upload_text(bucket: storage.Bucket, blob_name: str, text: str) -> None:
    bucket.blob(blob_name).upload_from_string(text, content_type="text/plain")


def formatted_name(file_name: str) -> str:
    """Map ``Raw/talk.txt`` to ``Formatted/talk.txt``."""
    return f"{FORMATTED_PREFIX}{os.path.basename(file_name)}"


def process_transcript_upload(
    bucket_name: str,
    file_name: str,
    output_bucket: Optional[str] = None,
    formatter: Optional[TranscriptFormatter] = None,
) -> Optional[str]:
    """Format a raw transcript uploaded to Cloud Storage.

    Args:
        bucket_name: Bucket holding the uploaded file.
        file_name: Path of the file relative to the bucket.
        output_bucket: Bucket to write to; defaults to ``bucket_name``.
        formatter: Formatter to use; by default one is built according to
            ``FORMAT_HEADINGS``.

    Returns:
        The name of the formatted blob, or ``None`` if the upload was
        skipped.  Storage errors are raised once the retries are exhausted.
    """
    if not file_name.startswith(RAW_PREFIX):
        logger.info("Ignoring file outside of %s: %s", RAW_PREFIX, file_name)
        return None
    if not file_name.lower().endswith(".txt"):
        logger.info("Ignoring non-text transcript file %s", file_name)
        return None

    storage_client = storage.Client()
    text = _download_text(storage_client.bucket(bucket_name), file_name)
    if not text.strip():
        logger.info("Transcript %s is empty; skipping", file_name)
        return None

    if formatter is None:
        formatter = TranscriptFormatter(headings=headings_enabled())
    formatted = formatter.format(text)

    dest_name = formatted_name(file_name)
    _upload_text(storage_client.bucket(output_bucket or bucket_name), dest_name, formatted)
    logger.info("Saved formatted transcript to %s", dest_name)
    return dest_name
