"""
Entrypoints for the transcript formatter.

* ``app`` – a Flask application with two routes:

  - ``POST /format`` takes ``{"text": ...}`` and returns
    ``{"formatted": ...}``.
  - ``POST /process`` takes ``{"bucket": ..., "name": ...}`` and formats a
    raw transcript stored in Cloud Storage.

* ``gcs_event`` – a background function triggered by Cloud Storage
  uploads.

``OUTPUT_BUCKET`` redirects formatted transcripts to another bucket.
"""

import json
import logging
import os
from typing import Any, Dict

from flask import Flask, jsonify, request

from . import tasks
from .transcript_formatter import TranscriptFormatter

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

app = Flask(__name__)


def _output_bucket(bucket: str) -> str:
    return os.environ.get("OUTPUT_BUCKET", bucket)


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route("/format", methods=["POST"])
def format_text():
    text = _json_body().get("text")
    if not isinstance(text, str):
        logger.info(json.dumps({"event": "bad_request", "route": "format"}))
        return jsonify({"error": "Missing 'text' in request"}), 400

    formatted = TranscriptFormatter(headings=tasks.headings_enabled()).format(text)
    logger.info(
        json.dumps({"event": "formatted", "chars_in": len(text), "chars_out": len(formatted)})
    )
    return jsonify({"formatted": formatted}), 200


@app.route("/process", methods=["POST"])
def process():
    try:
        data = _json_body()
        bucket = data.get("bucket")
        name = data.get("name")
        if not bucket or not name:
            return "Missing 'bucket' or 'name' in request", 400
        logger.info(json.dumps({"event": "request", "bucket": bucket, "file": name}))

        dest = tasks.process_transcript_upload(bucket, name, output_bucket=_output_bucket(bucket))
        if dest is None:
            logger.info(json.dumps({"event": "skipped", "file": name}))
            return f"Skipped {name}", 200
        return f"Formatted transcript saved to {_output_bucket(bucket)}/{dest}", 200
    except Exception as e:
        logger.exception("Error in /process")
        return f"Server error: {str(e)}", 500


def gcs_event(event: Dict[str, Any], context: Any) -> None:
    """Background function triggered by Cloud Storage.

    Only uploads under ``RAW_PREFIX`` are formatted; everything else,
    including the formatter's own output, is ignored.
    """
    bucket = event.get("bucket")
    name = event.get("name")
    if not bucket or not name:
        logger.warning("Received event with missing bucket or name: %s", event)
        return
    tasks.process_transcript_upload(bucket, name, output_bucket=_output_bucket(bucket))


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port)
