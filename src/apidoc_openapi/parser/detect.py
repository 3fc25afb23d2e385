"""Auto-detect the layout of an apidoc output file."""

import re
from pathlib import Path

# apidoc < 0.50 wrote api_data.js / api_project.js as an AMD module
_DEFINE_WRAPPER = re.compile(r"^\s*define\(\s*(?P<body>.*)\)\s*;?\s*$", re.DOTALL)


def detect_format(file_path: Path) -> str:
    """Detect whether an apidoc output file is plain JSON or the legacy JS wrapper.

    Returns: 'json' or 'js'.
    """
    text = file_path.read_text(encoding="utf-8")
    if _DEFINE_WRAPPER.match(text):
        return "js"
    return "json"


def unwrap_define(text: str) -> str:
    """Return the JSON body of a ``define({...});`` wrapper, or the text unchanged."""
    match = _DEFINE_WRAPPER.match(text)
    if match:
        return match.group("body").strip()
    return text
