"""Turn arbitrary strings into safe file names."""

import re

_RESERVED = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f\x80-\x9f]+')
_WINDOWS_RESERVED = re.compile(r"(con|prn|aux|nul|com\d|lpt\d)")
_OUTER_PERIODS = re.compile(r"^\.+|\.+\Z")

_REPLACEMENT = "_"


def filenamify(text: str) -> str:
    """Replace characters that are not allowed in file names with ``_``.

    Runs of reserved characters collapse into a single replacement, leading
    and trailing periods are replaced, and names reserved on Windows get a
    trailing ``_``.
    """
    result = _RESERVED.sub(_REPLACEMENT, text)
    result = _OUTER_PERIODS.sub(_REPLACEMENT, result)
    if _WINDOWS_RESERVED.fullmatch(result):
        result += _REPLACEMENT
    return result