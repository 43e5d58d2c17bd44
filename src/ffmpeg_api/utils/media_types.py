"""Media type lookup for files returned by the API."""

VIDEO_FORMATS = {"mp4", "mkv", "mov", "avi", "webm", "flv", "wmv", "m4v", "ts"}

_SPECIAL_CASES = {
    "mp3": "audio/mpeg",
    "m4a": "audio/mp4",
    "oga": "audio/ogg",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "ts": "video/mp2t",
}


def media_type_for(fmt: str) -> str:
    """Return the Content-Type to send for an output of format ``fmt``."""
    fmt = fmt.lower()
    if fmt in _SPECIAL_CASES:
        return _SPECIAL_CASES[fmt]
    if fmt in VIDEO_FORMATS:
        return f"video/{fmt}"
    return f"audio/{fmt}"
