"""Link helpers shared by the part, the view and the standalone shell."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

from qtpy import QtCore

MAILTO_SCHEME = "mailto"


def resolved_url(base_url: QtCore.QUrl, url: QtCore.QUrl) -> QtCore.QUrl:
    """Resolve ``url`` against ``base_url`` when relative and normalize ``..``/``.``."""
    resolved = QtCore.QUrl(url)
    if resolved.isRelative():
        resolved = base_url.resolved(resolved)
    return resolved.adjusted(QtCore.QUrl.NormalizePathSegments)


def is_mailto(url: QtCore.QUrl) -> bool:
    return url.scheme() == MAILTO_SCHEME


def mailto_address(url: QtCore.QUrl) -> str:
    return url.path()


def hover_info(url: QtCore.QUrl) -> Tuple[str, QtCore.QUrl]:
    """Return the status text and the file item url for a hovered link.

    User info is removed so a link like ``https://bank.example@evil.example``
    is shown with its real host. ``mailto:`` links have no file item.
    """
    if not url.isValid() or url.isEmpty():
        return "", QtCore.QUrl()
    safe = url.adjusted(QtCore.QUrl.RemoveUserInfo)
    message = safe.toDisplayString()
    if is_mailto(safe):
        return message, QtCore.QUrl()
    return message, safe


def directory_url(local_path: str | Path) -> QtCore.QUrl:
    """Url of the directory holding ``local_path``, with a trailing slash."""
    return QtCore.QUrl.fromLocalFile(str(local_path)).adjusted(
        QtCore.QUrl.RemoveFilename
    )


def to_url(value) -> QtCore.QUrl:
    """Turn a QUrl, a url string or a local path into a QUrl."""
    if isinstance(value, QtCore.QUrl):
        return QtCore.QUrl(value)
    text = str(value or "").strip()
    if not text:
        return QtCore.QUrl()
    if "://" in text or text.startswith(MAILTO_SCHEME + ":"):
        return QtCore.QUrl(text)
    return QtCore.QUrl.fromLocalFile(str(Path(text).expanduser().resolve()))


def is_mediawiki_mime(mime_type: str, accepted: Iterable[str]) -> bool:
    """True when ``mime_type`` is, or inherits from, one of ``accepted``.

    Parameters such as ``; charset=utf-8`` are ignored.
    """
    name = str(mime_type or "").split(";", 1)[0].strip().lower()
    if not name:
        return False
    accepted = [str(a).lower() for a in accepted]
    if name in accepted:
        return True
    mime = QtCore.QMimeDatabase().mimeTypeForName(name)
    if not mime.isValid():
        return False
    if mime.name().lower() in accepted:
        return True
    return any(mime.inherits(candidate) for candidate in accepted)
