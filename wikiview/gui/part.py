"""Minimal read-only part protocol used to embed viewers in a host window.

A part owns a widget, knows which url it shows, and loads content either from
a local file (``openUrl`` -> ``openFile``) or from a stream of bytes
(``openStream`` / ``writeStream`` / ``closeStream``). Subclasses implement the
``openFile`` and ``do*Stream`` hooks.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Dict, Optional

from qtpy import QtCore, QtWidgets

from wikiview.utils.logger import logger
from wikiview.utils.urls import to_url


class Modus(enum.Enum):
    ReadOnlyModus = "readonly"
    BrowserViewModus = "browserview"


@dataclass
class OpenUrlArguments:
    x_offset: int = 0
    y_offset: int = 0
    mime_type: str = ""
    reload: bool = False


class ReadOnlyPart(QtCore.QObject):
    setStatusBarText = QtCore.Signal(str)
    setWindowCaption = QtCore.Signal(str)
    started = QtCore.Signal()
    completed = QtCore.Signal()
    canceled = QtCore.Signal(str)

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._widget: Optional[QtWidgets.QWidget] = None
        self._url = QtCore.QUrl()
        self._local_file_path = ""
        self._arguments = OpenUrlArguments()
        self._actions: Dict[str, QtWidgets.QAction] = {}
        self._stream_open = False

    # ----------------------------------------------------------------- widget
    def widget(self) -> Optional[QtWidgets.QWidget]:
        return self._widget

    def setWidget(self, widget: QtWidgets.QWidget) -> None:
        self._widget = widget

    # ---------------------------------------------------------------- actions
    def actionCollection(self) -> Dict[str, QtWidgets.QAction]:
        return self._actions

    def addAction(self, name: str, action: QtWidgets.QAction) -> QtWidgets.QAction:
        action.setObjectName(name)
        self._actions[name] = action
        return action

    def action(self, name: str) -> Optional[QtWidgets.QAction]:
        return self._actions.get(name)

    # ------------------------------------------------------------------ state
    def url(self) -> QtCore.QUrl:
        return QtCore.QUrl(self._url)

    def setUrl(self, url: QtCore.QUrl) -> None:
        self._url = QtCore.QUrl(url)

    def localFilePath(self) -> str:
        return self._local_file_path

    def arguments(self) -> OpenUrlArguments:
        return self._arguments

    def setArguments(self, arguments: OpenUrlArguments) -> None:
        # Callers keep ownership of the object they pass in.
        self._arguments = dataclasses.replace(arguments)

    # ---------------------------------------------------------------- loading
    def openUrl(self, url, arguments: Optional[OpenUrlArguments] = None) -> bool:
        target = to_url(url)
        if not target.isValid() or target.isEmpty():
            logger.warning("Refusing to open invalid url: %r", url)
            return False
        if arguments is not None:
            self.setArguments(arguments)
        if not self.closeUrl():
            return False
        if not target.isLocalFile():
            message = "Only local files can be opened: {}".format(
                target.toDisplayString()
            )
            logger.warning(message)
            self.canceled.emit(message)
            return False
        self._url = target
        self._local_file_path = target.toLocalFile()
        self.started.emit()
        if not self.openFile():
            message = "Could not open {}".format(self._local_file_path)
            self.canceled.emit(message)
            return False
        self.setWindowCaption.emit(target.toDisplayString(QtCore.QUrl.PreferLocalFile))
        self.completed.emit()
        return True

    def openFile(self) -> bool:
        raise NotImplementedError

    def openStream(self, mime_type: str, url) -> bool:
        self.closeUrl()
        self._url = to_url(url)
        self._stream_open = bool(self.doOpenStream(mime_type))
        return self._stream_open

    def writeStream(self, data: bytes) -> bool:
        if not self._stream_open:
            return False
        return bool(self.doWriteStream(bytes(data)))

    def closeStream(self) -> bool:
        if not self._stream_open:
            return False
        self._stream_open = False
        result = bool(self.doCloseStream())
        if result:
            self.completed.emit()
        return result

    def doOpenStream(self, mime_type: str) -> bool:
        return False

    def doWriteStream(self, data: bytes) -> bool:
        return False

    def doCloseStream(self) -> bool:
        return False

    def closeUrl(self) -> bool:
        self._url = QtCore.QUrl()
        self._local_file_path = ""
        self._stream_open = False
        return True
