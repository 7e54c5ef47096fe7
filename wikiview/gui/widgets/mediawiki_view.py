from __future__ import annotations

from typing import Optional

from qtpy import QtCore, QtGui, QtWidgets

from wikiview.gui.document import MediaWikiDocument


class MediaWikiView(QtWidgets.QTextBrowser):
    """Read-only view of a MediaWikiDocument.

    Links are never followed by the widget itself; ``anchorClicked`` is left
    for the owner to act on. Right clicks are reported through
    ``contextMenuRequested`` instead of showing Qt's standard menu.
    """

    contextMenuRequested = QtCore.Signal(QtCore.QPoint, QtCore.QUrl, bool)

    def __init__(
        self,
        document: MediaWikiDocument,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setOpenLinks(False)
        self.setOpenExternalLinks(False)
        self.setDocument(document)
        self.setTextInteractionFlags(
            QtCore.Qt.TextBrowserInteraction | QtCore.Qt.TextSelectableByKeyboard
        )

    def scrollPosition(self) -> QtCore.QPoint:
        return QtCore.QPoint(
            self.horizontalScrollBar().value(), self.verticalScrollBar().value()
        )

    def setScrollPosition(self, position: QtCore.QPoint) -> None:
        self.horizontalScrollBar().setValue(position.x())
        self.verticalScrollBar().setValue(position.y())

    def hasSelection(self) -> bool:
        return self.textCursor().hasSelection()

    def selectedText(self) -> str:
        # QTextCursor uses U+2029 as paragraph separator.
        return self.textCursor().selectedText().replace("\u2029", "\n")

    def contextMenuEvent(self, event: QtGui.QContextMenuEvent) -> None:
        href = self.anchorAt(event.pos())
        link_url = QtCore.QUrl(href) if href else QtCore.QUrl()
        self.contextMenuRequested.emit(event.globalPos(), link_url, self.hasSelection())
        event.accept()
