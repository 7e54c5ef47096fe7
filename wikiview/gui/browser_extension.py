from __future__ import annotations

from typing import TYPE_CHECKING

from qtpy import QtCore

if TYPE_CHECKING:
    from wikiview.gui.mediawiki_part import MediaWikiPart


class MediaWikiBrowserExtension(QtCore.QObject):
    """Relays navigation and selection events of a part to a browser shell."""

    openUrlRequest = QtCore.Signal(QtCore.QUrl)
    enableAction = QtCore.Signal(str, bool)
    selectionInfo = QtCore.Signal(str)
    mouseOverInfo = QtCore.Signal(QtCore.QUrl)
    # global position, link url, has selection, action groups
    popupMenu = QtCore.Signal(QtCore.QPoint, QtCore.QUrl, bool, object)

    def __init__(self, part: "MediaWikiPart") -> None:
        super().__init__(part)
        self._part = part

    def requestOpenUrl(self, url: QtCore.QUrl) -> None:
        self.openUrlRequest.emit(self._part.resolvedUrl(url))

    def updateCopyAction(self, enabled: bool) -> None:
        self.enableAction.emit("copy", bool(enabled))
        self.selectionInfo.emit(self._part.selectedText() if enabled else "")

    def requestContextMenu(
        self, global_pos: QtCore.QPoint, link_url: QtCore.QUrl, has_selection: bool
    ) -> None:
        action_groups = {}
        if link_url.isValid() and not link_url.isEmpty():
            link_url = self._part.resolvedUrl(link_url)
            # Unparented: the actions live only as long as the emitted groups.
            action_groups["linkactions"] = self._part.createLinkActions(None, link_url)
        elif has_selection:
            action_groups["editactions"] = [self._part.copySelectionAction()]
        self.popupMenu.emit(global_pos, link_url, bool(has_selection), action_groups)

    @QtCore.Slot()
    def copy(self) -> None:
        self._part.copySelection()
