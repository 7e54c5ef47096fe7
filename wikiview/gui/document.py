from __future__ import annotations

from typing import Optional

from qtpy import QtCore, QtGui

from wikiview.gui.renderer import MediaWikiRenderer


class MediaWikiDocument(QtGui.QTextDocument):
    """Text document holding raw MediaWiki markup and its rendered form."""

    def __init__(
        self,
        parent: Optional[QtCore.QObject] = None,
        renderer: Optional[MediaWikiRenderer] = None,
    ) -> None:
        super().__init__(parent)
        self._renderer = renderer or MediaWikiRenderer()
        self._markup = ""

    def mediaWiki(self) -> str:
        return self._markup

    def setMediaWiki(self, text: str) -> None:
        self._markup = text or ""
        if not self._markup:
            self.clear()
            return
        self.setHtml(self._renderer.render(self._markup))
