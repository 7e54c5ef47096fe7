from __future__ import annotations

import dataclasses
from typing import List, Optional

from qtpy import QtCore, QtGui, QtWidgets

from wikiview.configs import get_config
from wikiview.gui.browser_extension import MediaWikiBrowserExtension
from wikiview.gui.document import MediaWikiDocument
from wikiview.gui.part import Modus, OpenUrlArguments, ReadOnlyPart
from wikiview.gui.widgets.mediawiki_view import MediaWikiView
from wikiview.gui.widgets.search_toolbar import SearchToolBar
from wikiview.utils.logger import logger
from wikiview.utils.urls import (
    directory_url,
    hover_info,
    is_mailto,
    is_mediawiki_mime,
    mailto_address,
    resolved_url,
)


class MediaWikiPart(ReadOnlyPart):
    """Read-only part showing a MediaWiki document.

    In ``BrowserViewModus`` link clicks, copy availability and context menus
    are handed to the browser extension so the hosting shell can handle them.
    In ``ReadOnlyModus`` the part opens links with the desktop default handler
    and shows its own context menu.
    """

    SEARCH_ACTIONS = ("find", "find_next", "find_prev")

    def __init__(
        self,
        parent_widget: Optional[QtWidgets.QWidget] = None,
        parent: Optional[QtCore.QObject] = None,
        modus: Modus = Modus.ReadOnlyModus,
        config: Optional[dict] = None,
    ) -> None:
        super().__init__(parent)
        self._config = config if config is not None else get_config()
        self._modus = modus
        self._encoding = self._config.get("encoding") or "utf-8"
        self._mime_types = list(self._config.get("mime_types") or [])

        self._streamed_data = bytearray()
        self._previous_url = QtCore.QUrl()
        self._previous_scroll_position = QtCore.QPoint()

        search_config = self._config.get("search") or {}
        self.source_document = MediaWikiDocument(self)
        self.view = MediaWikiView(self.source_document, parent_widget)
        self.search_toolbar = SearchToolBar(
            self.view,
            parent_widget,
            case_sensitive=bool(search_config.get("case_sensitive", False)),
            wrap_around=bool(search_config.get("wrap_around", True)),
        )
        self.browser_extension = MediaWikiBrowserExtension(self)

        main_layout = QtWidgets.QVBoxLayout()
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.addWidget(self.view)
        self.search_toolbar.hide()
        main_layout.addWidget(self.search_toolbar)

        main_widget = QtWidgets.QWidget(parent_widget)
        main_widget.setLayout(main_layout)
        self.setWidget(main_widget)

        self.view.anchorClicked.connect(self._handle_anchor_clicked)
        if modus is Modus.BrowserViewModus:
            self.view.copyAvailable.connect(self.browser_extension.updateCopyAction)
            self.view.contextMenuRequested.connect(
                self.browser_extension.requestContextMenu
            )
        else:
            self.view.contextMenuRequested.connect(self.handleContextMenuRequest)
        self.view.highlighted.connect(self.showHoveredLink)
        self.search_toolbar.searchFailed.connect(
            lambda text: self.setStatusBarText.emit(
                self.tr("Phrase not found: {}").format(text)
            )
        )

        self._setup_actions(modus)

    def modus(self) -> Modus:
        return self._modus

    # ----------------------------------------------------------------- actions
    def _new_action(self, text, slot, shortcut=None, icon=None, enabled=True):
        action = QtWidgets.QAction(text, self)
        if shortcut is not None:
            action.setShortcut(QtGui.QKeySequence(shortcut))
        if icon:
            action.setIcon(QtGui.QIcon.fromTheme(icon))
        action.setEnabled(enabled)
        action.triggered.connect(lambda _checked=False: slot())
        return action

    def _setup_actions(self, modus: Modus) -> None:
        # Only shown in the part's own menus when not embedded in a browser.
        self._copy_selection_action = self._new_action(
            self.tr("&Copy Text"),
            self.copySelection,
            shortcut=QtGui.QKeySequence.Copy,
            icon="edit-copy",
            enabled=self.view.hasSelection(),
        )
        self._copy_selection_action.setObjectName("copy")
        if modus is not Modus.BrowserViewModus:
            self.addAction("copy", self._copy_selection_action)
        self.view.copyAvailable.connect(self._copy_selection_action.setEnabled)

        select_all = self._new_action(
            self.tr("Select &All"),
            self.selectAll,
            shortcut=QtGui.QKeySequence.SelectAll,
            icon="edit-select-all",
        )
        select_all.setShortcutContext(QtCore.Qt.WidgetShortcut)
        self.view.addAction(self.addAction("select_all", select_all))

        find = self._new_action(
            self.tr("&Find..."),
            self.search_toolbar.startSearch,
            shortcut=QtGui.QKeySequence.Find,
            icon="edit-find",
            enabled=False,
        )
        self.view.addAction(self.addAction("find", find))

        find_next = self._new_action(
            self.tr("Find &Next"),
            self.search_toolbar.searchNext,
            shortcut=QtGui.QKeySequence.FindNext,
            icon="go-down-search",
            enabled=False,
        )
        self.view.addAction(self.addAction("find_next", find_next))

        find_prev = self._new_action(
            self.tr("Find Pre&vious"),
            self.search_toolbar.searchPrevious,
            shortcut=QtGui.QKeySequence.FindPrevious,
            icon="go-up-search",
            enabled=False,
        )
        self.view.addAction(self.addAction("find_prev", find_prev))

        close_find_bar = QtWidgets.QShortcut(
            QtGui.QKeySequence(QtCore.Qt.Key_Escape), self.widget()
        )
        close_find_bar.setContext(QtCore.Qt.WidgetWithChildrenShortcut)
        close_find_bar.activated.connect(self.search_toolbar.hide)
        self._close_find_bar_shortcut = close_find_bar

    def _set_search_actions_enabled(self, enabled: bool) -> None:
        for name in self.SEARCH_ACTIONS:
            self.action(name).setEnabled(enabled)

    def copySelectionAction(self) -> QtWidgets.QAction:
        return self._copy_selection_action

    # ----------------------------------------------------------------- loading
    def openUrl(self, url, arguments: Optional[OpenUrlArguments] = None) -> bool:
        return super().openUrl(url, arguments or OpenUrlArguments())

    def openStream(
        self, mime_type: str, url, arguments: Optional[OpenUrlArguments] = None
    ) -> bool:
        self.setArguments(arguments or OpenUrlArguments(mime_type=mime_type))
        return super().openStream(mime_type, url)

    def _decode(self, data: bytes) -> str:
        text = bytes(data).decode(self._encoding)
        if text.startswith("\ufeff"):
            text = text[1:]
        return text.replace("\r\n", "\n").replace("\r", "\n")

    def openFile(self) -> bool:
        path = self.localFilePath()
        try:
            with open(path, "rb") as f:
                text = self._decode(f.read())
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to open %s: %s", path, exc)
            return False

        self.prepareViewStateRestoringOnReload()

        self.source_document.setMediaWiki(text)
        self.source_document.setBaseUrl(directory_url(path))

        self.restoreScrollPosition()
        self._set_search_actions_enabled(True)
        logger.info("Opened %s (%d characters)", path, len(text))
        return True

    def doOpenStream(self, mime_type: str) -> bool:
        if not is_mediawiki_mime(mime_type, self._mime_types):
            logger.warning("Rejecting stream of type %r", mime_type)
            return False

        self._streamed_data.clear()
        self.source_document.setMediaWiki("")
        return True

    def doWriteStream(self, data: bytes) -> bool:
        self._streamed_data.extend(data)
        return True

    def doCloseStream(self) -> bool:
        try:
            text = self._decode(self._streamed_data)
        except UnicodeDecodeError as exc:
            logger.warning("Failed to decode streamed data: %s", exc)
            self._streamed_data.clear()
            return False

        self.prepareViewStateRestoringOnReload()

        self.source_document.setMediaWiki(text)
        self.source_document.setBaseUrl(QtCore.QUrl())

        self.restoreScrollPosition()
        self._set_search_actions_enabled(True)

        self._streamed_data.clear()
        return True

    def closeUrl(self) -> bool:
        # Repeated calls keep the state remembered by the first one.
        current_url = self.url()
        if current_url.isValid() and not current_url.isEmpty():
            self._previous_scroll_position = self.view.scrollPosition()
            self._previous_url = current_url

        self.source_document.setMediaWiki("")
        self.source_document.setBaseUrl(QtCore.QUrl())
        self._set_search_actions_enabled(False)
        self._streamed_data.clear()

        return super().closeUrl()

    def prepareViewStateRestoringOnReload(self) -> None:
        if self.url() == self._previous_url:
            self.setArguments(
                dataclasses.replace(
                    self.arguments(),
                    x_offset=self._previous_scroll_position.x(),
                    y_offset=self._previous_scroll_position.y(),
                )
            )

    def restoreScrollPosition(self) -> None:
        args = self.arguments()
        self.view.setScrollPosition(QtCore.QPoint(args.x_offset, args.y_offset))

    # ------------------------------------------------------------------- links
    def _handle_anchor_clicked(self, url: QtCore.QUrl) -> None:
        if not url.scheme() and not url.path() and url.hasFragment():
            self.view.scrollToAnchor(url.fragment())
            return
        if self._modus is Modus.BrowserViewModus:
            self.browser_extension.requestOpenUrl(url)
        else:
            self.handleOpenUrlRequest(self.resolvedUrl(url))

    def handleOpenUrlRequest(self, url: QtCore.QUrl) -> None:
        logger.info("Opening link with desktop handler: %s", url.toDisplayString())
        QtGui.QDesktopServices.openUrl(url)

    def resolvedUrl(self, url: QtCore.QUrl) -> QtCore.QUrl:
        return resolved_url(self.source_document.baseUrl(), url)

    def showHoveredLink(self, link_url: QtCore.QUrl) -> None:
        if link_url.isEmpty():
            message, file_url = "", QtCore.QUrl()
        else:
            message, file_url = hover_info(self.resolvedUrl(link_url))
        self.browser_extension.mouseOverInfo.emit(file_url)
        self.setStatusBarText.emit(message)

    # ------------------------------------------------------------ context menu
    def _build_context_menu(
        self, link_url: QtCore.QUrl, has_selection: bool
    ) -> QtWidgets.QMenu:
        menu = QtWidgets.QMenu(self.view)

        if not link_url.isValid() or link_url.isEmpty():
            if has_selection:
                menu.addAction(self._copy_selection_action)
            else:
                menu.addAction(self.action("select_all"))
                if self.search_toolbar.isHidden():
                    menu.addAction(self.action("find"))
        else:
            target = self.resolvedUrl(link_url)
            open_action = menu.addAction(self.tr("Open Link"))
            open_action.triggered.connect(
                lambda _checked=False: self.handleOpenUrlRequest(target)
            )
            menu.addSeparator()
            for action in self.createLinkActions(menu, target):
                menu.addAction(action)

        return menu

    def handleContextMenuRequest(
        self, global_pos: QtCore.QPoint, link_url: QtCore.QUrl, has_selection: bool
    ) -> None:
        menu = self._build_context_menu(link_url, has_selection)
        if not menu.isEmpty():
            menu.exec_(global_pos)
        menu.deleteLater()

    def createLinkActions(
        self, parent: Optional[QtCore.QObject], link_url: QtCore.QUrl
    ) -> List[QtWidgets.QAction]:
        if is_mailto(link_url):
            return [self.createCopyEmailAddressAction(parent, link_url)]
        return [self.createCopyLinkUrlAction(parent, link_url)]

    def createCopyEmailAddressAction(
        self, parent: Optional[QtCore.QObject], mailto_url: QtCore.QUrl
    ) -> QtWidgets.QAction:
        action = QtWidgets.QAction(self.tr("&Copy Email Address"), parent)
        address = mailto_address(mailto_url)

        def copy_address(_checked=False):
            data = QtCore.QMimeData()
            data.setText(address)
            QtWidgets.QApplication.clipboard().setMimeData(
                data, QtGui.QClipboard.Clipboard
            )

        action.triggered.connect(copy_address)
        return action

    def createCopyLinkUrlAction(
        self, parent: Optional[QtCore.QObject], link_url: QtCore.QUrl
    ) -> QtWidgets.QAction:
        action = QtWidgets.QAction(self.tr("Copy Link &URL"), parent)
        url = QtCore.QUrl(link_url)

        def copy_url(_checked=False):
            data = QtCore.QMimeData()
            data.setUrls([url])
            data.setText(url.toString())
            QtWidgets.QApplication.clipboard().setMimeData(
                data, QtGui.QClipboard.Clipboard
            )

        action.triggered.connect(copy_url)
        return action

    # --------------------------------------------------------------- selection
    def copySelection(self) -> None:
        self.view.copy()

    def selectAll(self) -> None:
        self.view.selectAll()

    def selectedText(self) -> str:
        return self.view.selectedText()
