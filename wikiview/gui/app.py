import sys
from pathlib import Path

from qtpy import QtCore, QtGui, QtWidgets

from wikiview import __appname__
from wikiview.gui.cli import parse_cli
from wikiview.gui.mediawiki_part import MediaWikiPart
from wikiview.gui.part import Modus
from wikiview.utils.logger import logger, set_log_level
from wikiview.version import get_version

_STDIN_CHUNK_SIZE = 64 * 1024


class ViewerWindow(QtWidgets.QMainWindow):
    """Standalone shell hosting a MediaWikiPart.

    In browser mode the window plays the embedding browser: it receives the
    part's browser extension signals and decides what to do with links and
    context menus.
    """

    def __init__(self, config: dict, modus: Modus = Modus.ReadOnlyModus) -> None:
        super().__init__()
        self._config = config
        self._status_timeout = int(config.get("status_timeout_ms") or 0)
        self._suffixes = tuple(s.lower() for s in config.get("file_suffixes") or [])

        self.part = MediaWikiPart(self, self, modus=modus, config=config)
        self.setCentralWidget(self.part.widget())
        self.setWindowTitle(__appname__)
        window_config = config.get("window") or {}
        self.resize(window_config.get("width", 900), window_config.get("height", 700))

        self.part.setStatusBarText.connect(self._show_status)
        self.part.setWindowCaption.connect(
            lambda caption: self.setWindowTitle(f"{caption} - {__appname__}")
        )
        self.part.canceled.connect(self._show_error)

        if modus is Modus.BrowserViewModus:
            extension = self.part.browser_extension
            extension.openUrlRequest.connect(self.openUrlRequested)
            extension.enableAction.connect(self._enable_browser_action)
            extension.popupMenu.connect(self.showPopupMenu)

        self._build_menus(modus)

    # ------------------------------------------------------------------- menus
    def _build_menus(self, modus: Modus) -> None:
        file_menu = self.menuBar().addMenu(self.tr("&File"))
        open_action = file_menu.addAction(QtGui.QIcon.fromTheme("document-open"), self.tr("&Open..."))
        open_action.setShortcut(QtGui.QKeySequence.Open)
        open_action.triggered.connect(self.openFileDialog)
        self.reload_action = file_menu.addAction(
            QtGui.QIcon.fromTheme("view-refresh"), self.tr("&Reload")
        )
        self.reload_action.setShortcut(QtGui.QKeySequence.Refresh)
        self.reload_action.triggered.connect(self.reload)
        file_menu.addSeparator()
        quit_action = file_menu.addAction(QtGui.QIcon.fromTheme("application-exit"), self.tr("&Quit"))
        quit_action.setShortcut(QtGui.QKeySequence.Quit)
        quit_action.triggered.connect(self.close)

        edit_menu = self.menuBar().addMenu(self.tr("&Edit"))
        if modus is Modus.BrowserViewModus:
            # The browser owns the copy action and follows the extension.
            self.browser_copy_action = edit_menu.addAction(
                QtGui.QIcon.fromTheme("edit-copy"), self.tr("&Copy")
            )
            self.browser_copy_action.setEnabled(False)
            self.browser_copy_action.triggered.connect(self.part.browser_extension.copy)
        else:
            edit_menu.addAction(self.part.action("copy"))
        edit_menu.addAction(self.part.action("select_all"))
        edit_menu.addSeparator()
        for name in MediaWikiPart.SEARCH_ACTIONS:
            edit_menu.addAction(self.part.action(name))

    # ------------------------------------------------------------------ slots
    def _show_status(self, message: str) -> None:
        self.statusBar().showMessage(message, self._status_timeout)

    def _show_error(self, message: str) -> None:
        if message:
            self.statusBar().showMessage(message)

    def _enable_browser_action(self, name: str, enabled: bool) -> None:
        if name == "copy":
            self.browser_copy_action.setEnabled(enabled)

    def openFileDialog(self) -> None:
        patterns = " ".join(f"*{suffix}" for suffix in self._suffixes)
        filename, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            self.tr("Open MediaWiki File"),
            str(Path.cwd()),
            self.tr("MediaWiki files ({});;All files (*)").format(patterns),
        )
        if filename:
            self.openPath(filename)

    def openPath(self, path: str) -> bool:
        if not self.part.openUrl(path):
            QtWidgets.QMessageBox.warning(
                self,
                self.tr("Open failed"),
                self.tr("Could not open {}").format(path),
            )
            return False
        return True

    def openStdin(self, mime_type: str, stream=None) -> bool:
        stream = stream if stream is not None else sys.stdin.buffer
        if not self.part.openStream(mime_type, QtCore.QUrl()):
            logger.error("Unsupported MIME type for stdin: %s", mime_type)
            return False
        while True:
            chunk = stream.read(_STDIN_CHUNK_SIZE)
            if not chunk:
                break
            self.part.writeStream(chunk)
        return self.part.closeStream()

    def reload(self) -> None:
        url = self.part.url()
        if url.isLocalFile():
            self.part.openUrl(url)

    def openUrlRequested(self, url: QtCore.QUrl) -> None:
        if url.isLocalFile() and url.toLocalFile().lower().endswith(self._suffixes):
            self.part.openUrl(url)
            return
        self.openExternally(url)

    def openExternally(self, url: QtCore.QUrl) -> None:
        logger.info("Opening link with desktop handler: %s", url.toDisplayString())
        QtGui.QDesktopServices.openUrl(url)

    def buildPopupMenu(
        self, link_url: QtCore.QUrl, has_selection: bool, action_groups: dict
    ) -> QtWidgets.QMenu:
        menu = QtWidgets.QMenu(self)
        if link_url.isValid() and not link_url.isEmpty():
            open_action = menu.addAction(self.tr("Open Link"))
            open_action.triggered.connect(
                lambda _checked=False: self.openUrlRequested(link_url)
            )
            menu.addSeparator()
        for action in action_groups.get("linkactions", []):
            menu.addAction(action)
        for action in action_groups.get("editactions", []):
            menu.addAction(action)
        if not has_selection and not action_groups:
            menu.addAction(self.part.action("select_all"))
            if self.part.search_toolbar.isHidden():
                menu.addAction(self.part.action("find"))
        return menu

    def showPopupMenu(
        self,
        global_pos: QtCore.QPoint,
        link_url: QtCore.QUrl,
        has_selection: bool,
        action_groups: dict,
    ) -> None:
        menu = self.buildPopupMenu(link_url, has_selection, action_groups)
        if not menu.isEmpty():
            menu.exec_(global_pos)
        menu.deleteLater()


def main(argv=None):
    config, args, version_requested = parse_cli(argv)
    if version_requested:
        print(get_version())
        return 0

    set_log_level((config.get("logging") or {}).get("level", "info"))

    qt_args = sys.argv if argv is None else [sys.argv[0], *argv]
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(qt_args)
    app.setApplicationName(__appname__)
    app.setApplicationVersion(get_version())

    modus = Modus.BrowserViewModus if args.browser_mode else Modus.ReadOnlyModus
    win = ViewerWindow(config=config, modus=modus)

    if args.filename == "-":
        win.openStdin(args.mime_type)
    elif args.filename:
        win.openPath(args.filename)

    win.show()
    win.raise_()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
