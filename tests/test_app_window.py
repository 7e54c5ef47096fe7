import io
import os

from qtpy import QtCore, QtWidgets

from wikiview.configs import get_config
from wikiview.gui.app import ViewerWindow
from wikiview.gui.part import Modus


os.environ.setdefault("QT_QPA_PLATFORM", "minimal")


_QAPP = None


def _ensure_qapp():
    global _QAPP
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    _QAPP = app
    return _QAPP


def _mk_window(modus=Modus.ReadOnlyModus):
    _ensure_qapp()
    return ViewerWindow(config=get_config(), modus=modus)


def test_window_exposes_part_actions_in_edit_menu():
    w = _mk_window()
    try:
        edit_menu = w.menuBar().actions()[1].menu()
        texts = [a.text() for a in edit_menu.actions() if not a.isSeparator()]
        assert texts == [
            "&Copy Text",
            "Select &All",
            "&Find...",
            "Find &Next",
            "Find Pre&vious",
        ]
    finally:
        w.close()


def test_open_path_updates_title_and_status(tmp_path):
    w = _mk_window()
    try:
        path = tmp_path / "Page.wiki"
        path.write_text("== Hello ==\n[[World]]", encoding="utf-8")

        assert w.openPath(str(path))
        assert "Page.wiki" in w.windowTitle()

        w.part.showHoveredLink(QtCore.QUrl("World"))
        assert w.statusBar().currentMessage().endswith("/World")
    finally:
        w.close()


def test_open_stdin_uses_stream_protocol():
    w = _mk_window()
    try:
        stream = io.BytesIO("== From stdin ==\nbody".encode("utf-8"))
        assert w.openStdin("text/mediawiki", stream)
        assert w.part.source_document.mediaWiki() == "== From stdin ==\nbody"
        assert w.part.action("find").isEnabled()

        assert not w.openStdin("image/png", io.BytesIO(b"x"))
    finally:
        w.close()


def test_browser_mode_opens_local_wiki_links_in_place(tmp_path, monkeypatch):
    w = _mk_window(Modus.BrowserViewModus)
    try:
        first = tmp_path / "First.wiki"
        second = tmp_path / "Second.wiki"
        first.write_text("[[Second.wiki]]", encoding="utf-8")
        second.write_text("second page", encoding="utf-8")
        external = []
        monkeypatch.setattr(w, "openExternally", external.append)

        assert w.openPath(str(first))
        w.part.view.anchorClicked.emit(QtCore.QUrl("Second.wiki"))
        assert w.part.source_document.mediaWiki() == "second page"

        w.part.view.anchorClicked.emit(QtCore.QUrl("https://example.org/"))
        assert external == [QtCore.QUrl("https://example.org/")]
    finally:
        w.close()


def test_browser_mode_copy_action_follows_extension():
    w = _mk_window(Modus.BrowserViewModus)
    try:
        assert not w.browser_copy_action.isEnabled()
        w.part.source_document.setMediaWiki("text")
        w.part.selectAll()
        assert w.browser_copy_action.isEnabled()
    finally:
        w.close()


def test_browser_popup_menu_from_action_groups():
    w = _mk_window(Modus.BrowserViewModus)
    try:
        menu = w.buildPopupMenu(QtCore.QUrl(), False, {})
        assert menu.actions() == [w.part.action("select_all"), w.part.action("find")]

        copy = w.part.copySelectionAction()
        menu = w.buildPopupMenu(QtCore.QUrl(), True, {"editactions": [copy]})
        assert menu.actions() == [copy]

        link = QtCore.QUrl("https://example.org/")
        link_actions = w.part.createLinkActions(w, link)
        menu = w.buildPopupMenu(link, False, {"linkactions": link_actions})
        texts = [a.text() for a in menu.actions() if not a.isSeparator()]
        assert texts == ["Open Link", "Copy Link &URL"]
    finally:
        w.close()


def test_version_flag_prints_installed_version(capsys, monkeypatch):
    from wikiview.gui import app as app_module

    monkeypatch.setattr(app_module, "get_version", lambda: "9.9.9")
    assert app_module.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == "9.9.9"
