import os

from qtpy import QtCore, QtWidgets

from wikiview.configs import get_config
from wikiview.gui.mediawiki_part import MediaWikiPart
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


def _mk_browser_part():
    _ensure_qapp()
    part = MediaWikiPart(modus=Modus.BrowserViewModus, config=get_config())
    part.source_document.setBaseUrl(QtCore.QUrl("https://example.org/wiki/"))
    return part


def test_copy_action_is_not_registered_in_browser_mode():
    part = _mk_browser_part()
    assert "copy" not in part.actionCollection()
    assert part.copySelectionAction() is not None


def test_link_click_is_forwarded_to_browser(monkeypatch):
    part = _mk_browser_part()
    requested, opened = [], []
    part.browser_extension.openUrlRequest.connect(requested.append)
    monkeypatch.setattr(part, "handleOpenUrlRequest", opened.append)

    part.view.anchorClicked.emit(QtCore.QUrl("Other_Page"))

    assert requested == [QtCore.QUrl("https://example.org/wiki/Other_Page")]
    assert opened == []


def test_selection_changes_update_browser_copy_action():
    part = _mk_browser_part()
    part.source_document.setMediaWiki("Some text")
    enabled, infos = [], []
    part.browser_extension.enableAction.connect(
        lambda name, state: enabled.append((name, state))
    )
    part.browser_extension.selectionInfo.connect(infos.append)

    part.selectAll()

    assert enabled[-1] == ("copy", True)
    assert infos[-1] == "Some text"


def test_context_menu_request_is_relayed_with_action_groups():
    part = _mk_browser_part()
    popups = []
    part.browser_extension.popupMenu.connect(
        lambda pos, url, has_selection, groups: popups.append(
            (pos, url, has_selection, groups)
        )
    )

    part.view.contextMenuRequested.emit(QtCore.QPoint(5, 6), QtCore.QUrl(), True)
    pos, url, has_selection, groups = popups[-1]
    assert pos == QtCore.QPoint(5, 6)
    assert url.isEmpty()
    assert has_selection is True
    assert groups["editactions"] == [part.copySelectionAction()]

    part.view.contextMenuRequested.emit(
        QtCore.QPoint(1, 1), QtCore.QUrl("mailto:a@example.org"), False
    )
    _, url, _, groups = popups[-1]
    assert url == QtCore.QUrl("mailto:a@example.org")
    assert [a.text() for a in groups["linkactions"]] == ["&Copy Email Address"]


def test_extension_copy_slot_copies_selection():
    part = _mk_browser_part()
    part.source_document.setMediaWiki("Copy me")
    part.selectAll()

    part.browser_extension.copy()

    assert QtWidgets.QApplication.clipboard().text() == "Copy me"


def test_link_actions_are_not_owned_by_the_extension():
    part = _mk_browser_part()
    popups = []
    part.browser_extension.popupMenu.connect(
        lambda pos, url, has_selection, groups: popups.append(groups)
    )

    for _ in range(50):
        part.view.contextMenuRequested.emit(
            QtCore.QPoint(1, 1), QtCore.QUrl("Other_Page"), False
        )

    assert part.browser_extension.findChildren(QtWidgets.QAction) == []
    assert [a.text() for a in popups[-1]["linkactions"]] == ["Copy Link &URL"]
