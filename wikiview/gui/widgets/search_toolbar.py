from __future__ import annotations

from typing import Optional

from qtpy import QtCore, QtGui, QtWidgets

from wikiview.utils.logger import logger


class SearchToolBar(QtWidgets.QWidget):
    """Find bar shown below a text view."""

    searchFailed = QtCore.Signal(str)

    _NOT_FOUND_STYLE = "QLineEdit { background-color: #f8d7da; }"

    def __init__(
        self,
        view: QtWidgets.QTextEdit,
        parent: Optional[QtWidgets.QWidget] = None,
        *,
        case_sensitive: bool = False,
        wrap_around: bool = True,
    ) -> None:
        super().__init__(parent)
        self._view = view
        self._wrap_around = bool(wrap_around)
        self._build_ui(case_sensitive)

    def _build_ui(self, case_sensitive: bool) -> None:
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(4)

        self.close_button = QtWidgets.QToolButton(self)
        self.close_button.setIcon(QtGui.QIcon.fromTheme("dialog-close"))
        self.close_button.setToolTip(self.tr("Close the find bar"))
        self.close_button.setAutoRaise(True)
        layout.addWidget(self.close_button)

        label = QtWidgets.QLabel(self.tr("Find:"), self)
        layout.addWidget(label)

        self.search_edit = QtWidgets.QLineEdit(self)
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.setPlaceholderText(self.tr("Search..."))
        label.setBuddy(self.search_edit)
        layout.addWidget(self.search_edit, 1)

        self.previous_button = QtWidgets.QPushButton(
            QtGui.QIcon.fromTheme("go-up-search"), self.tr("&Previous"), self
        )
        layout.addWidget(self.previous_button)

        self.next_button = QtWidgets.QPushButton(
            QtGui.QIcon.fromTheme("go-down-search"), self.tr("&Next"), self
        )
        layout.addWidget(self.next_button)

        self.match_case_check = QtWidgets.QCheckBox(self.tr("Match case"), self)
        self.match_case_check.setChecked(bool(case_sensitive))
        layout.addWidget(self.match_case_check)

        self.close_button.clicked.connect(self.hide)
        self.search_edit.returnPressed.connect(self.searchNext)
        self.search_edit.textChanged.connect(self._reset_feedback)
        self.previous_button.clicked.connect(self.searchPrevious)
        self.next_button.clicked.connect(self.searchNext)

    # ------------------------------------------------------------------ public
    def searchText(self) -> str:
        return self.search_edit.text()

    def startSearch(self) -> None:
        cursor = self._view.textCursor()
        if cursor.hasSelection():
            selected = cursor.selectedText()
            if "\u2029" not in selected and "\n" not in selected:
                self.search_edit.setText(selected)
        self.show()
        self.search_edit.selectAll()
        self.search_edit.setFocus()

    def searchNext(self) -> bool:
        return self._search(backward=False)

    def searchPrevious(self) -> bool:
        return self._search(backward=True)

    # ----------------------------------------------------------------- helpers
    def _find_flags(self, backward: bool):
        flags = QtGui.QTextDocument.FindFlag(0)
        if backward:
            flags |= QtGui.QTextDocument.FindBackward
        if self.match_case_check.isChecked():
            flags |= QtGui.QTextDocument.FindCaseSensitively
        return flags

    def _search(self, backward: bool) -> bool:
        text = self.search_edit.text()
        if self.isHidden() or not text:
            self.startSearch()
            return False

        flags = self._find_flags(backward)
        found = self._view.find(text, flags)
        if not found and self._wrap_around:
            saved_cursor = self._view.textCursor()
            cursor = QtGui.QTextCursor(saved_cursor)
            cursor.movePosition(
                QtGui.QTextCursor.End if backward else QtGui.QTextCursor.Start
            )
            self._view.setTextCursor(cursor)
            found = self._view.find(text, flags)
            if not found:
                self._view.setTextCursor(saved_cursor)

        if found:
            self._reset_feedback()
        else:
            self.search_edit.setStyleSheet(self._NOT_FOUND_STYLE)
            logger.debug("Text not found: %r", text)
            self.searchFailed.emit(text)
        return found

    def _reset_feedback(self, *_args) -> None:
        self.search_edit.setStyleSheet("")
