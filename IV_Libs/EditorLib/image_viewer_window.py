from io import BytesIO
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence, QPixmap
from PyQt5.QtWidgets import (
    QAction,
    QDialog,
    QFileDialog,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from IV_Libs.EditorLib.image_engine import ImageEngine
from IV_Libs.EditorLib.preview_session import PreviewSession
from IV_Libs.ImageEditingLib.image_codec import to_pil_image
from IV_Libs.ImageEditingLib.image_models import ImageEditingError, InvalidGeometryError
from IV_Libs.constants import (
    APP_NAME,
    APP_VERSION,
    CROP_DIALOG_HEIGHT,
    CROP_DIALOG_WIDTH,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    FILE_LABEL_PREFIX,
    NO_FILE_LABEL,
    OPEN_FILE_FILTER,
    STATUS_INVALID_FORMAT,
)


class CropDialog(QDialog):
    """Modal margin editor that previews the crop as values change."""

    def __init__(self, parent: "ImageViewerWindow", session: PreviewSession) -> None:
        super().__init__(parent)
        self.viewer = parent
        self.session = session
        self.setWindowTitle("Crop")
        self.setModal(True)
        self.setFixedSize(CROP_DIALOG_WIDTH, CROP_DIALOG_HEIGHT)

        original = session.original
        self.spin_left = self._make_spin(original.width - 1)
        self.spin_right = self._make_spin(original.width - 1)
        self.spin_bottom = self._make_spin(original.height - 1)
        self.spin_top = self._make_spin(original.height - 1)
        self.btn_proceed = QPushButton("Proceed")

        self._build_ui()
        self._connect_signals()

    def _make_spin(self, maximum: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(0, max(maximum, 0))
        return spin

    def _build_ui(self) -> None:
        grid = QGridLayout(self)
        for column, text in enumerate(("Left", "Right", "Bottom", "Top")):
            grid.addWidget(QLabel(text), 0, column)
        for column, spin in enumerate(self._spins()):
            grid.addWidget(spin, 1, column)
        grid.addWidget(self.btn_proceed, 2, 1, 1, 2)

    def _connect_signals(self) -> None:
        for spin in self._spins():
            spin.valueChanged.connect(self.update_preview)
        self.btn_proceed.clicked.connect(self.accept)

    def _spins(self):
        return (self.spin_left, self.spin_right, self.spin_bottom, self.spin_top)

    def update_preview(self) -> None:
        try:
            self.session.update(*(spin.value() for spin in self._spins()))
        except InvalidGeometryError as exc:
            self.viewer.show_status(str(exc))
            return
        self.viewer.refresh_image()

    def accept(self) -> None:
        if self.session.is_open:
            self.viewer.show_status(self.session.commit())
        self.viewer.refresh_image()
        super().accept()

    def reject(self) -> None:
        if self.session.is_open:
            self.viewer.show_status(self.session.discard())
        self.viewer.refresh_image()
        super().reject()


class ImageViewerWindow(QMainWindow):
    def __init__(self, engine: Optional[ImageEngine] = None) -> None:
        super().__init__()
        self.engine = engine if engine is not None else ImageEngine()
        self.last_directory = str(Path.cwd())
        self.setWindowTitle(APP_NAME)
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self._build_ui()
        self._build_menus()
        self._connect_signals()
        self.show_filename(None)
        self.set_buttons_enabled(False)

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QVBoxLayout(central)
        body = QHBoxLayout()
        toolbar = QVBoxLayout()

        self.label_filename = QLabel()
        self.label_status = QLabel(APP_VERSION)
        self.label_image = QLabel()
        self.label_image.setAlignment(Qt.AlignCenter)
        self.label_image.setFrameShape(QFrame.StyledPanel)

        self.btn_smaller = QPushButton("Smaller")
        self.btn_larger = QPushButton("Larger")
        toolbar.addWidget(self.btn_smaller)
        toolbar.addWidget(self.btn_larger)
        toolbar.addStretch()

        body.addLayout(toolbar)
        body.addWidget(self.label_image, stretch=1)

        root.addWidget(self.label_filename)
        root.addLayout(body, stretch=1)
        root.addWidget(self.label_status)

    def _add_action(self, menu, text: str, slot, shortcut: Optional[str] = None) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(QKeySequence(shortcut))
        action.triggered.connect(slot)
        menu.addAction(action)
        return action

    def _build_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        self._add_action(file_menu, "Open...", self.open_file, "Ctrl+O")
        self._add_action(file_menu, "Close", self.close_image, "Ctrl+W")
        file_menu.addSeparator()
        self._add_action(file_menu, "Save As...", self.save_as, "Ctrl+S")
        file_menu.addSeparator()
        self._add_action(file_menu, "Quit", self.close, "Ctrl+Q")

        edit_menu = menubar.addMenu("Edit")
        self._add_action(edit_menu, "Undo", self.undo, "Ctrl+Z")
        self._add_action(edit_menu, "Redo", self.redo, "Ctrl+Y")
        edit_menu.addSeparator()
        self._add_action(edit_menu, "Crop", self.open_crop_dialog)

        filter_menu = menubar.addMenu("Filter")
        for name in self.engine.filter_names():
            self._add_action(filter_menu, name, lambda _checked=False, n=name: self.apply_filter(n))

        help_menu = menubar.addMenu("Help")
        self._add_action(help_menu, f"About {APP_NAME}...", self.show_about)

    def _connect_signals(self) -> None:
        self.btn_smaller.clicked.connect(self.make_smaller)
        self.btn_larger.clicked.connect(self.make_larger)

    def open_file(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Image",
            self.last_directory,
            OPEN_FILE_FILTER,
        )
        if not file_path:
            return

        self.last_directory = str(Path(file_path).parent)
        if not self.engine.open_file(file_path):
            QMessageBox.critical(self, "Image Load Error", STATUS_INVALID_FORMAT)
            return

        self.set_buttons_enabled(True)
        self.show_filename(file_path)
        self.show_status(self.engine.status)
        self.refresh_image()

    def close_image(self) -> None:
        self.show_status(self.engine.close())
        self.show_filename(None)
        self.set_buttons_enabled(False)
        self.refresh_image()

    def save_as(self) -> None:
        if not self.engine.has_image:
            return

        file_path, _ = QFileDialog.getSaveFileName(self, "Save Image As", self.last_directory)
        if not file_path:
            return

        self.last_directory = str(Path(file_path).parent)
        if self.engine.save_as(file_path):
            self.show_filename(file_path)
        self.show_status(self.engine.status)

    def apply_filter(self, name: str) -> None:
        self._run(lambda: self.engine.apply_filter(name))

    def make_smaller(self) -> None:
        self._run(self.engine.shrink)

    def make_larger(self) -> None:
        self._run(self.engine.enlarge)

    def undo(self) -> None:
        self._run(self.engine.undo)

    def redo(self) -> None:
        self._run(self.engine.redo)

    def open_crop_dialog(self) -> None:
        session = self.engine.begin_crop_preview()
        if session is None:
            self.show_status(self.engine.status)
            return
        CropDialog(self, session).exec_()

    def _run(self, operation) -> None:
        try:
            status = operation()
        except ImageEditingError as exc:
            status = str(exc)
        self.show_status(status)
        self.refresh_image()

    def show_about(self) -> None:
        QMessageBox.information(self, f"About {APP_NAME}", f"{APP_NAME}\n{APP_VERSION}")

    def show_filename(self, filename: Optional[str]) -> None:
        if filename is None:
            self.label_filename.setText(NO_FILE_LABEL)
        else:
            self.label_filename.setText(FILE_LABEL_PREFIX + filename)

    def show_status(self, text: str) -> None:
        self.label_status.setText(text)

    def set_buttons_enabled(self, enabled: bool) -> None:
        self.btn_smaller.setEnabled(enabled)
        self.btn_larger.setEnabled(enabled)

    def refresh_image(self) -> None:
        if self.engine.current is None:
            self.label_image.clear()
            return

        pixmap = QPixmap()
        if not pixmap.loadFromData(self._to_png_bytes(), "PNG"):
            self.label_image.setText("Preview failed")
            return
        self.label_image.setPixmap(pixmap)
        self.adjustSize()

    def _to_png_bytes(self) -> bytes:
        buffer = BytesIO()
        to_pil_image(self.engine.current).save(buffer, format="PNG")
        return buffer.getvalue()
