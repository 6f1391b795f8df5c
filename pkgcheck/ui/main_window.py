import os
from pathlib import Path

from PySide6.QtCore import Qt, QObject, QThread, QUrl, Signal
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QFileDialog,
    QComboBox,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QSplitter,
    QMessageBox,
)

from pkgcheck.config import APP_NAME, APP_VERSION
from pkgcheck.core.checks import default_registry
from pkgcheck.core.contexts import context_choices, context_from_label, default_label, eligible_for_standards
from pkgcheck.core.manifest import load_manifest
from pkgcheck.core.reporting import (
    STATUS_FAILED,
    STATUS_WARNINGS,
    build_report_html,
    delta_report_exists,
    delta_report_path,
    report_html_path,
    report_status,
    write_report_html,
)
from pkgcheck.core.runner import ValidationRunner
from pkgcheck.core.settings import ensure_default_settings_on_disk, load_settings
from pkgcheck.core.store import ReportStore
from pkgcheck.models import CheckState

_STATUS_COLORS = {
    STATUS_FAILED: "#d9534f",
    STATUS_WARNINGS: "#f0ad4e",
}
_SUCCESS_COLOR = "#5cb85c"


class ValidationWorker(QObject):
    finished = Signal(object, object)  # report, error

    def __init__(self, runner, package, context):
        super().__init__()
        self.runner = runner
        self.package = package
        self.context = context

    def run(self):
        try:
            report = self.runner.validate(self.package, self.context)
        except (OSError, ValueError) as e:
            self.finished.emit(None, e)
            return
        self.finished.emit(report, None)


class MainWindow(QMainWindow):
    def __init__(self, results_dir=None):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} (v{APP_VERSION})")
        self.setMinimumSize(900, 600)

        # Settings live next to the repo, like the rest of the tool's state
        repo_root = str(Path(__file__).resolve().parents[2])  # .../pkgcheck/ui/main_window.py -> repo root
        self._repo_root = repo_root
        ensure_default_settings_on_disk(self._repo_root)
        settings = load_settings(self._repo_root)

        if results_dir is None:
            results_dir = settings.results_dir
            if not os.path.isabs(results_dir):
                results_dir = os.path.join(self._repo_root, results_dir)

        self._store = ReportStore()
        self._runner = ValidationRunner(
            default_registry(),
            results_dir=results_dir,
            store=self._store,
            max_workers=settings.max_workers,
            disabled_checks=settings.disabled_checks,
        )
        self._last_report = None
        self._validate_thread = None
        self._validate_worker = None

        # --- Root widget
        root = QWidget()
        self.setCentralWidget(root)

        main_layout = QVBoxLayout(root)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(10)

        # -------------------------
        # Package / previous version
        # -------------------------
        self.package_edit = QLineEdit()
        self.package_edit.setPlaceholderText("Select package folder (contains package.json)...")

        btn_package = QPushButton("Browse...")
        btn_package.clicked.connect(self.pick_package_folder)

        package_row = QHBoxLayout()
        package_row.addWidget(QLabel("Package:"))
        package_row.addWidget(self.package_edit, 1)
        package_row.addWidget(btn_package)

        self.previous_edit = QLineEdit()
        self.previous_edit.setPlaceholderText("Optional: previous version folder to diff against...")

        btn_previous = QPushButton("Browse...")
        btn_previous.clicked.connect(self.pick_previous_folder)

        previous_row = QHBoxLayout()
        previous_row.addWidget(QLabel("Previous:"))
        previous_row.addWidget(self.previous_edit, 1)
        previous_row.addWidget(btn_previous)

        main_layout.addLayout(package_row)
        main_layout.addLayout(previous_row)

        # -------------------------
        # Validation type + buttons
        # -------------------------
        mid_row = QHBoxLayout()

        self.context_combo = QComboBox()
        self.context_combo.addItems(context_choices(show_production_standards=False))
        self.context_combo.setCurrentText(default_label(False))
        self.package_edit.textChanged.connect(self.refresh_validation_choices)

        mid_row.addWidget(QLabel("Validation:"))
        mid_row.addWidget(self.context_combo)
        mid_row.addStretch(1)

        self.status_label = QLabel("")
        self.status_label.setMinimumWidth(90)
        self.status_label.setAlignment(Qt.AlignCenter)
        mid_row.addWidget(self.status_label)

        self.btn_validate = QPushButton("Validate")
        self.btn_validate.clicked.connect(self.on_validate_clicked)

        self.btn_view_results = QPushButton("View Results")
        self.btn_view_results.setEnabled(False)
        self.btn_view_results.clicked.connect(self.on_view_results_clicked)

        self.btn_view_diff = QPushButton("View Diff")
        self.btn_view_diff.setEnabled(False)
        self.btn_view_diff.clicked.connect(self.on_view_diff_clicked)

        mid_row.addWidget(self.btn_validate)
        mid_row.addWidget(self.btn_view_results)
        mid_row.addWidget(self.btn_view_diff)

        main_layout.addLayout(mid_row)

        # -------------------------
        # Bottom: Results + Logs
        # -------------------------
        splitter = QSplitter(Qt.Horizontal)

        results_panel = QWidget()
        results_layout = QVBoxLayout(results_panel)
        results_layout.setContentsMargins(0, 0, 0, 0)
        results_layout.addWidget(QLabel("Results"))
        self.results_list = QListWidget()
        results_layout.addWidget(self.results_list, 1)

        logs_panel = QWidget()
        logs_layout = QVBoxLayout(logs_panel)
        logs_layout.setContentsMargins(0, 0, 0, 0)
        logs_layout.addWidget(QLabel("Log"))
        self.log_box = QPlainTextEdit()
        self.log_box.setReadOnly(True)
        self.log_box.setPlaceholderText("Logs will appear here...")
        logs_layout.addWidget(self.log_box, 1)

        splitter.addWidget(results_panel)
        splitter.addWidget(logs_panel)
        splitter.setSizes([520, 380])

        main_layout.addWidget(splitter, 1)

        self.log("Ready. Choose a package folder, then Validate.")

        # Stable IDs (used by UI tests)
        self.package_edit.setObjectName("package_edit")
        self.previous_edit.setObjectName("previous_edit")
        self.context_combo.setObjectName("context_combo")
        self.status_label.setObjectName("status_label")
        self.btn_validate.setObjectName("btn_validate")
        self.btn_view_results.setObjectName("btn_view_results")
        self.btn_view_diff.setObjectName("btn_view_diff")
        self.results_list.setObjectName("results_list")
        self.log_box.setObjectName("log_box")

    # -------------------------
    # UI Helpers
    # -------------------------
    def log(self, msg: str):
        self.log_box.appendPlainText(msg)

    def add_result(self, level: str, message: str):
        item = QListWidgetItem(f"[{level}] {message}")

        lvl = level.upper().strip()
        if lvl == "ERROR":
            item.setForeground(Qt.red)
        elif lvl == "WARNING":
            item.setForeground(Qt.darkYellow)
        else:
            item.setForeground(Qt.darkGreen)

        self.results_list.addItem(item)

    def set_status(self, status: str):
        color = _STATUS_COLORS.get(status, _SUCCESS_COLOR)
        self.status_label.setText(status)
        self.status_label.setStyleSheet(f"background-color: {color}; color: white; padding: 2px 8px;")

    def pick_package_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Package Folder")
        if folder:
            self.package_edit.setText(os.path.normpath(folder))
            self.log(f"Package folder set: {folder}")

    def pick_previous_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Previous Version Folder")
        if folder:
            self.previous_edit.setText(os.path.normpath(folder))
            self.log(f"Previous version folder set: {folder}")

    def refresh_validation_choices(self):
        # Standards options are only offered to packages with an eligible name
        package_path = self.package_edit.text().strip()
        show = False
        if package_path and os.path.isfile(os.path.join(package_path, "package.json")):
            try:
                show = eligible_for_standards(load_manifest(package_path).name)
            except (OSError, ValueError):
                show = False

        self.context_combo.clear()
        self.context_combo.addItems(context_choices(show_production_standards=show))
        self.context_combo.setCurrentText(default_label(show))

    def is_validating(self) -> bool:
        return self._validate_thread is not None

    def _refresh_artifact_buttons(self):
        report = self._last_report
        if report is None:
            self.btn_view_results.setEnabled(False)
            self.btn_view_diff.setEnabled(False)
            return
        results_dir = self._runner.results_dir
        self.btn_view_results.setEnabled(os.path.isfile(report_html_path(results_dir, report.name, report.version)))
        self.btn_view_diff.setEnabled(delta_report_exists(results_dir, report.name, report.version))

    # -------------------------
    # Validate
    # -------------------------
    def on_validate_clicked(self):
        if self.is_validating():
            return

        self.results_list.clear()
        self.status_label.setText("")
        self.status_label.setStyleSheet("")

        package_path = self.package_edit.text().strip()
        if not package_path or not os.path.isdir(package_path):
            QMessageBox.warning(self, "Missing Package", "Please choose a valid package folder.")
            return

        previous_path = self.previous_edit.text().strip()
        try:
            previous = load_manifest(previous_path) if previous_path else None
            package = load_manifest(package_path, previous=previous)
        except (OSError, ValueError) as e:
            self.add_result("ERROR", f"MANIFEST_INVALID: {e}")
            self.log(f"ERROR: {e}")
            return

        label = self.context_combo.currentText()
        # Packages picked from disk are always local sources
        context = context_from_label(label, local_source=True)

        self.log("---- VALIDATION START ----")
        self.log(f"Package:  {package.package_id}")
        self.log(f"Previous: {previous.package_id if previous else '(none)'}")
        self.log(f"Type:     {label} ({context.value})")

        self.btn_validate.setEnabled(False)

        self._validate_thread = QThread()
        self._validate_worker = ValidationWorker(self._runner, package, context)
        self._validate_worker.moveToThread(self._validate_thread)

        self._validate_thread.started.connect(self._validate_worker.run)
        self._validate_worker.finished.connect(self._on_validation_finished)

        self._validate_worker.finished.connect(self._validate_thread.quit)
        self._validate_worker.finished.connect(self._validate_worker.deleteLater)
        self._validate_thread.finished.connect(self._on_validate_thread_finished)
        self._validate_thread.finished.connect(self._validate_thread.deleteLater)

        self._validate_thread.start()

    def _on_validate_thread_finished(self):
        self._validate_thread = None
        self._validate_worker = None

    def _on_validation_finished(self, report, error):
        self.btn_validate.setEnabled(True)

        if error is not None:
            self.add_result("ERROR", f"VALIDATION_ABORTED: {error}")
            self.log(f"ERROR: {error}")
            self.set_status(STATUS_FAILED)
            return

        self._last_report = report
        html_text = build_report_html(report, APP_NAME, APP_VERSION)
        written = write_report_html(
            html_text,
            report_html_path(self._runner.results_dir, report.name, report.version),
        )

        for o in report.outcomes:
            level = {CheckState.FAILED: "ERROR", CheckState.NOT_RUN: "INFO"}.get(o.state, "INFO")
            self.add_result(level, f"{o.name}: {o.state.value}")
            for m in o.messages:
                suffix = f" ({m.relpath})" if m.relpath else ""
                self.add_result(m.level, f"  {m.code}: {m.message}{suffix}")

        if not report.outcomes:
            self.add_result("INFO", "No checks apply to this validation type.")

        status = report_status(report)
        self.set_status(status)
        self._refresh_artifact_buttons()

        self.log(f"Result: {status} ({len(report.outcomes)} check(s))")
        self.log(f"Report written: {written}")
        self.log("---- VALIDATION DONE ----")

    def closeEvent(self, event):
        if self._validate_thread is not None:
            self._validate_thread.quit()
            self._validate_thread.wait()
        super().closeEvent(event)

    def on_view_results_clicked(self):
        report = self._last_report
        if report is None:
            return
        path = report_html_path(self._runner.results_dir, report.name, report.version)
        if not os.path.isfile(path):
            QMessageBox.information(self, "Validation Results", "Results are missing.")
            return
        QDesktopServices.openUrl(QUrl.fromLocalFile(path))

    def on_view_diff_clicked(self):
        report = self._last_report
        if report is None:
            return
        path = delta_report_path(self._runner.results_dir, report.name, report.version)
        if os.path.isfile(path):
            QDesktopServices.openUrl(QUrl.fromLocalFile(os.path.abspath(path)))
