# UI.py
""""PySide6 user interface for the String Calculator.

Structure
---------
- Calculator UI: main window with display and button grid
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Handle button and keyboard input and maintain undo/redo
- Dispatch the expression to MathEngine in a worker thread
- Render results and show MathEngine errors as dialogs
- Clipboard integration and optional auto-evaluate after paste


Responsibilities (Settings)
---------------------------

- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (e.g. bracket depth must be positive)
- Save and apply theme changes immediately


Threading Note
--------------
Evaluation is executed off the UI thread in Worker(QObject), so the UI keeps handling events.
Results (or errors) are emitted via a Qt signal and handled back in the UI.
"""""

import logging
import sys
import threading
from pathlib import Path

from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QObject, Signal
from pynput.keyboard import Controller
import pyperclip

from . import error as E
from . import config_manager as config_manager
from . import MathEngine as MathEngine

logger = logging.getLogger(__name__)

# Resolve project root depending on run mode (Script or .exe)
if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Characters that may be typed directly into the display
TYPEABLE = set("0123456789.,+-*/()eE ")

ENTER = '⏎'
COPY = '📋'
PASTE = '📑'
UNDO = '↶'
REDO = '↷'
SETTINGS = '⚙️'


def is_shift_pressed():
    """""

    Shift state as seen by the keyboard controller.
    Used for the "shift to copy" behaviour of the clipboard button.

    """""

    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


class Worker(QObject):
    """""

    Runs in a separate thread, hands the expression to MathEngine.calculate
    and emits a Signal with the result or the MathError back to the Calculator UI.

    """""

    job_finished = Signal(object, str)

    def __init__(self, problem, max_depth=MathEngine.MAX_NESTING_DEPTH):
        super().__init__()
        self.data = problem
        self.max_depth = max_depth

    def run_calc(self):

        try:
            result = MathEngine.calculate(self.data, self.max_depth)
            self.job_finished.emit(result, self.data)

        except E.MathError as e:
            # Known, handled error (e.g. "Division by zero")
            self.job_finished.emit(e, self.data)

        except Exception as e:
            # Unexpected crash, reported the same way so the UI never hangs in "busy"
            logger.exception("Worker crashed on %r", self.data)
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Boolean settings become checkboxes, integer settings input fields.
    Changes are written through config_manager when OK is pressed.

    """""

    settings_saved = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(320, 200)

        main_layout = QtWidgets.QVBoxLayout(self)

        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + " (min. 1):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

            else:
                logger.warning("Setting %r has unsupported type %s", key_value, type(value).__name__)

        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # Blank keeps the old value
                if new_value_str == "":
                    continue

                try:
                    new_value_int = int(new_value_str)
                    if new_value_int < 1:
                        raise ValueError(f"'{new_value_int}' is too small. Minimum is 1.")
                except ValueError as e:
                    logger.warning("Invalid input for %s: %s", key_value, e)
                    QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                   f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                    return

                setting_value_list[key_value] = new_value_int

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error",
                                           f"Error 4501: {E.describe('4501')}config.json")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):
    shift_is_held = False

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Instance State ---
        self.calculator_result = ""    # last result, used by 'Ans'
        self.thread_active = False     # is a calculation running?
        self.received_result = False   # is the display showing a result?
        self.display_text = "0"
        self.undo = ["0"]
        self.redo = []
        self.button_objects = {}

        # --- 3. Window Setup ---
        icon_path = PROJECT_ROOT / "icons" / "icon.png"
        if icon_path.exists():
            self.setWindowIcon(QtGui.QIcon(str(icon_path)))
        self.setWindowTitle("Calculator")
        self.resize(360, 480)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- 4. Display Setup ---
        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(28)
        self.display.setFont(font)
        self.display.setSizePolicy(expanding_policy)
        main_v_layout.addWidget(self.display, 1)

        # --- 5. Button Grid Setup ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 3)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        # (text, row, column, row span, column span)
        self.buttons = [
            (SETTINGS, 0, 0, 1, 1), (COPY, 0, 1, 1, 1), (REDO, 0, 2, 1, 1), (UNDO, 0, 3, 1, 1), ('<', 0, 4, 1, 1),
            ('C', 1, 0, 1, 1), ('Ans', 1, 1, 1, 1), ('.', 1, 2, 1, 1), (',', 1, 3, 1, 1), ('/', 1, 4, 1, 1),
            ('(', 2, 0, 1, 1), ('7', 2, 1, 1, 1), ('8', 2, 2, 1, 1), ('9', 2, 3, 1, 1), ('*', 2, 4, 1, 1),
            (')', 3, 0, 1, 1), ('4', 3, 1, 1, 1), ('5', 3, 2, 1, 1), ('6', 3, 3, 1, 1), ('-', 3, 4, 1, 1),
            ('e', 4, 0, 1, 1), ('1', 4, 1, 1, 1), ('2', 4, 2, 1, 1), ('3', 4, 3, 1, 1), ('+', 4, 4, 1, 1),
            ('0', 5, 0, 1, 4), (ENTER, 5, 4, 1, 1),
        ]

        for text, row, col, row_span, col_span in self.buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)
            button.setFocusPolicy(Qt.FocusPolicy.NoFocus)

            if text == SETTINGS:
                button.clicked.connect(self.open_settings)
            else:
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))

            button_grid.addWidget(button, row, col, row_span, col_span)
            self.button_objects[text] = button

        self.update_button_labels()
        self.update_darkmode()

    # --- Window/Key Event Handlers ---
    def update_button_labels(self):
        # Shift held -> clipboard button copies, otherwise it pastes
        clipboard_button = self.button_objects.get(COPY)
        if clipboard_button:
            clipboard_button.setText(COPY if self.shift_is_held else PASTE)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = True
            self.update_button_labels()
        elif event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.handle_button_press(ENTER)
        elif event.key() == Qt.Key.Key_Backspace:
            self.handle_button_press('<')
        elif event.key() == Qt.Key.Key_Escape:
            self.handle_button_press('C')
        elif event.text() and event.text() in TYPEABLE:
            self.handle_button_press(event.text())
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
            self.update_button_labels()
        super().keyReleaseEvent(event)

    def handle_button_press(self, value):

        if value == '<':
            if self.received_result:
                self.display_text = self.calculator_result
            else:
                self.display_text = self.display_text[:-1]
            if self.display_text == "":
                self.display_text = "0"

        elif value == 'C':
            self.display_text = "0"

        elif value == UNDO:
            if len(self.undo) > 1:
                self.redo.append(self.undo.pop())
                self.display_text = self.undo[-1]
            self.display.setText(self.display_text)
            self.received_result = False
            return

        elif value == REDO:
            if self.redo:
                self.undo.append(self.redo.pop())
                self.display_text = self.undo[-1]
            self.display.setText(self.display_text)
            self.received_result = False
            return

        elif value in (COPY, PASTE):
            self.handle_clipboard()
            return

        elif value == ENTER:
            self.start_calculation(self.display_text)
            return

        elif value == 'Ans':
            if self.calculator_result == "":
                self.show_error(E.MathError(E.describe("4003"), code="4003", equation=self.display_text))
                return
            self.append_input(self.calculator_result)

        else:
            self.append_input(value)

        self.received_result = False
        self.push_history(self.display_text)
        self.display.setText(self.display_text)

    def append_input(self, value):
        if self.received_result:
            # An operator continues with the last result, anything else starts over
            if MathEngine.isOp(value) != -1:
                self.display_text = self.calculator_result
            else:
                self.display_text = ""
        if self.display_text == "0":
            self.display_text = ""
        self.display_text += value

    def push_history(self, text):
        if text != self.undo[-1]:
            self.undo.append(text)
            self.redo.clear()

    def handle_clipboard(self):
        if self.shift_is_held or is_shift_pressed():
            pyperclip.copy(self.display.text())
            return

        clipboard_text = QtWidgets.QApplication.clipboard().text().strip()
        if not clipboard_text:
            return

        self.append_input(clipboard_text)
        self.received_result = False
        self.push_history(self.display_text)
        self.display.setText(self.display_text)

        if self.setting_value_list["after_paste_enter"] == True:
            self.start_calculation(self.display_text)

    def start_calculation(self, problem):
        if self.received_result:
            return
        if self.thread_active:
            logger.warning("Error 4002: %s", E.describe("4002"))
            return

        self.thread_active = True
        self.update_return_button()
        self.display.setText("...")

        worker_instance = Worker(problem, config_manager.load_nesting_depth())
        worker_instance.job_finished.connect(self.calc_result)
        # Keep a reference until the result arrives
        self.worker = worker_instance
        threading.Thread(target=worker_instance.run_calc, daemon=True).start()

    def update_return_button(self):
        return_button = self.button_objects.get(ENTER)
        if not return_button:
            return

        if self.thread_active == True:
            return_button.setStyleSheet("background-color: #FF0000; color: white; font-weight: bold;")
            return_button.setText("X")
        else:
            return_button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
            return_button.setText(ENTER)

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            for text, button in self.button_objects.items():
                if text != ENTER:
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
        else:
            for text, button in self.button_objects.items():
                if text != ENTER:
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")
        self.update_return_button()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()

        # Reload so changes (like darkmode) apply immediately
        self.setting_value_list = config_manager.load_setting_value("all")
        self.update_darkmode()

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox {background-color: #121212; color: white;}
                QLabel {color: white;}
                QPushButton {background-color: #2e2e2e; color: white; border: 1px solid #444444; padding: 5px 15px;}
            """
        return ""

    def show_error(self, error_obj):
        error_box = QtWidgets.QMessageBox(self)
        error_box.setIcon(QtWidgets.QMessageBox.Critical)
        error_box.setWindowTitle("Calculation error")
        error_box.setText(f"Error {error_obj.code}: {E.describe(error_obj.code)}")
        error_box.setInformativeText(f"Details: {error_obj.message}\nEquation: {error_obj.equation}")
        error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()

    def calc_result(self, result, equation):
        self.thread_active = False
        self.update_return_button()
        self.worker = None

        if isinstance(result, E.MathError):
            logger.info("Error %s for %r: %s", result.code, equation, result.message)
            self.show_error(result)
            self.display.setText(equation)
            return

        self.calculator_result = result
        self.received_result = True

        if self.setting_value_list["show_equation"] == True:
            final_display_text = f"{equation} = {result}"
        else:
            final_display_text = result

        self.display_text = equation
        self.display.setText(final_display_text)
        self.push_history(final_display_text)


def main():
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
