"""Theme constants and stylesheet helpers for the Qt UI."""

from __future__ import annotations

from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QApplication

ACCENT_COLOR = "#FF4E45"
ACCENT_HOVER = "#FF6F68"
BACKGROUND = "#0F0F0F"
PANEL = "#1B1B1B"
SECONDARY_PANEL = "#272727"
DIVIDER = "#3A3A3A"
TEXT_PRIMARY = "#F1F1F1"
TEXT_MUTED = "#AAAAAA"
CURRENT_ROW = "#3A1F1E"

STYLE_SHEET = f"""
QWidget {{
    background-color: {BACKGROUND};
    color: {TEXT_PRIMARY};
    font-family: 'Segoe UI', 'Roboto', sans-serif;
}}
QFrame#nowPlaying {{
    background-color: {PANEL};
    border-top: 1px solid {DIVIDER};
}}
QPushButton, QToolButton {{
    background-color: transparent;
    color: {TEXT_PRIMARY};
    border: 1px solid {DIVIDER};
    border-radius: 6px;
    padding: 6px 12px;
}}
QPushButton:hover, QToolButton:hover, QPushButton:focus {{
    border-color: {ACCENT_COLOR};
}}
QPushButton:checked, QToolButton:checked, QPushButton[active="true"] {{
    background-color: {ACCENT_COLOR};
    border-color: {ACCENT_COLOR};
    color: white;
}}
QPushButton[primary="true"] {{
    background-color: {ACCENT_COLOR};
    border-color: {ACCENT_COLOR};
    color: white;
}}
QPushButton[primary="true"]:hover {{
    background-color: {ACCENT_HOVER};
    border-color: {ACCENT_HOVER};
}}
QLineEdit {{
    background-color: {SECONDARY_PANEL};
    border: 1px solid {DIVIDER};
    border-radius: 16px;
    color: {TEXT_PRIMARY};
    padding: 6px 14px;
}}
QLabel#muted {{
    color: {TEXT_MUTED};
}}
QTableView, QListWidget {{
    background-color: {PANEL};
    alternate-background-color: {SECONDARY_PANEL};
    border: none;
}}
"""


def apply_dark_theme(app: QApplication) -> None:
    app.setFont(QFont("Segoe UI", 10))
    app.setStyleSheet(STYLE_SHEET)
