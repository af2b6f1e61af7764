from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel
from FrontEnd.styles.design_tokens import COLORS

class FooterSummary(QWidget):
    """Bottom strip with 'time since last' texts, one label per tool."""
    def __init__(self, keys):
        super().__init__()
        layout = QHBoxLayout()
        layout.addStretch()
        self.labels = {}
        for key in keys:
            label = QLabel("")
            label.setObjectName("SummaryLabel")
            layout.addWidget(label)
            self.labels[key] = label
        self.setLayout(layout)
        self.setStyleSheet(f"background: {COLORS['footer_bg']}; border-radius: 16px; padding: 8px 24px; margin: 0 32px 16px 0; color: {COLORS['footer_text']}; font-size: 14px; font-weight: 500;")
    def set_text(self, key, text):
        self.labels[key].setText(text)
