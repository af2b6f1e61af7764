import os, sys
import logging
from PySide6.QtWidgets import QApplication
from FrontEnd.ui_main import MainWindow

def main():
    logging.basicConfig(
        level=os.environ.get("NANAPP_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    win = MainWindow()
    win.show()
    # the footer refresh lives exactly as long as the event loop
    with win.summary_ticker:
        code = app.exec()
    sys.exit(code)

if __name__ == "__main__":
    main()
