import sys

from PyQt5.QtWidgets import QApplication

from . import __appname__
from .ui import MainWindow


def main():
    """
    Run the reader application.
    An optional file path may be passed as the first command-line argument.
    """
    app = QApplication(sys.argv)
    app.setApplicationName(__appname__)

    file_path = None
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    window = MainWindow(file_path)
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
