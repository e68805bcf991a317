from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication, QSettings

import sys
import os

import pyqtgraph as pg

ORG_ID = "elevationprofile"
APP_ID = "elevation-profile"
ORG_DOMAIN = "elevationprofile.local"

VISIBLE_APP_NAME = "Elevation Profile"


def create_app(argv: list[str] | None = None) -> QApplication:
    """Create and configure the QApplication instance (reuses an existing one)."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication.instance() or QApplication(argv if argv is not None else sys.argv)

    # Set the visible, translatable display name
    visible_name = QCoreApplication.translate("App", VISIBLE_APP_NAME)
    app.setApplicationDisplayName(visible_name)

    pg.setConfigOption("background", "w")
    pg.setConfigOption("foreground", "k")

    return app
