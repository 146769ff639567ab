from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication, QSettings

import sys
import os

ORG_ID = "aeroanalysis"
APP_ID = "aero-analysis-studio"
ORG_DOMAIN = "aeroanalysis.local"

VISIBLE_APP_NAME = "Aero Analysis Studio"


def configure_settings() -> None:
    """Identity used by QSettings(); must run before the first QSettings() is built."""
    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)


def create_app() -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    configure_settings()

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationDisplayName(QCoreApplication.translate("App", VISIBLE_APP_NAME))
    app.setStyle("Fusion")

    return app
