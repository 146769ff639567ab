"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Reads the settings and configures logging.
2. Instantiates the text service and the SessionController (which owns the
   SessionState).
3. Passes the controller into the Main Window (View).
"""
import logging
import sys

from aeroanalysis.app.application import create_app
from aeroanalysis.config import load_settings
from aeroanalysis.controller.session import SessionController
from aeroanalysis.controller.text_service import OpenAITextGenerator
from aeroanalysis.logging_config import setup_logging
from aeroanalysis.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    # 1. Create the Qt Application (also sets up the QSettings identity)
    app = create_app()

    # 2. Settings + Logging
    settings = load_settings()
    setup_logging(level=settings.log_level)
    if not settings.api_key:
        logger.warning("No OpenAI API key configured; analysis generation will fail until one is set.")

    # 3. Controller with the real text service
    generator = OpenAITextGenerator(api_key=settings.api_key, model=settings.model)
    controller = SessionController(generator)

    # 4. Main Window
    window = MainWindow(controller)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
