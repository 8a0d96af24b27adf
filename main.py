"""Draftpad - Desktop draft composer entry point."""

import sys
import threading
import time
import webview

from api import create_app
from core.config import get_config
from core.exceptions import KeyDerivationError
from core.services import build_services
from utils.logger import setup_logger


def start_flask(app, config):
    """Start Flask server in background thread."""
    app.run(
        host=config.flask.host,
        port=config.flask.port,
        debug=False,
        use_reloader=False,
        threaded=True
    )


def main():
    """Main entry point for Draftpad."""
    config = get_config()
    logger = setup_logger(logs_dir=config.paths.logs_dir, debug=config.flask.debug)
    logger.info("Initializing Draftpad...")

    # Settings cannot run without the encryption key
    try:
        services = build_services(config)
    except KeyDerivationError as e:
        logger.critical(f"Cannot start: {e}")
        sys.exit(1)
    logger.info("Database and security services initialized")

    app = create_app(services)

    # Start Flask in background thread
    flask_thread = threading.Thread(target=start_flask, args=(app, config), daemon=True)
    flask_thread.start()
    logger.info(f"Local API starting on http://{config.flask.host}:{config.flask.port}")

    # Give Flask a moment to start
    time.sleep(1)

    window = webview.create_window(
        title=config.window.title,
        url=f"http://{config.flask.host}:{config.flask.port}",
        width=config.window.width,
        height=config.window.height,
        min_size=(config.window.min_width, config.window.min_height),
        resizable=True,
        text_select=True,
    )

    # Blocks until the window is closed
    webview.start(debug=config.flask.debug)
    services.close()


if __name__ == "__main__":
    main()
