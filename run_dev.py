"""Run Draftpad in development mode (browser-based, no desktop window)."""

from api import create_app
from core.config import get_config
from core.services import build_services
from utils.logger import setup_logger

if __name__ == "__main__":
    config = get_config()
    logger = setup_logger(logs_dir=config.paths.logs_dir, debug=True)
    logger.info("Initializing Draftpad (dev mode)...")

    services = build_services(config)
    app = create_app(services)

    print(f"\n{'='*50}")
    print(f"  Draftpad running at: http://{config.flask.host}:{config.flask.port}")
    print(f"  Open this URL in your browser")
    print(f"{'='*50}\n")

    app.run(
        host=config.flask.host,
        port=config.flask.port,
        debug=True,
        use_reloader=False,
        threaded=True
    )
