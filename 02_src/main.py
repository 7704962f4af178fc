"""Main entry point for the progress service."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from progress_service.api import create_fastapi_app, get_app
from progress_service.logging_config import setup_logging
from sim import Sim


def main():
    """Run the service."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    application = get_app()
    settings = application.settings

    # Load simulator targets this same instance
    from progress_service.api.routes import control
    control.set_sim_instance(Sim(api_url=settings.api_url))

    app = create_fastapi_app(application)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
