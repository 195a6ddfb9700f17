"""Console entry point: serve the API with uvicorn."""

import uvicorn

from finance_tracker.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "finance_tracker.api:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.app.debug_mode,
    )


if __name__ == "__main__":
    run()
