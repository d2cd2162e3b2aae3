"""Browser-extension shell entry point."""
from fastapi import FastAPI

from extension import pages


def create_app() -> FastAPI:
    """Build the extension app with its page routes mounted."""
    app = FastAPI(
        title="Remember Extension",
        description="Popup, setup and options pages of the Remember browser extension.",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(pages.router)
    return app


app = create_app()
