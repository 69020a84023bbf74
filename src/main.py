"""
FastAPI Production Application

Main entry point for the Storefront Analytics API.
"""

from src.config import get_settings
from src.serving.api import create_api_app

settings = get_settings()

app = create_api_app()


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
