# shield_sleep/api/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shield_sleep.api.routes import sleep_routes


def create_app(config=None):
    """Build the API; an explicit config also replaces the config dependency"""
    explicit_config = config is not None
    config = config or sleep_routes.get_config()

    app = FastAPI(
        title=config.get('api.title'),
        description="API for scoring self-reported sleep metrics",
        version=config.get('api.version')
    )

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get('api.cors_origins', []),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(sleep_routes.router)

    if explicit_config:
        app.dependency_overrides[sleep_routes.get_config] = lambda: config

    @app.get("/")
    async def root():
        return {
            "message": "Welcome to the SHIELD Sleep API",
            "version": config.get('api.version'),
            "documentation": "/docs"
        }

    return app


app = create_app()


def run():
    import uvicorn

    sleep_routes.get_config().configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
