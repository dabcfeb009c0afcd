from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import settings
from settings import logger
from apis import boards
from apis.schemas.boards import HealthResponse

app = FastAPI(
    title="Sprint Board API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list(),
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(boards.router)


@app.get("/api/health", response_model=HealthResponse)
async def root() -> HealthResponse:
    """API health check."""
    return HealthResponse(message="Sprint Board API is running")


# Serve the built client in production; in development it runs on its own dev server
if settings.SERVER_ENV == "production":
    client_dist_path = Path(settings.CLIENT_DIST_PATH).resolve()
    if client_dist_path.is_dir():
        app.mount("/", StaticFiles(directory=str(client_dist_path), html=True), name="client")
    else:
        logger.warning("Client build not found, static files not served", extra={
            "client_dist_path": str(client_dist_path)
        })
else:
    logger.debug("Development mode: client served separately")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.SERVER_PORT)
