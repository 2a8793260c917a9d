import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tubetutor.api.dependencies import Services, build_services
from tubetutor.api.responses import service_error_handler
from tubetutor.api.routes.chat import router as chat_router
from tubetutor.api.routes.transcripts import router as transcripts_router
from tubetutor.api.routes.videos import router as videos_router
from tubetutor.config import settings
from tubetutor.errors import TranscriptServiceError


def create_app(services: Services | None = None) -> FastAPI:
    """Build the API around one set of services (store, gateway, chat adapter)."""
    app = FastAPI(
        title="TubeTutor API",
        description="Transcript cache and Gemini-powered Q&A for YouTube lessons",
        version="0.1.0",
    )
    app.state.services = services or build_services()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
        ],
        allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TranscriptServiceError, service_error_handler)

    app.include_router(transcripts_router)
    app.include_router(chat_router)
    app.include_router(videos_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
