from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import lumina.routers.api as images_router
import lumina.routers.websocket as websocket_router
from lumina.config import settings
from lumina.deps import lifespan
from lumina.logger import setup_logger


def create_app() -> FastAPI:

    setup_logger()

    app = FastAPI(title="LuminaArt Image Generation API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(images_router.get_router(), prefix="/lumina/api")
    app.include_router(websocket_router.get_router(), prefix="/lumina/api")
    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
