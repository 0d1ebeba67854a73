import asyncio
import contextlib
import itertools

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from loguru import logger

from lumina.config import LOADING_MESSAGE_INTERVAL
from lumina.credentials import SessionCredentialProvider
from lumina.deps import (GenerationGuard, get_client_factory,
                         get_credential_provider, get_gallery_store,
                         get_generation_guard)
from lumina.errors import GalleryStorageError, describe_failure
from lumina.schemas import GenerateArtRequest, GenerateArtResponse
from lumina.services.gallery import GalleryStore
from lumina.services.generation import (ClientFactory,
                                        build_generation_request,
                                        create_artwork)

router = APIRouter()

LOADING_MESSAGES = [
    "Mixing the digital pigments...",
    "Sketching your imagination...",
    "Applying deep learning brushstrokes...",
    "Harmonizing color palettes...",
    "Capturing the essence of light...",
    "Refining artistic textures...",
    "Waiting for the AI muse...",
]


async def send_loading_messages(websocket: WebSocket, interval: float):
    for message in itertools.cycle(LOADING_MESSAGES):
        await websocket.send_json({"type": "status", "message": message})
        await asyncio.sleep(interval)


@router.websocket("/ws/generate")
async def generate_websocket(
    websocket: WebSocket,
    gallery: GalleryStore = Depends(get_gallery_store),
    provider: SessionCredentialProvider = Depends(get_credential_provider),
    guard: GenerationGuard = Depends(get_generation_guard),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """
    Receive one generation request, stream loading messages while the
    model works, then send the gallery entry or the error and close.
    """
    await websocket.accept()
    try:
        try:
            req = GenerateArtRequest.model_validate(await websocket.receive_json())
        except ValueError as e:
            await websocket.send_json({"type": "error", "error": {"kind": "validation", "message": str(e)}})
            return

        if not guard.acquire():
            await websocket.send_json(
                {"type": "error", "error": {"kind": "busy", "message": "A generation is already in progress."}}
            )
            return

        ticker = asyncio.create_task(
            send_loading_messages(websocket, LOADING_MESSAGE_INTERVAL)
        )
        try:
            request = build_generation_request(
                req.prompt,
                req.tier,
                req.aspect_ratio,
                req.resolution,
                req.reference_image,
                req.reference_mime_type,
            )
            entry, result = await create_artwork(request, gallery, provider, client_factory)
        except GalleryStorageError as e:
            message = {"type": "error", "error": {"kind": "storage", "message": str(e)}}
        except Exception as e:
            message = {"type": "error", "error": describe_failure(e).to_dict()}
        else:
            response = GenerateArtResponse(entry=entry, text=result.text)
            message = {"type": "result", **response.model_dump(mode="json")}
        finally:
            guard.release()
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
                await ticker

        await websocket.send_json(message)

    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
    finally:
        try:
            await websocket.close()
        except RuntimeError:
            pass


def get_router():
    return router
