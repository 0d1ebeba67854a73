from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.concurrency import run_in_threadpool

from lumina.credentials import SessionCredentialProvider
from lumina.deps import (GenerationGuard, get_client_factory,
                         get_credential_provider, get_gallery_store,
                         get_generation_guard)
from lumina.errors import (ErrorKind, GalleryStorageError, GenerationError,
                           describe_failure)
from lumina.schemas import (CredentialStatus, CredentialUpdate, GalleryEntry,
                            GenerateArtRequest, GenerateArtResponse)
from lumina.services.gallery import GalleryStore
from lumina.services.generation import (ClientFactory,
                                        build_generation_request,
                                        create_artwork)
from lumina.services.images import download_filename, entry_image_bytes

router = APIRouter()

_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.ACCESS: 403,
    ErrorKind.NO_IMAGE: 502,
    ErrorKind.UNKNOWN: 500,
}


def to_http_exception(exc: Exception) -> HTTPException:
    error = describe_failure(exc)
    return HTTPException(status_code=_STATUS_CODES[error.kind], detail=error.to_dict())


def _credential_status(provider: SessionCredentialProvider) -> CredentialStatus:
    return CredentialStatus(
        selected=bool(provider.api_key()),
        selection_requested=provider.selection_requested,
    )


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/generate", response_model=GenerateArtResponse)
async def generate_artwork(
    req: GenerateArtRequest,
    gallery: GalleryStore = Depends(get_gallery_store),
    provider: SessionCredentialProvider = Depends(get_credential_provider),
    guard: GenerationGuard = Depends(get_generation_guard),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """Generate an image and add it to the gallery."""
    if not guard.acquire():
        raise HTTPException(
            status_code=409, detail="A generation is already in progress."
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
        raise HTTPException(status_code=500, detail=str(e)) from e
    except Exception as e:
        raise to_http_exception(e) from e
    finally:
        guard.release()

    return GenerateArtResponse(entry=entry, text=result.text)


@router.get("/gallery", response_model=list[GalleryEntry])
async def list_gallery(gallery: GalleryStore = Depends(get_gallery_store)):
    return gallery.entries()


@router.delete("/gallery/{entry_id}", status_code=204)
async def delete_entry(entry_id: str, gallery: GalleryStore = Depends(get_gallery_store)):
    try:
        deleted = await run_in_threadpool(gallery.delete, entry_id)
    except GalleryStorageError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Entry {entry_id} not found")
    return Response(status_code=204)


@router.delete("/gallery", status_code=204)
async def clear_gallery(
    confirm: bool = False, gallery: GalleryStore = Depends(get_gallery_store)
):
    """Remove every entry. Requires confirm=true."""
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Clearing the entire gallery requires confirm=true.",
        )
    try:
        await run_in_threadpool(gallery.clear)
    except GalleryStorageError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return Response(status_code=204)


@router.get("/gallery/{entry_id}/download")
async def download_entry(entry_id: str, gallery: GalleryStore = Depends(get_gallery_store)):
    entry = gallery.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry {entry_id} not found")

    try:
        img_bytes, mime_type = entry_image_bytes(entry)
    except GenerationError as e:
        raise to_http_exception(e) from e
    return Response(
        content=img_bytes,
        media_type=mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{download_filename(entry, mime_type)}"'
        },
    )


@router.get("/credential", response_model=CredentialStatus)
async def get_credential(
    provider: SessionCredentialProvider = Depends(get_credential_provider),
):
    return _credential_status(provider)


@router.put("/credential", response_model=CredentialStatus)
async def update_credential(
    update: CredentialUpdate,
    provider: SessionCredentialProvider = Depends(get_credential_provider),
):
    provider.select(update.api_key)
    return _credential_status(provider)


@router.post("/credential/select", response_model=CredentialStatus)
async def open_credential_selector(
    provider: SessionCredentialProvider = Depends(get_credential_provider),
):
    """Ask the client to show its API key picker again."""
    await provider.request_selection()
    return _credential_status(provider)


def get_router():
    return router
