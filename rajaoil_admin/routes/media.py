from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response
from typing import List, Optional
import logging

from rajaoil_admin.dependencies import get_media_library, get_media_storage
from rajaoil_admin.errors import DuplicateEntryError, InvalidValueError, MediaNotFoundError
from rajaoil_admin.models.media import (
    DeleteImagesRequest,
    SliderAddRequest,
    SliderReorderRequest,
    TransferStatus,
    UploadedFile,
)
from rajaoil_admin.repositories.media_repo import MediaLibrary
from rajaoil_admin.storage import MediaStorage

logger = logging.getLogger(__name__)
router = APIRouter()
public_router = APIRouter()


@router.get("")
def get_media_library_state(library: MediaLibrary = Depends(get_media_library)):
    try:
        state = library.get_library()
    except Exception as e:
        logger.error(f"Error fetching media library: {e}")
        raise HTTPException(status_code=500, detail="Failed to load data")
    return {
        "success": True,
        "images": state.images,
        "homepageSlider": state.homepageSlider,
        "files": [{"url": url, "name": library.display_name(url)} for url in state.images],
    }


async def _read_capped(upload: UploadFile, max_bytes: Optional[int]) -> bytes:
    """
    Reads at most one byte past the size limit: enough for the library to
    reject the file as too large without holding all of it in memory.
    """
    if max_bytes is None:
        return await upload.read()
    return await upload.read(max_bytes + 1)


@router.post("/images")
async def upload_images(
    files: List[UploadFile] = File(...),
    library: MediaLibrary = Depends(get_media_library),
):
    """
    Uploads several images at once. The response lists one progress entry per file;
    the request succeeds even when some files failed.
    """
    uploads = []
    for upload in files:
        uploads.append(UploadedFile(
            fileName=upload.filename or "image",
            content=await _read_capped(upload, library.max_upload_bytes),
            contentType=upload.content_type,
        ))

    try:
        progress, uploaded = await library.upload_images(uploads)
    except Exception as e:
        logger.error(f"Error uploading images: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload images")

    completed = [p for p in progress if p.status == TransferStatus.COMPLETED]
    return {
        "success": True,
        "uploaded": [p.model_dump(mode="json") for p in progress],
        "urls": uploaded,
        "message": f"Upload complete! {len(completed)} of {len(progress)} image(s) uploaded successfully.",
    }


@router.post("/images/delete")
def delete_images(payload: DeleteImagesRequest, library: MediaLibrary = Depends(get_media_library)):
    if not payload.urls:
        raise HTTPException(status_code=400, detail="No images selected")
    try:
        progress = library.delete_images(payload.urls)
    except Exception as e:
        logger.error(f"Error deleting images: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete images")

    completed = [p for p in progress if p.status == TransferStatus.COMPLETED]
    return {
        "success": True,
        "deleted": [p.model_dump(mode="json") for p in progress],
        "message": f"Delete complete! {len(completed)} of {len(progress)} image(s) deleted successfully.",
    }


@router.post("/slider", status_code=201)
def add_to_slider(payload: SliderAddRequest, library: MediaLibrary = Depends(get_media_library)):
    try:
        slider = library.add_to_slider(payload.url)
    except DuplicateEntryError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding image to slider: {e}")
        raise HTTPException(status_code=500, detail="Failed to add image to slider")
    return {"success": True, "homepageSlider": slider}


@router.put("/slider/order")
def reorder_slider(payload: SliderReorderRequest, library: MediaLibrary = Depends(get_media_library)):
    try:
        slider = library.reorder_slider(payload.source, payload.destination)
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error reordering slider: {e}")
        raise HTTPException(status_code=500, detail="Failed to reorder slider")
    return {"success": True, "homepageSlider": slider}


@router.delete("/slider/{index}")
def remove_from_slider(index: int, library: MediaLibrary = Depends(get_media_library)):
    try:
        slider = library.remove_from_slider(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Slide not found")
    except Exception as e:
        logger.error(f"Error removing image from slider: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove image from slider")
    return {"success": True, "homepageSlider": slider}


@public_router.get("/{path:path}")
def download_media(path: str, storage: MediaStorage = Depends(get_media_storage)):
    """Serves a stored image. Public: the storefront displays these URLs."""
    try:
        content, content_type = storage.open(path)
    except MediaNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")
    except Exception as e:
        logger.error(f"Error reading {path} from storage: {e}")
        raise HTTPException(status_code=500, detail="Failed to read file")
    return Response(
        content=content,
        media_type=content_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
