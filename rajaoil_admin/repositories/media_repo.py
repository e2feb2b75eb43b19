"""
Media library: uploaded images and the homepage slider.

Both lists live on the configuration document. Binary files go to the
object storage given at construction time.
"""

from typing import List, Optional, Tuple
from urllib.parse import unquote, urlsplit
import asyncio
import logging
import re

from starlette.concurrency import run_in_threadpool

from rajaoil_admin.config import ROOT_COLLECTION, CONFIG_DOCUMENT_ID
from rajaoil_admin.errors import DuplicateEntryError, InvalidValueError, MediaNotFoundError
from rajaoil_admin.models.media import (
    DeleteProgress,
    MediaLibraryState,
    TransferStatus,
    UploadedFile,
    UploadProgress,
)
from rajaoil_admin.models.site_config import SiteConfig
from rajaoil_admin.storage import MediaStorage
from rajaoil_admin.utils.lists import move_item, remove_at

logger = logging.getLogger(__name__)

UPLOAD_PREFIX_RE = re.compile(r"^\d+_[a-z0-9]+_", re.IGNORECASE)


class MediaLibrary:
    """Media Accessor"""

    def __init__(self, database, storage: MediaStorage, max_upload_bytes: Optional[int] = None):
        self.collection = database[ROOT_COLLECTION]
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes

    def get_library(self) -> MediaLibraryState:
        config = SiteConfig.from_document(self.collection.find_one({"_id": CONFIG_DOCUMENT_ID}))
        return MediaLibraryState(images=config.images, homepageSlider=config.homepageSlider)

    def display_name(self, url: str) -> str:
        """'.../rajaoil/1718000000000_k3j9sd_sunflower.jpg' -> 'sunflower.jpg'"""
        path = self.storage.path_from_url(url) or urlsplit(unquote(url or "")).path
        if not path:
            return "Unknown file"
        file_name = path.rstrip("/").split("/")[-1]
        return UPLOAD_PREFIX_RE.sub("", file_name) or "Unknown file"

    # ---------- Images ----------

    async def upload_images(self, files: List[UploadedFile]) -> Tuple[List[UploadProgress], List[str]]:
        """
        Uploads every file concurrently, each with its own progress entry.
        A failed file never cancels the others. Once all uploads have settled,
        the URLs of the successful ones are appended to the image list in one write.

        Returns:
            (progress entries in input order, URLs appended to the library)
        """
        progress = [UploadProgress(fileName=f.fileName) for f in files]

        async def upload_one(index: int, upload: UploadedFile) -> Optional[str]:
            problem = self._check_upload(upload)
            if problem:
                progress[index] = progress[index].model_copy(
                    update={"status": TransferStatus.ERROR, "progress": 0, "error": problem}
                )
                return None
            path = self.storage.build_path(upload.fileName)
            try:
                url = await run_in_threadpool(self.storage.upload, path, upload.content, upload.contentType)
            except Exception as e:
                logger.error(f"❌ Error uploading {upload.fileName}: {e}")
                progress[index] = progress[index].model_copy(
                    update={"status": TransferStatus.ERROR, "progress": 0, "error": "Upload failed"}
                )
                return None
            progress[index] = progress[index].model_copy(
                update={"status": TransferStatus.COMPLETED, "progress": 100, "downloadURL": url}
            )
            return url

        results = await asyncio.gather(*(upload_one(i, f) for i, f in enumerate(files)))
        uploaded = [url for url in results if url]

        if uploaded:
            await run_in_threadpool(
                self.collection.update_one,
                {"_id": CONFIG_DOCUMENT_ID},
                {"$push": {"images": {"$each": uploaded}}},
                upsert=True,
            )
        logger.info(f"Upload complete: {len(uploaded)} of {len(files)} image(s) uploaded")
        return progress, uploaded

    def _check_upload(self, upload: UploadedFile) -> Optional[str]:
        if not upload.content:
            return "Empty file"
        if upload.contentType and not upload.contentType.startswith("image/"):
            return "Only image files are allowed"
        if self.max_upload_bytes is not None and len(upload.content) > self.max_upload_bytes:
            return "File too large"
        return None

    def delete_images(self, urls: List[str]) -> List[DeleteProgress]:
        """
        Deletes images one by one, tracking each outcome.
        A file already missing from storage counts as deleted. The image list is
        rewritten once at the end without the deleted entries; failed ones stay
        listed so the delete can be retried.
        """
        images = self.get_library().images
        progress = []
        removed = set()

        for url in urls:
            entry = DeleteProgress(imageUrl=url)
            if url not in images:
                progress.append(entry.model_copy(update={"status": TransferStatus.ERROR, "error": "Image not found"}))
                continue
            path = self.storage.path_from_url(url)
            try:
                if path:
                    self.storage.delete(path)
            except MediaNotFoundError:
                logger.warning(f"{path} was already missing from storage")
            except Exception as e:
                logger.error(f"❌ Error deleting {url}: {e}")
                progress.append(entry.model_copy(update={"status": TransferStatus.ERROR, "error": "Delete failed"}))
                continue
            removed.add(url)
            progress.append(entry.model_copy(update={"status": TransferStatus.COMPLETED}))

        if removed:
            remaining = [image for image in images if image not in removed]
            self.collection.update_one({"_id": CONFIG_DOCUMENT_ID}, {"$set": {"images": remaining}}, upsert=True)
        logger.info(f"Delete complete: {len(removed)} of {len(urls)} image(s) deleted")
        return progress

    # ---------- Homepage slider ----------

    def add_to_slider(self, url: str) -> List[str]:
        """
        Raises:
            InvalidValueError: empty URL
            DuplicateEntryError: image already in the slider
        """
        url = (url or "").strip()
        if not url:
            raise InvalidValueError("Image URL is required")
        slider = self.get_library().homepageSlider
        if url in slider:
            raise DuplicateEntryError("This image is already in the homepage slider")
        return self._write_slider(slider + [url])

    def remove_from_slider(self, index: int) -> List[str]:
        """
        Raises:
            IndexError: no slide at `index`
        """
        slider = self.get_library().homepageSlider
        return self._write_slider(remove_at(slider, index))

    def reorder_slider(self, source: int, destination: int) -> List[str]:
        """
        Moves one slide and persists the whole new order (last write wins).

        Raises:
            InvalidValueError: an index is out of range
        """
        slider = self.get_library().homepageSlider
        try:
            reordered = move_item(slider, source, destination)
        except IndexError as e:
            raise InvalidValueError(str(e))
        if reordered == slider:
            return slider
        return self._write_slider(reordered)

    def _write_slider(self, slider: List[str]) -> List[str]:
        self.collection.update_one({"_id": CONFIG_DOCUMENT_ID}, {"$set": {"homepageSlider": slider}}, upsert=True)
        return slider
