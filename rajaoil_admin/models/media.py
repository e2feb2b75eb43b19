from pydantic import BaseModel
from typing import List, Optional
from enum import Enum


class TransferStatus(str, Enum):
    UPLOADING = "uploading"
    DELETING = "deleting"
    COMPLETED = "completed"
    ERROR = "error"


class UploadProgress(BaseModel):
    fileName: str
    progress: float = 0
    status: TransferStatus = TransferStatus.UPLOADING
    downloadURL: Optional[str] = None
    error: Optional[str] = None


class DeleteProgress(BaseModel):
    imageUrl: str
    status: TransferStatus = TransferStatus.DELETING
    error: Optional[str] = None


class UploadedFile(BaseModel):
    """A file read from the request, ready to be pushed to storage."""
    fileName: str
    content: bytes
    contentType: Optional[str] = None


class MediaLibraryState(BaseModel):
    images: List[str] = []
    homepageSlider: List[str] = []


class DeleteImagesRequest(BaseModel):
    urls: List[str]


class SliderAddRequest(BaseModel):
    url: str


class SliderReorderRequest(BaseModel):
    source: int
    destination: int
