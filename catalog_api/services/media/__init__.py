"""
Media services: staged uploads and the permanent product image store.
"""

from .uploads import UploadedFile, UploadStager, get_upload_stager
from .image_store import ImageStore, get_image_store

__all__ = [
    "UploadedFile",
    "UploadStager",
    "get_upload_stager",
    "ImageStore",
    "get_image_store",
]
