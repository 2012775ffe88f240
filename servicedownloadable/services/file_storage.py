# servicedownloadable/services/file_storage.py
import hashlib
import os
import shutil
from typing import NamedTuple

from fastapi import UploadFile


class FileDownload(NamedTuple):
    path: str
    filename: str


def file_key(filename: str) -> str:
    return hashlib.md5(filename.encode("utf-8")).hexdigest()


def file_path(uploads_path: str, filename: str) -> str:
    return os.path.normpath(os.path.join(uploads_path, file_key(filename)))


def file_exists(uploads_path: str, filename: str) -> bool:
    return os.path.isfile(file_path(uploads_path, filename))


def save_upload(uploads_path: str, upload: UploadFile) -> str:
    """Write the upload under md5(original name); returns the original name."""
    os.makedirs(uploads_path, exist_ok=True)
    destination = file_path(uploads_path, upload.filename)

    upload.file.seek(0)
    with open(destination, "wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)

    return upload.filename
