import os
import time
import uuid
from dataclasses import dataclass

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..errors import InvalidRequest

ALLOWED_EXTENSIONS = {
    # documents
    ".pdf", ".doc", ".docx", ".ppt", ".pptx",
    # video
    ".mp4", ".avi", ".mov", ".wmv", ".webm", ".mkv", ".m4v",
}

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "video/mp4",
    "video/x-msvideo",
    "video/quicktime",
    "video/x-ms-wmv",
    "video/webm",
    "video/x-matroska",
    "video/mp2t",
}


@dataclass(frozen=True)
class StoredFile:
    url: str
    name: str
    size: int
    path: str


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def is_allowed_file(filename: str, mime_type: str) -> bool:
    # extension and declared MIME type must both be on the allow list
    return file_extension(filename) in ALLOWED_EXTENSIONS and (mime_type or "").lower() in ALLOWED_MIME_TYPES


class UploadStore:
    def __init__(self, folder: str, url_prefix: str, max_bytes: int):
        self.folder = folder
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls, config) -> "UploadStore":
        return cls(config["UPLOAD_FOLDER"], config["UPLOAD_URL_PREFIX"], config["MAX_UPLOAD_BYTES"])

    @staticmethod
    def _size_of(file: FileStorage) -> int:
        stream = file.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return size

    def _stored_name(self, original: str) -> str:
        ext = file_extension(original)
        safe = secure_filename(original)
        # secure_filename drops non-ASCII names down to little or nothing
        if not safe or file_extension(safe) != ext:
            safe = f"{uuid.uuid4().hex}{ext}"
        return f"{int(time.time() * 1000)}-{safe}"

    def save(self, file: FileStorage) -> StoredFile:
        if file is None or not file.filename:
            raise InvalidRequest("No file uploaded")

        size = self._size_of(file)
        if size > self.max_bytes:
            raise InvalidRequest(f"File size exceeds {self.max_bytes // (1024 * 1024)}MB limit")

        if not is_allowed_file(file.filename, file.mimetype):
            raise InvalidRequest(
                "Invalid file type. Allowed types: PDF, DOC, DOCX, PPT, PPTX, MP4, AVI, MOV, WMV, WEBM, MKV, M4V"
            )

        os.makedirs(self.folder, exist_ok=True)
        stored_name = self._stored_name(file.filename)
        path = os.path.join(self.folder, stored_name)
        file.save(path)

        current_app.logger.info("Stored upload %s (%s bytes)", stored_name, size)
        return StoredFile(
            url=f"{self.url_prefix}/{stored_name}",
            name=file.filename,
            size=size,
            path=path,
        )
