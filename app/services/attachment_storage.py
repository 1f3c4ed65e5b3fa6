import logging
import re
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional
from urllib.parse import urlparse

from fastapi import UploadFile

from app.core.config import settings
from app.core.constants import ElementTypeEnum
from app.core.exceptions import InternalError, InvalidRequestError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


@dataclass
class StoredAttachment:
    url: str
    type: ElementTypeEnum
    path: Path


class AttachmentStorage:
    """Local filesystem storage for uploaded images and audio clips."""

    def __init__(self, base_dir: Optional[str] = None, url_prefix: Optional[str] = None):
        self._base_dir = base_dir
        self._url_prefix = url_prefix

    @property
    def base_dir(self) -> Path:
        return Path(self._base_dir or settings.UPLOAD_DIR)

    @property
    def url_prefix(self) -> str:
        return (self._url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    def build_path_dir(self, exam_name: str, part_name: str) -> str:
        return f"{_UNSAFE_CHARS.sub('_', exam_name)}/{_UNSAFE_CHARS.sub('_', part_name)}"

    def classify_upload(self, content_type: Optional[str], filename: Optional[str] = None) -> ElementTypeEnum:
        if content_type:
            return ElementTypeEnum.IMAGE if content_type.startswith("image") else ElementTypeEnum.AUDIO
        return self.classify_url(filename or "")

    def classify_url(self, url: str) -> ElementTypeEnum:
        path = urlparse(url).path.lower() or url.lower()
        if any(path.endswith(ext.lower()) for ext in settings.AUDIO_EXTENSIONS):
            return ElementTypeEnum.AUDIO
        return ElementTypeEnum.IMAGE

    def validate_upload(self, upload: UploadFile) -> None:
        extension = PurePosixPath(upload.filename or "").suffix.lower().lstrip(".")
        if extension not in settings.ALLOWED_UPLOAD_EXTENSIONS:
            raise InvalidRequestError("Only images and audio files are allowed!")

    def ensure_dir(self, path_dir: str) -> Path:
        target = self.base_dir / path_dir
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating upload directory {target}: {e}")
            raise InternalError(f"Failed to setup upload directory: {e}", cause=e)
        return target

    def _unique_filename(self, original: Optional[str]) -> str:
        name = _UNSAFE_FILENAME_CHARS.sub("_", PurePosixPath(original or "upload").name)
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{name}"

    def save_upload(self, upload: UploadFile, path_dir: str) -> StoredAttachment:
        self.validate_upload(upload)
        target_dir = self.ensure_dir(path_dir)
        filename = self._unique_filename(upload.filename)
        target = target_dir / filename
        try:
            upload.file.seek(0)
            with open(target, "wb") as out:
                shutil.copyfileobj(upload.file, out)
        except OSError as e:
            logger.error(f"Error writing upload {target}: {e}")
            raise InternalError(f"Failed to store upload: {e}", cause=e)

        return StoredAttachment(
            url=f"{self.url_prefix}/{path_dir}/{filename}",
            type=self.classify_upload(upload.content_type, upload.filename),
            path=target,
        )

    def save_uploads(self, uploads: Iterable[UploadFile], path_dir: str) -> list:
        stored = []
        try:
            for upload in uploads:
                stored.append(self.save_upload(upload, path_dir))
        except Exception:
            self.discard(stored)
            raise
        return stored

    def path_for_url(self, url: str) -> Path:
        relative = url
        if url.startswith(self.url_prefix + "/"):
            relative = url[len(self.url_prefix) + 1:]
        return self.base_dir / relative.lstrip("/")

    def delete_file(self, url: str) -> bool:
        """Best-effort removal; never raises."""
        path = self.path_for_url(url)
        try:
            path.unlink()
            logger.info(f"Deleted attachment file {path}")
            return True
        except OSError as e:
            logger.warning(f"Error deleting file {path}: {e}")
            return False

    def discard(self, stored: Iterable[StoredAttachment]) -> None:
        for attachment in stored:
            try:
                attachment.path.unlink()
            except OSError as e:
                logger.warning(f"Error discarding file {attachment.path}: {e}")


attachment_storage = AttachmentStorage()
