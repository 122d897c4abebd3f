# ABOUTME: Object store for profile and project images kept in a bucket directory.
# ABOUTME: Creates the bucket on first use and returns public URLs for uploaded files.

import logging
import shutil
from pathlib import Path, PurePosixPath

from portfolio_cms.storage.exceptions import StorageError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"})


class ObjectStorage:
    """Service storing uploaded images under root_dir/bucket."""

    def __init__(
        self,
        root_dir: Path,
        bucket: str = "portfolio",
        public_url: str | None = None,
        max_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        """Initialize the object store.

        Args:
            root_dir: Directory holding buckets.
            bucket: Bucket name for uploads.
            public_url: Base URL the root directory is served under.
                Defaults to the root directory's file URI.
            max_bytes: Largest accepted file.
        """
        self.root_dir = root_dir
        self.bucket = bucket
        self.max_bytes = max_bytes
        self._public_url = (public_url or root_dir.resolve().as_uri()).rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self.root_dir / self.bucket

    def ensure_bucket(self) -> bool:
        """Create the bucket if it does not exist.

        Returns:
            True if the bucket was created, False if it already existed.
        """
        if self.bucket_dir.is_dir():
            return False
        self.bucket_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created storage bucket %s", self.bucket_dir)
        return True

    def upload(self, source: Path, dest: str) -> str:
        """Copy an image into the bucket, replacing any file at dest.

        Args:
            source: Local image file.
            dest: Path inside the bucket, e.g. "profile/avatar.png".

        Returns:
            Public URL of the stored file.

        Raises:
            StorageError: If the file is missing, too large, not an image,
                or dest points outside the bucket.
        """
        if not source.is_file():
            raise StorageError(f"File not found: {source}")

        key = self._normalize_key(dest)
        if PurePosixPath(key).suffix.lower() not in ALLOWED_EXTENSIONS:
            allowed = ", ".join(sorted(ext.lstrip(".") for ext in ALLOWED_EXTENSIONS))
            raise StorageError(f"Unsupported file type for {dest}; allowed: {allowed}")

        size = source.stat().st_size
        if size > self.max_bytes:
            raise StorageError(
                f"{source.name} is {size} bytes; the limit is {self.max_bytes} bytes"
            )

        self.ensure_bucket()
        target = self.bucket_dir / key
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise StorageError(f"Could not store {dest}: {e}") from e

        logger.info("Uploaded %s to %s/%s", source, self.bucket, key)
        return self.public_url(key)

    def public_url(self, dest: str) -> str:
        """Return the public URL of a file in the bucket."""
        return f"{self._public_url}/{self.bucket}/{self._normalize_key(dest)}"

    def _normalize_key(self, dest: str) -> str:
        parts = PurePosixPath(dest.replace("\\", "/")).parts
        if not parts or parts[0] == "/" or ".." in parts:
            raise StorageError(f"Invalid destination: {dest!r}")
        return "/".join(part for part in parts if part != ".")
