"""Supabase Storage access for PDF files."""

from supabase import Client

from concierge.core.errors import StorageError
from concierge.core.logging import get_logger

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_FILE_SIZE_LIMIT = 50 * 1024 * 1024


class PdfStorage:
    """One public storage bucket holding PDFs."""

    def __init__(
        self,
        supabase: Client,
        bucket: str,
        file_size_limit: int = DEFAULT_FILE_SIZE_LIMIT,
    ):
        self.supabase = supabase
        self.bucket = bucket
        self.file_size_limit = file_size_limit

    def ensure_bucket(self) -> bool:
        """
        Create the bucket if it doesn't exist.

        Returns:
            True if the bucket was created, False if it already existed

        Raises:
            StorageError: If listing or creating the bucket fails
        """
        try:
            buckets = self.supabase.storage.list_buckets()
        except Exception as e:
            raise StorageError(f"Failed to list buckets: {e}") from e

        if any(getattr(b, "name", None) == self.bucket for b in buckets):
            return False

        logger.info(f"Creating storage bucket {self.bucket}")
        try:
            self.supabase.storage.create_bucket(
                self.bucket,
                options={
                    "public": True,
                    "file_size_limit": self.file_size_limit,
                    "allowed_mime_types": [PDF_MIME_TYPE],
                },
            )
        except Exception as e:
            raise StorageError(f"Failed to create bucket {self.bucket}: {e}") from e
        return True

    def upload_pdf(self, path: str, data: bytes) -> str:
        """
        Upload (or overwrite) a PDF and return its public URL.

        Raises:
            StorageError: If the upload fails
        """
        try:
            self.supabase.storage.from_(self.bucket).upload(
                path=path,
                file=data,
                file_options={
                    "content-type": PDF_MIME_TYPE,
                    "upsert": "true",
                },
            )
        except Exception as e:
            raise StorageError(f"Failed to upload {path} to {self.bucket}: {e}") from e

        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return self.supabase.storage.from_(self.bucket).get_public_url(path)


def create_signed_url(supabase: Client, bucket: str, path: str, expires_in: int = 3600) -> str | None:
    """Signed URL for a private object, or None if signing fails."""
    try:
        response = supabase.storage.from_(bucket).create_signed_url(path, expires_in=expires_in)
    except Exception as e:
        logger.warning(f"Failed to sign {bucket}/{path}: {e}")
        return None

    # storage clients have returned both spellings
    return response.get("signedURL") or response.get("signedUrl")
