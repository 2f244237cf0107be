# app/core/storage_utils.py
import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin

settings = get_settings()


def _bucket():
    return supabase_admin().storage.from_(settings.STORAGE_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it is overwritten
    thanks to the 'upsert' option.

    Args:
        path: Full object path inside the bucket.
              Example: "cars/<car_id>/<uuid>.jpg"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    bucket = _bucket()
    bucket.upload(path, file_bytes, {"upsert": "true", "content-type": content_type})
    return bucket.get_public_url(path)


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path
    (relative to the bucket).
    """
    _bucket().remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/car-images/cars/c/x.jpg
        -> 'cars/c/x.jpg'

    Returns None for URLs outside the bucket (e.g. hot-linked images).
    """
    marker = f"/storage/v1/object/public/{settings.STORAGE_BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :].split("?", 1)[0]


def delete_public_url(url: str) -> bool:
    """
    Delete a file by its public URL.
    No-op (returns False) if the URL does not belong to this bucket.
    """
    path = extract_path_from_public_url(url)
    if not path:
        return False
    delete_from_storage(path)
    return True


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4, e.g. "<uuid4>.png".
    """
    return f"{uuid.uuid4()}.{ext}"
