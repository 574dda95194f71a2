"""
➡️ But : Abstraire le stockage des fichiers uploadés (photos produit).

Deux implémentations interchangeables :
- LocalFileStore : disque local (dev, tests)
- S3FileStore : bucket S3/MinIO via boto3

Les clés sont des chemins relatifs, ex : "products/sample.jpg".
"""

import io
import logging
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Protocol

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

PRODUCTS_PREFIX = "products"


def product_photo_key(filename: str) -> str:
    """Clé de stockage d'une photo : products/<nom d'origine>, sans composante de chemin."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    if not name or name in {".", ".."}:
        raise ValueError("The photo field must be a file.")
    return f"{PRODUCTS_PREFIX}/{name}"


def make_s3_client():
    """Client S3 vers MinIO (adressage path-style, signature v4)."""
    endpoint = str(settings.S3_ENDPOINT)
    return boto3.client(
        "s3",
        endpoint_url=endpoint,
        region_name=settings.S3_REGION,
        aws_access_key_id=settings.S3_KEY,
        aws_secret_access_key=settings.S3_SECRET,
        config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        use_ssl=endpoint.startswith("https"),
    )


class FileStore(Protocol):
    def put(self, key: str, data: bytes, *, content_type: Optional[str] = None) -> str: ...
    def exists(self, key: str) -> bool: ...
    def delete(self, key: str) -> None: ...


class LocalFileStore:
    """Stockage sur disque sous `root`. Un fichier existant est écrasé."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path(self, key: str) -> Path:
        return self.root / PurePosixPath(key)

    def put(self, key: str, data: bytes, *, content_type: Optional[str] = None) -> str:
        target = self.path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Fichier écrit: %s (%d octets)", target, len(data))
        return key

    def exists(self, key: str) -> bool:
        return self.path(key).is_file()

    def delete(self, key: str) -> None:
        self.path(key).unlink(missing_ok=True)


class S3FileStore:
    """Stockage dans un bucket S3/MinIO. Même contrat que LocalFileStore."""

    def __init__(self, *, bucket: str, client_factory: Callable[[], object] = make_s3_client):
        self.bucket = bucket
        self._client_factory = client_factory

    def put(self, key: str, data: bytes, *, content_type: Optional[str] = None) -> str:
        s3 = self._client_factory()
        extra = {"ContentType": content_type} if content_type else {}
        s3.upload_fileobj(Fileobj=io.BytesIO(data), Bucket=self.bucket, Key=key, ExtraArgs=extra)
        logger.debug("Objet envoyé: s3://%s/%s", self.bucket, key)
        return key

    def exists(self, key: str) -> bool:
        s3 = self._client_factory()
        try:
            s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in {"404", "NoSuchKey", "NotFound"}:
                return False
            raise
        return True

    def delete(self, key: str) -> None:
        s3 = self._client_factory()
        s3.delete_object(Bucket=self.bucket, Key=key)


def make_file_store() -> FileStore:
    """Construit le store selon settings.STORAGE_DRIVER."""
    if settings.STORAGE_DRIVER == "s3":
        return S3FileStore(bucket=settings.S3_BUCKET)
    if settings.STORAGE_DRIVER == "local":
        return LocalFileStore(settings.STORAGE_ROOT)
    raise ValueError(f"STORAGE_DRIVER inconnu: {settings.STORAGE_DRIVER}")
