from typing import Set, Tuple
import filetype

# Allow-list des photos produit
ALLOWED_IMAGE_MIME: Set[str] = {"image/jpeg", "image/png", "image/webp", "image/gif", "image/avif"}


def detect_mime(file_bytes: bytes) -> str:
    """Détecte le type réel via 'filetype' (l'extension du nom n'est pas fiable)."""
    kind = filetype.guess(file_bytes)
    return kind.mime if kind else "application/octet-stream"


def validate_image(file_bytes: bytes, *, max_mb: int) -> Tuple[str, int]:
    """
    Retourne (real_mime, size_bytes).
    Lève ValueError avec un message destiné au formulaire si invalide.
    """
    size = len(file_bytes)
    mime = detect_mime(file_bytes) if size else "application/octet-stream"
    if mime not in ALLOWED_IMAGE_MIME:
        raise ValueError("The photo field must be an image.")
    if size > max_mb * 1024 * 1024:
        raise ValueError(f"The photo field must not be greater than {max_mb} megabytes.")
    return mime, size
