from typing import Optional

# (signature, offset, type)
_SIGNATURES = [
    (b"\xff\xd8\xff", 0, "jpg"),
    (b"\x89PNG\r\n\x1a\n", 0, "png"),
    (b"GIF87a", 0, "gif"),
    (b"GIF89a", 0, "gif"),
    (b"BM", 0, "bmp"),
    (b"II*\x00", 0, "tiff"),
    (b"MM\x00*", 0, "tiff"),
]


def detect_image_type(content: bytes) -> Optional[str]:
    """Guess the image type from the leading bytes, None when it is not an image."""
    if not content:
        return None
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "webp"
    for signature, offset, image_type in _SIGNATURES:
        if content[offset:offset + len(signature)] == signature:
            return image_type
    return None
