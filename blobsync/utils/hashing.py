# blobsync Hashing Utilities
# Content hashing for change detection

import base64
import hashlib
from pathlib import Path


def encode_digest(digest: bytes, *, encoding: str = "base64") -> str:
    """
    Encode a raw digest as text.

    Args:
        digest: Raw digest bytes.
        encoding: "base64" (Azure Content-MD5 format) or "hex".

    Returns:
        Encoded digest string.
    """
    if encoding == "base64":
        return base64.b64encode(digest).decode("ascii")
    if encoding == "hex":
        return digest.hex()
    raise ValueError(f"Unknown digest encoding: {encoding}")


def content_hash(content: str | bytes, *, algorithm: str = "md5", encoding: str = "base64") -> str:
    """
    Calculate hash of content.

    Args:
        content: String or bytes content.
        algorithm: Hash algorithm (default md5).
        encoding: Digest encoding (default base64).

    Returns:
        Encoded digest of hash.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    hasher = hashlib.new(algorithm)
    hasher.update(content)
    return encode_digest(hasher.digest(), encoding=encoding)


def file_hash(
    path: Path,
    *,
    algorithm: str = "md5",
    encoding: str = "base64",
    chunk_size: int = 1024 * 1024,
) -> str:
    """
    Calculate hash of file content by streaming it in chunks.

    Args:
        path: Path to file.
        algorithm: Hash algorithm (default md5).
        encoding: Digest encoding (default base64).
        chunk_size: Chunk size for reading large files.

    Returns:
        Encoded digest of hash.

    Raises:
        FileNotFoundError: If the file disappeared before it could be read.
    """
    hasher = hashlib.new(algorithm)

    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)

    return encode_digest(hasher.digest(), encoding=encoding)
