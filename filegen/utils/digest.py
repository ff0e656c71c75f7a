from cryptography.hazmat.primitives import hashes

from filegen.constants import BUFFER_SIZE


def md5_file(path: str, chunk_size: int = BUFFER_SIZE) -> str:
    """Hex MD5 of a file, read in chunks."""
    digest = hashes.Hash(hashes.MD5())
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.finalize().hex()
