import hashlib


def sha256_hex(content: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of *content*.

    Used as the lookup key for the reputation service.
    """
    return hashlib.sha256(content).hexdigest()
