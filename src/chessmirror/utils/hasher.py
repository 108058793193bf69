import hashlib


class Hasher:
    """Hasher provides static methods for generating SHA256 hashes."""

    @staticmethod
    def hash_string(input_string: str) -> str:
        """Returns a SHA256 hash of the input string."""

        return hashlib.sha256(input_string.encode("utf-8")).hexdigest()
