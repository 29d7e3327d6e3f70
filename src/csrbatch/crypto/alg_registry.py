"""Key-type and signature-hash registry for CSR generation.

Supported key types (token -> display name used in the export):
  - RSA_2048 -> RSA_2048
  - RSA_3072 -> RSA_3072
  - RSA_4096 -> RSA_4096
  - EC_P256  -> EC_P-256   (secp256r1)
  - EC_P384  -> EC_P-384   (secp384r1)
  - EC_P521  -> EC_P-521   (secp521r1)

Key-type tokens are matched exactly and case-sensitively.

Signature hash tokens: SHA384, SHA512 and SHA1 select their algorithm. Every
other token, including SHA256 and the "MatchIssuer" placeholder, selects
SHA-256. There is no error path for hashes.
"""

from __future__ import annotations

from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from ..errors import UnsupportedKeyType

RSA_PUBLIC_EXPONENT = 65537


class KeyAlgorithm(Enum):
    # (family, key size in bits, EC curve class or None, display name)
    RSA_2048 = ("rsa", 2048, None, "RSA_2048")
    RSA_3072 = ("rsa", 3072, None, "RSA_3072")
    RSA_4096 = ("rsa", 4096, None, "RSA_4096")
    EC_P256 = ("ec", 256, ec.SECP256R1, "EC_P-256")
    EC_P384 = ("ec", 384, ec.SECP384R1, "EC_P-384")
    EC_P521 = ("ec", 521, ec.SECP521R1, "EC_P-521")

    def __init__(self, family: str, key_size: int, curve_cls, display_name: str):
        self.family = family
        self.key_size = key_size
        self._curve_cls = curve_cls
        self.display_name = display_name

    @property
    def is_rsa(self) -> bool:
        return self.family == "rsa"

    def curve(self) -> ec.EllipticCurve:
        if self._curve_cls is None:
            raise ValueError(f"{self.name} is not an elliptic-curve key type")
        return self._curve_cls()


_HASHES = {
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
    "SHA1": hashes.SHA1,
}
_DEFAULT_HASH = "SHA256"


def resolve(key_type_token: str) -> KeyAlgorithm:
    algo = KeyAlgorithm.__members__.get(key_type_token)
    if algo is None:
        raise UnsupportedKeyType(key_type_token)
    return algo


def hash_display_name(hash_token: str) -> str:
    """Canonical name of the hash ``resolve_hash`` picks for ``hash_token`` (MatchIssuer -> SHA256)."""
    return hash_token if hash_token in _HASHES else _DEFAULT_HASH


def resolve_hash(hash_token: str) -> hashes.HashAlgorithm:
    return _HASHES[hash_display_name(hash_token)]()


__all__ = [
    "KeyAlgorithm",
    "RSA_PUBLIC_EXPONENT",
    "resolve",
    "resolve_hash",
    "hash_display_name",
]
