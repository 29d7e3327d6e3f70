"""Re-read an exported CSV and check every CSR against its private key."""
from __future__ import annotations

import csv
from typing import Any, Dict, List

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.x509.oid import NameOID

from ..errors import FileIoFailure


def _public_der(key) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def verify_row(row: Dict[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "subject": row.get("subject"),
        "key_pair_type": row.get("keyPairType"),
        "common_name": None,
        "sign_hash_alg": None,
        "signature_valid": False,
        "key_matches": False,
    }
    try:
        csr = x509.load_pem_x509_csr((row.get("csr") or "").encode())
    except ValueError as e:
        out["error"] = f"bad csr: {e}"
        return out
    cns = csr.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    out["common_name"] = cns[0].value if cns else None
    out["sign_hash_alg"] = csr.signature_hash_algorithm.name if csr.signature_hash_algorithm else None
    out["signature_valid"] = csr.is_signature_valid
    try:
        key = serialization.load_pem_private_key((row.get("privateKey") or "").encode(), password=None)
    except (ValueError, TypeError) as e:
        out["error"] = f"bad private key: {e}"
        return out
    out["key_matches"] = _public_der(key.public_key()) == _public_der(csr.public_key())
    return out


def verify_export(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
    except OSError as e:
        raise FileIoFailure(path, e.strerror or str(e)) from e
    return [verify_row(r) for r in rows]


def all_ok(report: List[Dict[str, Any]]) -> bool:
    return bool(report) and all(r["signature_valid"] and r["key_matches"] for r in report)


__all__ = ["verify_export", "verify_row", "all_ok"]
