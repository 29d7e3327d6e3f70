"""Per-identity key pair and CSR generation.

The key factory is injected so the batch can be driven with fakes in tests;
the default draws a fresh key from ``cryptography`` for every call.

``cryptography`` refuses SHA-1 for CSR signatures, so SHA-1 requests are
assembled with asn1crypto and signed with the raw private key.
"""
from __future__ import annotations

from typing import Callable, Tuple, Union

from asn1crypto import algos, core, pem
from asn1crypto import csr as asn1_csr
from asn1crypto import keys as asn1_keys
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.x509.oid import NameOID

from .alg_registry import KeyAlgorithm, RSA_PUBLIC_EXPONENT
from ..errors import CryptographicFailure

PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]
KeyFactory = Callable[[KeyAlgorithm], PrivateKey]


def generate_private_key(algo: KeyAlgorithm) -> PrivateKey:
    if algo.is_rsa:
        return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=algo.key_size)
    return ec.generate_private_key(algo.curve())


def sha1_csr_pem(key: PrivateKey, common_name: str) -> str:
    pub_der = key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    info = asn1_csr.CertificationRequestInfo({
        "version": "v1",
        "subject": asn1_x509.Name.build({"common_name": common_name}),
        "subject_pk_info": asn1_keys.PublicKeyInfo.load(pub_der),
        "attributes": [],
    })
    tbs = info.dump()
    if isinstance(key, rsa.RSAPrivateKey):
        sig = key.sign(tbs, padding.PKCS1v15(), hashes.SHA1())
        sig_alg = algos.SignedDigestAlgorithm({"algorithm": "sha1_rsa", "parameters": core.Null()})
    else:
        # ECDSA algorithm identifiers carry no parameters
        sig = key.sign(tbs, ec.ECDSA(hashes.SHA1()))
        sig_alg = algos.SignedDigestAlgorithm({"algorithm": "sha1_ecdsa"})
    req = asn1_csr.CertificationRequest({
        "certification_request_info": info,
        "signature_algorithm": sig_alg,
        "signature": sig,
    })
    return pem.armor("CERTIFICATE REQUEST", req.dump()).decode()


class IdentityGenerator:
    def __init__(self, key_factory: KeyFactory = generate_private_key):
        self.key_factory = key_factory

    def generate(
        self, common_name: str, algo: KeyAlgorithm, hash_alg: hashes.HashAlgorithm
    ) -> Tuple[str, str]:
        """Return (CSR PEM, PKCS#8 private key PEM) for ``common_name``.

        The CSR subject carries only the CN attribute and is self-signed with
        the new key. Any failure raises CryptographicFailure naming the CN.
        """
        try:
            key = self.key_factory(algo)
            if isinstance(hash_alg, hashes.SHA1):
                csr_pem = sha1_csr_pem(key, common_name)
            else:
                subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
                csr = x509.CertificateSigningRequestBuilder().subject_name(subject).sign(key, hash_alg)
                csr_pem = csr.public_bytes(serialization.Encoding.PEM).decode()
            key_pem = key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            ).decode()
        except Exception as e:
            raise CryptographicFailure(common_name, str(e) or type(e).__name__) from e
        return csr_pem, key_pem


__all__ = ["IdentityGenerator", "generate_private_key", "sha1_csr_pem", "KeyFactory", "PrivateKey"]
