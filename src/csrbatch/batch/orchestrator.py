"""Batch driver: range -> identities -> CSV.

``generate_csr_batch`` is the only call a host needs. It never raises for
batch failures; the error text comes back in a failed GenerateResult.
"""
from __future__ import annotations

from typing import List, Optional

from .export import RecordExporter
from .model import GenerateResult, GenerationRequest, Identity
from ..crypto.alg_registry import hash_display_name, resolve, resolve_hash
from ..crypto.identity import IdentityGenerator
from ..errors import CSRBatchError, EmptyExpandedRange
from ..names.cn_range import expand
from ..utils.logging import get_logger

log = get_logger()

CN_PLACEHOLDER = "{CN}"


def generate_csr_batch_internal(
    request: GenerationRequest,
    generator: Optional[IdentityGenerator] = None,
    exporter: Optional[RecordExporter] = None,
) -> GenerateResult:
    generator = generator or IdentityGenerator()
    exporter = exporter or RecordExporter()

    # Resolution and expansion happen before any key is generated or file opened
    algo = resolve(request.key_type)
    hash_alg = resolve_hash(request.sign_hash_alg)
    names = expand(request.cn_range)
    if not names:
        raise EmptyExpandedRange(request.cn_range)
    hash_name = hash_display_name(request.sign_hash_alg)

    log.info(
        "batch start range=%s count=%d key_type=%s hash=%s output=%s",
        request.cn_range, len(names), algo.display_name, hash_name, request.output_path,
    )

    identities: List[Identity] = []
    for cn in names:
        csr_pem, key_pem = generator.generate(cn, algo, hash_alg)
        identities.append(Identity(
            common_name=cn,
            subject=request.subject_template.replace(CN_PLACEHOLDER, cn),
            sign_hash_alg=hash_name,
            not_before=request.not_before,
            not_after=request.not_after,
            unique_id=request.unique_id,
            sans=request.sans,
            csr_pem=csr_pem,
            key_pair_type=algo.display_name,
            private_key_pem=key_pem,
        ))

    try:
        exporter.export(identities, request.output_path)
        total = len(identities)
    finally:
        # Key material lives only in the output file
        identities.clear()

    log.info("batch done count=%d output=%s", total, request.output_path)
    return GenerateResult(
        success=True,
        message=f"Generated {total} CSR(s)",
        total=total,
        output_path=request.output_path,
    )


def generate_csr_batch(
    request: GenerationRequest,
    generator: Optional[IdentityGenerator] = None,
    exporter: Optional[RecordExporter] = None,
) -> GenerateResult:
    try:
        return generate_csr_batch_internal(request, generator=generator, exporter=exporter)
    except CSRBatchError as e:
        log.error("batch failed: %s", e)
        return GenerateResult(success=False, message=str(e), total=0, output_path=request.output_path)


__all__ = ["generate_csr_batch", "generate_csr_batch_internal", "CN_PLACEHOLDER"]
