from __future__ import annotations

import argparse
import datetime
import json
from typing import Any, Dict

from pydantic import ValidationError

from . import config
from .batch.model import (
    GenerationRequest,
    default_validity,
    format_timestamp,
    load_request_file,
    parse_timestamp,
    stamp_output_path,
    validate_request,
)
from .batch.orchestrator import generate_csr_batch
from .batch.verify import all_ok, verify_export
from .crypto.alg_registry import KeyAlgorithm
from .errors import CSRBatchError, InvalidRequest
from .utils.logging import get_logger

log = get_logger()

HASH_CHOICES = ["SHA256", "SHA384", "SHA512", "SHA1", "MatchIssuer"]

# argparse dest -> GenerationRequest field
_FIELDS = {
    "cn_range": "cn_range",
    "subject": "subject_template",
    "key_type": "key_type",
    "sign_hash_alg": "sign_hash_alg",
    "not_before": "not_before",
    "not_after": "not_after",
    "unique_id": "unique_id",
    "sans": "sans",
    "output": "output_path",
}


def build_request(args: argparse.Namespace, now: datetime.datetime | None = None) -> GenerationRequest:
    fields: Dict[str, Any] = load_request_file(args.request) if args.request else {}
    for dest, name in _FIELDS.items():
        value = getattr(args, dest, None)
        if value is not None:
            fields[name] = value.strip() if name != "output_path" else value
    fields.setdefault("subject_template", config.DEFAULT_SUBJECT)
    fields.setdefault("key_type", config.DEFAULT_KEY_TYPE)
    fields.setdefault("sign_hash_alg", config.DEFAULT_SIGN_HASH_ALG)
    fields.setdefault("output_path", config.DEFAULT_OUTPUT_PATH)
    fields.setdefault("cn_range", "")

    # Hosts hand the core canonical UTC strings (2024-08-01T00:00:00.000Z)
    try:
        for name in ("not_before", "not_after"):
            if name in fields:
                fields[name] = format_timestamp(parse_timestamp(fields[name]))
    except ValueError as e:
        raise InvalidRequest(f"validity timestamps must be ISO-8601: {e}") from e
    if "not_before" not in fields:
        fields["not_before"] = default_validity(now, config.VALIDITY_YEARS)[0]
    if "not_after" not in fields:
        start = parse_timestamp(fields["not_before"])
        fields["not_after"] = default_validity(start, config.VALIDITY_YEARS)[1]

    if args.timestamp and fields["output_path"].strip():
        fields["output_path"] = stamp_output_path(fields["output_path"], now)
    try:
        return GenerationRequest(**fields)
    except ValidationError as e:
        raise InvalidRequest(str(e)) from e


def cmd_generate(args: argparse.Namespace) -> int:
    try:
        request = build_request(args)
        validate_request(request)
    except InvalidRequest as e:
        log.error("invalid request: %s", e)
        print(json.dumps({"success": False, "message": str(e)}))
        return 2
    log.info("subject template: %s", request.subject_template)
    if request.unique_id:
        log.info("uniqueId: %s", request.unique_id)
    if request.sans:
        log.info("sans: %s", request.sans)
    result = generate_csr_batch(request)
    print(result.model_dump_json(indent=2))
    return 0 if result.success else 1


def cmd_verify(args: argparse.Namespace) -> int:
    try:
        report = verify_export(args.input)
    except CSRBatchError as e:
        print(json.dumps({"ok": False, "message": str(e)}))
        return 1
    ok = all_ok(report)
    print(json.dumps({"ok": ok, "rows": report}, indent=2))
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser("csrbatch")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="generate keys and CSRs for a common name range")
    p_gen.add_argument("--cn-range", dest="cn_range", help="e.g. YDL0001-YDL0010")
    p_gen.add_argument("--subject", help="subject template, {CN} is replaced by each name")
    p_gen.add_argument("--key-type", dest="key_type", choices=[k.name for k in KeyAlgorithm])
    p_gen.add_argument("--sign-hash-alg", dest="sign_hash_alg", choices=HASH_CHOICES)
    p_gen.add_argument("--not-before", dest="not_before")
    p_gen.add_argument("--not-after", dest="not_after")
    p_gen.add_argument("--unique-id", dest="unique_id")
    p_gen.add_argument("--sans")
    p_gen.add_argument("--output")
    p_gen.add_argument("--request", help="YAML file with request fields; flags override it")
    p_gen.add_argument("--no-timestamp", dest="timestamp", action="store_false", default=config.TIMESTAMP_OUTPUT)
    p_gen.set_defaults(func=cmd_generate)

    p_ver = sub.add_parser("verify", help="check every CSR in an exported CSV")
    p_ver.add_argument("--input", required=True)
    p_ver.set_defaults(func=cmd_verify)

    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
