from __future__ import annotations

import datetime
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from ..errors import InvalidRequest


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    cn_range: str
    subject_template: str
    key_type: str
    sign_hash_alg: str
    # ISO-8601 strings, carried into the export verbatim
    not_before: str
    not_after: str
    unique_id: str = ""
    sans: str = ""
    output_path: str

    # Every field but the path is written to the UTF-8 export
    @field_validator(
        "cn_range", "subject_template", "key_type", "sign_hash_alg",
        "not_before", "not_after", "unique_id", "sans",
    )
    @classmethod
    def _utf8_text(cls, v: str) -> str:
        try:
            v.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"text is not valid UTF-8: {e.reason} at position {e.start}") from e
        return v


class Identity(BaseModel):
    common_name: str
    subject: str
    sign_hash_alg: str
    not_before: str
    not_after: str
    unique_id: str = ""
    sans: str = ""
    csr_pem: str
    key_pair_type: str
    private_key_pem: str


class GenerateResult(BaseModel):
    success: bool
    message: str
    total: int = 0
    output_path: str


def load_request_file(path: str) -> Dict[str, Any]:
    """Read GenerationRequest fields from a YAML mapping; unknown keys are rejected."""
    p = Path(path)
    if not p.exists():
        raise InvalidRequest(f"request file not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise InvalidRequest(f"cannot parse request file {p}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidRequest(f"request file {p} must contain a mapping")
    unknown = set(data) - set(GenerationRequest.model_fields)
    if unknown:
        raise InvalidRequest(f"unknown request fields in {p}: {', '.join(sorted(unknown))}")
    # YAML may hand back numbers or timestamps; the request is all text
    return {k: v if isinstance(v, str) else _as_text(v) for k, v in data.items() if v is not None}


def _as_text(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return format_timestamp(value)
    return str(value)


def parse_timestamp(value: str) -> datetime.datetime:
    ts = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.timezone.utc)
    return ts


def validate_request(request: GenerationRequest) -> None:
    """Checks the host applies before handing a request to the core."""
    if not request.cn_range.strip():
        raise InvalidRequest("common name range is required")
    if not request.subject_template.strip():
        raise InvalidRequest("subject template is required")
    if not request.output_path.strip():
        raise InvalidRequest("output path is required")
    try:
        nb = parse_timestamp(request.not_before)
        na = parse_timestamp(request.not_after)
    except ValueError as e:
        raise InvalidRequest(f"validity timestamps must be ISO-8601: {e}") from e
    if nb > na:
        raise InvalidRequest("notBefore must not be later than notAfter")


def format_timestamp(ts: datetime.datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.timezone.utc)
    ts = ts.astimezone(datetime.timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_validity(now: Optional[datetime.datetime] = None, years: int = 10) -> Tuple[str, str]:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return format_timestamp(now), format_timestamp(now + datetime.timedelta(days=365 * years))


_STAMP_SUFFIX = re.compile(r"_\d{8}_\d{6}(\.csv)?$", re.IGNORECASE)


def stamp_output_path(path: str, now: Optional[datetime.datetime] = None) -> str:
    """``out.csv`` -> ``out_20240801_120000.csv``; an earlier stamp is replaced, not stacked."""
    now = now or datetime.datetime.now()
    base = _STAMP_SUFFIX.sub("", path)
    if base.lower().endswith(".csv"):
        base = base[:-4]
    return f"{base}_{now.strftime('%Y%m%d_%H%M%S')}.csv"


__all__ = [
    "GenerationRequest",
    "Identity",
    "GenerateResult",
    "load_request_file",
    "validate_request",
    "parse_timestamp",
    "format_timestamp",
    "default_validity",
    "stamp_output_path",
]
