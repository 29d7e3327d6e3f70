import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from csrbatch.batch.model import (
    GenerationRequest,
    default_validity,
    load_request_file,
    stamp_output_path,
    validate_request,
)
from csrbatch.errors import InvalidRequest

NOW = datetime.datetime(2024, 8, 1, 12, 30, 5, tzinfo=datetime.timezone.utc)


def req(**kw):
    fields = dict(
        cn_range="YDL0001-YDL0002",
        subject_template="CN=[{CN}]",
        key_type="RSA_2048",
        sign_hash_alg="SHA256",
        not_before="2024-08-01T00:00:00.000Z",
        not_after="2034-08-01T00:00:00.000Z",
        output_path="out.csv",
    )
    fields.update(kw)
    return GenerationRequest(**fields)


def test_validate_ok():
    validate_request(req())
    # naive timestamps are accepted
    validate_request(req(not_before="2024-08-01T00:00:00", not_after="2024-08-02T00:00:00"))


@pytest.mark.parametrize(
    "kw",
    [
        {"cn_range": "  "},
        {"subject_template": ""},
        {"output_path": " "},
        {"not_before": "2030-01-01T00:00:00Z", "not_after": "2029-01-01T00:00:00Z"},
        {"not_before": "yesterday"},
    ],
)
def test_validate_rejects(kw):
    with pytest.raises(InvalidRequest):
        validate_request(req(**kw))


def test_optional_fields_default_empty():
    r = req()
    assert r.unique_id == "" and r.sans == ""


def test_default_validity():
    nb, na = default_validity(NOW, years=10)
    assert nb == "2024-08-01T12:30:05.000Z"
    assert na == "2034-07-30T12:30:05.000Z"


@pytest.mark.parametrize(
    "path,expected",
    [
        ("output.csv", "output_20240801_123005.csv"),
        ("output", "output_20240801_123005.csv"),
        ("out/batch.CSV", "out/batch_20240801_123005.csv"),
        ("output_20230101_000000.csv", "output_20240801_123005.csv"),
        ("output_20230101_000000", "output_20240801_123005.csv"),
    ],
)
def test_stamp_output_path(path, expected):
    assert stamp_output_path(path, NOW) == expected


def test_load_request_file(tmp_path: Path):
    p = tmp_path / "req.yml"
    p.write_text(
        "cn_range: DEV001-DEV004\n"
        "subject_template: 'CN=[{CN}]; O=[Fleet]'\n"
        "key_type: EC_P256\n"
        "unique_id: 1234\n"
        "not_before: 2024-08-01T00:00:00Z\n",
        encoding="utf-8",
    )
    data = load_request_file(str(p))
    assert data["cn_range"] == "DEV001-DEV004"
    assert data["subject_template"] == "CN=[{CN}]; O=[Fleet]"
    assert data["unique_id"] == "1234"
    assert data["not_before"] == "2024-08-01T00:00:00.000Z"


def test_load_request_file_rejects_unknown_keys(tmp_path: Path):
    p = tmp_path / "req.yml"
    p.write_text("cn_range: A1-A2\ncolour: blue\n", encoding="utf-8")
    with pytest.raises(InvalidRequest):
        load_request_file(str(p))


def test_load_request_file_missing(tmp_path: Path):
    with pytest.raises(InvalidRequest):
        load_request_file(str(tmp_path / "nope.yml"))


@pytest.mark.parametrize("field", ["subject_template", "sans", "unique_id", "cn_range"])
def test_request_rejects_undecodable_text(field):
    # argparse maps stray non-UTF-8 bytes to lone surrogates
    with pytest.raises(ValidationError):
        req(**{field: "CN=[{CN}] O=\udcff"})


def test_output_path_may_hold_surrogates():
    assert req(output_path="out-\udcff.csv").output_path == "out-\udcff.csv"
