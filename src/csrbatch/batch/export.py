"""CSV export of generated identities.

Column order is consumed by downstream import tooling and must not change:

    subject, signHashAlg, notBefore, notAfter, [uniqueId], [sans], csr, keyPairType, privateKey

uniqueId / sans appear when at least one identity in the batch has a value
for them, and then appear on every row.
"""
from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import List, Sequence

from .model import Identity
from ..errors import FileIoFailure
from ..utils.logging import get_logger

log = get_logger()

LEADING_COLUMNS = ["subject", "signHashAlg", "notBefore", "notAfter"]
TRAILING_COLUMNS = ["csr", "keyPairType", "privateKey"]


@dataclass(frozen=True)
class ExportSchema:
    has_unique_id: bool = False
    has_sans: bool = False

    @classmethod
    def for_identities(cls, identities: Sequence[Identity]) -> "ExportSchema":
        return cls(
            has_unique_id=any(i.unique_id for i in identities),
            has_sans=any(i.sans for i in identities),
        )

    def header(self) -> List[str]:
        cols = list(LEADING_COLUMNS)
        if self.has_unique_id:
            cols.append("uniqueId")
        if self.has_sans:
            cols.append("sans")
        return cols + TRAILING_COLUMNS

    def row(self, identity: Identity) -> List[str]:
        rec = [identity.subject, identity.sign_hash_alg, identity.not_before, identity.not_after]
        if self.has_unique_id:
            rec.append(identity.unique_id)
        if self.has_sans:
            rec.append(identity.sans)
        rec += [identity.csr_pem, identity.key_pair_type, identity.private_key_pem]
        return rec


class RecordExporter:
    def export(self, identities: Sequence[Identity], destination: str) -> None:
        schema = ExportSchema.for_identities(identities)
        log.debug("export %d rows to %s columns=%s", len(identities), destination, schema.header())
        try:
            # Overwrites; a failure part-way leaves whatever was already written
            with open(destination, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
                writer.writerow(schema.header())
                for identity in identities:
                    writer.writerow(schema.row(identity))
        except OSError as e:
            raise FileIoFailure(destination, e.strerror or str(e)) from e
        except UnicodeError as e:
            raise FileIoFailure(destination, f"cannot encode row as UTF-8: {e}") from e


def export(identities: Sequence[Identity], destination: str) -> None:
    RecordExporter().export(identities, destination)


__all__ = ["ExportSchema", "RecordExporter", "export", "LEADING_COLUMNS", "TRAILING_COLUMNS"]
