from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EnrolledDescriptor
from .repository import DescriptorRepository

logger = logging.getLogger(__name__)


def _parse_vector(raw: Any) -> tuple[float, ...]:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        raw = raw.strip()
        if raw.startswith("["):
            raw = json.loads(raw)
        else:
            raw = [p for p in raw.split(",") if p.strip()]
    return tuple(float(v) for v in raw)


class MySQLDescriptorRepository(DescriptorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _to_model(self, r: dict) -> EnrolledDescriptor:
        return EnrolledDescriptor(
            identity_id=int(r["identity_id"]),
            vector=_parse_vector(r["descriptor"]),
            enrolled_at=r["enrolled_at"],
        )

    def list_all(self) -> Sequence[EnrolledDescriptor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT identity_id, descriptor, enrolled_at FROM face_descriptors ORDER BY identity_id")
            out: list[EnrolledDescriptor] = []
            for r in fetchall(cur):
                try:
                    out.append(self._to_model(r))
                except (TypeError, ValueError) as e:
                    logger.warning("Invalid stored descriptor for identity %s: %s", r.get("identity_id"), e)
            return out

    def get(self, identity_id: int) -> Optional[EnrolledDescriptor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT identity_id, descriptor, enrolled_at FROM face_descriptors WHERE identity_id=%s",
                (int(identity_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def upsert(self, descriptor: EnrolledDescriptor) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO face_descriptors(identity_id, descriptor, enrolled_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE descriptor=VALUES(descriptor), enrolled_at=VALUES(enrolled_at)
                """,
                (int(descriptor.identity_id), json.dumps(list(descriptor.vector)), descriptor.enrolled_at),
            )

    def delete(self, identity_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM face_descriptors WHERE identity_id=%s", (int(identity_id),))
            return cur.rowcount > 0
