from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Subject
from .repository import SubjectRepository


def _decode_embedding(raw) -> Optional[tuple]:
    if not raw:
        return None
    values = json.loads(raw)
    return tuple(float(v) for v in values) or None


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, name, hostel_block, face_embedding
                FROM subjects
                WHERE subject_id=%s
                """,
                (subject_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Subject(
                subject_id=str(row["subject_id"]),
                name=row["name"],
                hostel_block=row.get("hostel_block"),
                face_embedding=_decode_embedding(row.get("face_embedding")),
            )

    def set_face_embedding(self, subject_id: str, embedding: Sequence[float], *, enrolled_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET face_embedding=%s, enrolled_at=%s
                WHERE subject_id=%s
                """,
                (json.dumps([float(v) for v in embedding]), enrolled_at, subject_id),
            )
            return cur.rowcount > 0
