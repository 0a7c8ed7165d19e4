from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceLedger
from .attendance.repository import AttendanceLedger
from .attendance.service import AttendanceService, VerificationOrchestrator
from .biometrics.generator import BoundedEmbeddingGenerator, EmbeddingGenerator
from .biometrics.similarity import SimilarityGate
from .core.constants import DEFAULT_EMBEDDING_TIMEOUT_SECONDS, DEFAULT_EMBEDDING_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .geofence.registry import HostelRegistry
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import EnrollmentService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    subjects_repo: SubjectRepository
    attendance_ledger: AttendanceLedger
    hostels: HostelRegistry
    embedder: EmbeddingGenerator

    enrollment_service: EnrollmentService
    verification: VerificationOrchestrator
    attendance_service: AttendanceService


def wire(
    *,
    subjects_repo: SubjectRepository,
    attendance_ledger: AttendanceLedger,
    hostels: HostelRegistry,
    embedder: EmbeddingGenerator,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of already constructed repositories and collaborators."""
    gate = SimilarityGate()
    return Container(
        conn=conn,
        subjects_repo=subjects_repo,
        attendance_ledger=attendance_ledger,
        hostels=hostels,
        embedder=embedder,
        enrollment_service=EnrollmentService(subjects_repo, embedder),
        verification=VerificationOrchestrator(attendance_ledger, subjects_repo, hostels, embedder, gate=gate),
        attendance_service=AttendanceService(attendance_ledger, subjects_repo),
    )


def build_container(
    *,
    db_config: dict,
    hostels_file: str,
    embedding_timeout_seconds: float = DEFAULT_EMBEDDING_TIMEOUT_SECONDS,
    embedding_workers: int = DEFAULT_EMBEDDING_WORKERS,
    duplicate_slack_days: int = 0,
) -> Container:
    # face_recognition loads the dlib models on import; keep that out of module import time.
    from .biometrics.face_embedder import FaceRecognitionEmbedder

    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
        lock_wait_timeout=int(db_config.get("lock_wait_timeout", 5)),
    )
    conn = DatabaseConnection.get_instance(config)

    embedder = BoundedEmbeddingGenerator(
        FaceRecognitionEmbedder(),
        timeout_seconds=embedding_timeout_seconds,
        max_workers=embedding_workers,
    )

    return wire(
        conn=conn,
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_ledger=MySQLAttendanceLedger(conn, slack_days=duplicate_slack_days),
        hostels=HostelRegistry.from_file(hostels_file),
        embedder=embedder,
    )
