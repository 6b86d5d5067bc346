import logging
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hostel_occupancy.config.database import get_db_session
from hostel_occupancy.main import create_app
from hostel_occupancy.models import AuditLog, Base, Challan, Hostel, Student
from hostel_occupancy.repositories import HostelRepository
from hostel_occupancy.services.hostel.hostel_service import apply_structure
from hostel_occupancy.services.occupancy import ConsistencyCoordinator
from hostel_occupancy.services.roster import RosterService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app_logs(caplog):
    """Let records of the package logger reach caplog."""
    logger = logging.getLogger("hostel_occupancy")
    previous = logger.propagate
    logger.propagate = True
    caplog.set_level(logging.DEBUG, logger="hostel_occupancy")
    yield caplog
    logger.propagate = previous


@pytest.fixture
def client(session_factory):
    app = create_app(create_schema=False)

    def override_get_db_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = override_get_db_session
    return TestClient(app)


@pytest.fixture
def rosters(db) -> RosterService:
    return RosterService(HostelRepository(db), db)


@pytest.fixture
def coordinator(db, rosters) -> ConsistencyCoordinator:
    return ConsistencyCoordinator(db, rosters=rosters)


@pytest.fixture
def make_hostel(db):
    def factory(
        name: str = "Porali Hostel",
        blocks: Optional[List[Dict[str, Any]]] = None,
        capacity_per_room: int = 2,
        number_of_rooms: int = 0,
        **fields: Any,
    ) -> Hostel:
        hostel = Hostel(
            name=name,
            capacity_per_room=capacity_per_room,
            number_of_rooms=number_of_rooms,
            blocks=blocks if blocks is not None else [{"name": "A", "numRooms": 2}],
            room_capacities=fields.pop("room_capacities", {}),
            **fields,
        )
        apply_structure(hostel)
        db.add(hostel)
        db.commit()
        return hostel

    return factory


@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def factory(registration_number: str, **fields: Any) -> Student:
        counter["n"] += 1
        fields.setdefault("student_name", f"Student {registration_number}")
        fields.setdefault("department", "Computer Science")
        fields.setdefault("challan_number", f"CH-TEST-{counter['n']}")
        fields.setdefault("fee_table", {})
        student = Student(registration_number=registration_number, **fields)
        db.add(student)
        db.commit()
        return student

    return factory


@pytest.fixture
def make_challan(db):
    def factory(student: Student, challan_number: str, **fields: Any) -> Challan:
        challan = Challan(
            student_id=student.id,
            student_name=student.student_name,
            registration_number=student.registration_number,
            challan_number=challan_number,
            **fields,
        )
        db.add(challan)
        db.commit()
        return challan

    return factory


@pytest.fixture
def make_log(db):
    def factory(description: str, subject_id: Optional[str] = None, action: str = "NOTE") -> AuditLog:
        entry = AuditLog(action=action, description=description, subject_id=subject_id)
        db.add(entry)
        db.commit()
        return entry

    return factory
