"""
Shared fixtures: an in-memory SQLite database, a FastAPI TestClient wired to it,
and helpers for creating users, pets and records.
"""

import os

# Must be set before vetclinic.core.config builds its Settings instance.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("CLINIC_OWNER_EMAIL", "owner@clinic.test")
os.environ.setdefault("SESSION_SECRET", "test-secret")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import vetclinic.db.models  # noqa: F401
from vetclinic.api.v1.routes.deps import get_clock, get_db
from vetclinic.core.roles import Role
from vetclinic.core.security import TOKENS, issue_token
from vetclinic.db.base import Base
from vetclinic.db.models.diagnosis import DiagnosisInfo
from vetclinic.db.models.owner import Owner
from vetclinic.db.models.pet import Pet, Species
from vetclinic.db.models.record import RecordInfo
from vetclinic.db.models.surgery import SurgeryInfo
from vetclinic.db.models.user import User
from vetclinic.db.models.vaccination import Vaccine
from vetclinic.main import app

TODAY = date(2025, 4, 1)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: TODAY)

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        TOKENS.clear()


# -------------------------
# Data helpers
# -------------------------
@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: Role, password_hash: str = "unused") -> User:
        counter["n"] += 1
        user = User(
            user_email=f"{role.value}{counter['n']}@clinic.test",
            user_password=password_hash,
            user_role=role.value,
            user_firstname=role.value.title(),
            user_lastname=f"Tester{counter['n']}",
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def auth_headers(make_user):
    def _headers(role: Role) -> dict:
        user = make_user(role)
        return {"Authorization": f"Bearer {issue_token(user.user_id)}"}

    return _headers


@pytest.fixture
def species(db):
    dog = Species(spec_description="Dog")
    cat = Species(spec_description="Cat")
    db.add_all([dog, cat])
    db.commit()
    return {"Dog": dog, "Cat": cat}


@pytest.fixture
def pet(db, make_user, species):
    owner_user = make_user(Role.OWNER)
    owner = Owner(user_id=owner_user.user_id, owner_address="12 Mabini St")
    db.add(owner)
    db.flush()

    pet = Pet(
        owner_id=owner.owner_id,
        species_id=species["Dog"].spec_id,
        pet_name="Bantay",
        pet_gender="Male",
        pet_breed="Aspin",
        pet_birthday=date(2020, 1, 1),
        pet_age_year=5,
        pet_age_month=3,
    )
    db.add(pet)
    db.commit()
    return pet


@pytest.fixture
def vaccine(db):
    vaccine = Vaccine(vax_type="Anti-Rabies")
    db.add(vaccine)
    db.commit()
    return vaccine


@pytest.fixture
def record_fields():
    return {
        "record_date": "2025-03-30",
        "record_weight": 12.5,
        "record_temp": 38.6,
        "record_condition": "Stable",
        "record_symptom": "Coughing",
        "record_recent_visit": "2025-01-10",
        "record_purchase": "Dog food",
        "record_purpose": "Check-up",
    }


@pytest.fixture
def make_record(db, pet):
    """Insert a record directly, optionally with diagnosis and surgery rows."""

    def _make(diagnosis: str | None = None, surgery: tuple[str, date] | None = None) -> RecordInfo:
        diagnosis_id = None
        if diagnosis is not None:
            row = DiagnosisInfo(diagnosis_text=diagnosis)
            db.add(row)
            db.flush()
            diagnosis_id = row.diagnosis_id

        surgery_id = None
        if surgery is not None:
            row = SurgeryInfo(surgery_type=surgery[0], surgery_date=surgery[1])
            db.add(row)
            db.flush()
            surgery_id = row.surgery_id

        record = RecordInfo(
            pet_id=pet.pet_id,
            record_date=date(2025, 3, 1),
            record_weight=12.0,
            record_temp=38.5,
            record_condition="Stable",
            record_symptom="None",
            record_recent_visit="2025-01-10",
            record_purchase="None",
            record_purpose="Check-up",
            diagnosis_id=diagnosis_id,
            surgery_id=surgery_id,
        )
        db.add(record)
        db.commit()
        return record

    return _make
