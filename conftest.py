import os

# Must be set before chanjo.core.config is imported
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DEFAULT_TIMEZONE", "Africa/Nairobi")

from datetime import date, datetime
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chanjo import crud, models  # noqa: F401
from chanjo.core.security import create_access_token
from chanjo.db.base import Base
from chanjo.db.session import get_db
from chanjo.main import app


class FakeEmailGateway:
    """Records outgoing mail; addresses in ``failing`` report a failed send."""

    def __init__(self, failing: Optional[set] = None):
        self.failing = failing or set()
        self.sent: List[dict] = []
        self.attempts: List[str] = []

    def send_email(self, to_email, subject, html_content, text_content=None) -> bool:
        self.attempts.append(to_email)
        if to_email in self.failing:
            return False
        self.sent.append({"to": to_email, "subject": subject, "html": html_content, "text": text_content})
        return True


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def gateway():
    return FakeEmailGateway()


@pytest.fixture
def schedule(db):
    crud.vaccination_schedule.seed(
        db,
        [
            ("Birth", "BCG", "Tuberculosis"),
            ("6 weeks", "OPV 1", "Polio"),
            ("14 weeks", "Pentavalent 3", "Diphtheria, Pertussis, Tetanus"),
            ("9 months", "Measles-Rubella 1", "Measles, Rubella"),
        ],
    )
    return crud.vaccination_schedule.list(db)


@pytest.fixture
def mother(db):
    return crud.mother.create(db, email="amina@example.com", full_name="Amina Otieno", phone_number="0712345678")


@pytest.fixture
def other_mother(db):
    return crud.mother.create(db, email="wanjiru@example.com", full_name="Wanjiru Kamau", phone_number="0798765432")


def make_baby(db, mother, name="Zawadi", dob=date(2024, 1, 1), gender="female"):
    baby = crud.mother.add_baby(db, mother_id=mother.id, name=name, date_of_birth=dob, gender=gender)
    db.commit()
    return baby


@pytest.fixture
def baby(db, mother):
    return make_baby(db, mother)


@pytest.fixture
def auth_headers(mother):
    token = create_access_token(mother.id, email=mother.email)
    return {"Authorization": f"Bearer {token}"}


JAN_1 = datetime(2024, 1, 1)
