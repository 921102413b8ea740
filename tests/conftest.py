"""Pytest fixtures for review tests."""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kairos.api.deps import get_db
from kairos.config import Settings
from kairos.core.srs.memory_state import AlgorithmCardState
from kairos.core.srs.scheduler import RATINGS, SchedulingOutcome
from kairos.db.base import Base
from kairos.db.models import Entry
from kairos.main import create_app
from kairos.schemas.card import CardState


class StubAlgorithm:
    """Deterministic scheduler: rating N schedules the card N days out."""

    def __init__(self) -> None:
        self.calls: list[tuple[AlgorithmCardState, datetime]] = []

    def schedule_all(self, state: AlgorithmCardState, now: datetime):
        self.calls.append((state, now))
        return {
            rating: SchedulingOutcome(
                stability=float(rating),
                difficulty=5.0,
                state=CardState.Review,
                learning_step=None,
                lapses=state.lapses,
                last_review_at=now,
                due_at=now + timedelta(days=int(rating)),
                reps=state.reps + 1,
                scheduled_days=int(rating),
            )
            for rating in RATINGS
        }


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(Entry).delete()
        db.commit()
        db.close()


@pytest.fixture()
def now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture()
def add_entry(db_session: Session, now: datetime) -> Callable[..., Entry]:
    def _add(headword: str, *, due_in: timedelta = timedelta(days=-1), **fields) -> Entry:
        values = {
            "pinyin": "",
            "english_definition": "",
            "chinese_definition": "",
            "frequency": 0,
            "stability": 0.0,
            "difficulty": 0.0,
            "lapses": 0,
            "state": int(CardState.New),
            "reps": 0,
            "due_at": now + due_in,
        }
        values.update(fields)
        entry = Entry(headword=headword, **values)
        db_session.add(entry)
        db_session.commit()
        return entry

    return _add


@pytest.fixture()
def stub_algorithm() -> StubAlgorithm:
    return StubAlgorithm()


@pytest.fixture()
def settings() -> Settings:
    return Settings(DATABASE_URL="sqlite://", LOG_LEVEL="WARNING")


@pytest.fixture()
def client(db_session: Session, settings: Settings) -> Generator[TestClient, None, None]:
    app = create_app(settings)

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def async_client(
    db_session: Session, settings: Settings
) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app(settings)

    async def override_get_db() -> AsyncGenerator[Session, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def nihao(add_entry) -> Entry:
    return add_entry(
        "你好",
        pinyin="nǐ hǎo",
        english_definition="hello",
        chinese_definition="打招呼用语",
        frequency=120,
    )
