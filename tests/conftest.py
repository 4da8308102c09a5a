from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from greencart.database import get_db, init_db, make_engine
from greencart.http_service import create_app
from greencart.model import Driver, Order, Route

BASE_TIME = datetime(2025, 1, 6, 9, 0)

RESTED = [6, 7, 6, 7, 6, 7, 6]
FATIGUED = [6, 7, 8, 7, 6, 8, 9]


class Store:
    """Small factory for drivers / routes / orders in the test database."""

    def __init__(self, session):
        self.db = session
        self._orders = 0

    def driver(self, name="Test Driver", hours=None, active=True):
        d = Driver(name=name, past_7_days_work_hours=list(hours or RESTED), is_active=active)
        self.db.add(d)
        self.db.commit()
        return d

    def route(self, code="RT001", distance_km=20, traffic_level="High", base_time_minutes=60, active=True):
        r = Route(
            route_code=code,
            distance_km=distance_km,
            traffic_level=traffic_level,
            base_time_minutes=base_time_minutes,
            is_active=active,
        )
        self.db.add(r)
        self.db.commit()
        return r

    def order(self, route, value=1500, deadline=None, status="pending", code=None):
        self._orders += 1
        o = Order(
            order_code=code or f"ORD{self._orders:03d}",
            value=value,
            route=route,
            delivery_deadline=deadline or BASE_TIME + timedelta(hours=self._orders),
            status=status,
        )
        self.db.add(o)
        self.db.commit()
        return o


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    return Store(db)


@pytest.fixture
def client(session_factory):
    app = create_app(create_tables=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
