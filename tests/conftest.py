"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- An isolated in-memory database per test
- Sample polygons and areas
- FastAPI test client
"""
import os

# Configure before the application module reads its settings
os.environ.setdefault("FARMAREA_DATABASE_URL", "sqlite://")
os.environ.setdefault("FARMAREA_RATE_LIMIT_ENABLED", "false")

import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from farmarea.main import app
from farmarea.domain.models import Area, Point
from farmarea.infrastructure.database import Base, SessionLocal, engine, init_db
import farmarea.infrastructure.tables  # noqa: F401


# ============================================================
# Database Fixtures
# ============================================================

@pytest.fixture
def database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(database):
    """A session on the test database."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def square_points() -> list[dict]:
    """A 10x10 square in the top-left corner, as sent on the wire."""
    return [
        {"x": 0, "y": 0},
        {"x": 10, "y": 0},
        {"x": 10, "y": 10},
        {"x": 0, "y": 10},
    ]


@pytest.fixture
def area_payload(square_points) -> dict:
    """A valid POST /api/areas body."""
    return {
        "name": "North Field",
        "description": "Primary wheat cultivation zone. Good drainage.",
        "hectares": 12.5,
        "cropType": "Wheat",
        "color": "#ef4444",
        "points": square_points,
    }


def make_area(area_id: str, points, name: str = "Field", hectares: float = 1.0, color: str = "#3b82f6") -> Area:
    """Build a domain Area without touching the database."""
    return Area(
        id=area_id,
        name=name,
        description="",
        hectares=hectares,
        crop_type="Wheat",
        color=color,
        points=[Point(x=x, y=y) for x, y in points],
        user_id="user-1",
        created_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_areas() -> list[Area]:
    """Two non-overlapping areas, matching the demo farm layout."""
    return [
        make_area("north", [(10, 10), (40, 10), (35, 40), (15, 45)], name="North Field", hectares=12.5),
        make_area("orchard", [(50, 20), (80, 20), (80, 50), (50, 50)], name="Orchard Block A", hectares=5.2),
    ]


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client(database) -> TestClient:
    """Create a test client; entering it runs the application lifespan."""
    with TestClient(app) as client:
        yield client
