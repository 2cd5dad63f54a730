"""Shared fixtures: in-memory database, app client and entity factories."""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.config.settings import Settings
from src.models import Base
from src.services import build_engine, build_session_factory
from src.services.building_service import BuildingService
from src.services.storage import LocalBlobStore
from src.services.tenant_service import TenantService


@pytest.fixture
def db_session():
    """Session on a fresh in-memory SQLite database with all tables."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "docs", "http://testserver/files")


@pytest.fixture
def make_building(db_session):
    """Create a building with rooms: make_building("Green View", rooms=["101"])."""

    def _make(name: str = "Green View", rooms: tuple[str, ...] = ("101",)):
        service = BuildingService(db_session)
        building = service.create_building(name, address="1 Main Road")
        created = [service.add_room(building.id, number) for number in rooms]
        return building, created

    return _make


@pytest.fixture
def make_tenant(db_session, make_building):
    """Create a tenant in a new building room; returns CreatedTenant."""
    counter = {"n": 0}

    def _make(
        name: str = "Asha Rao",
        rent: str = "8000",
        maintenance: str = "2000",
        building=None,
        room=None,
        **kwargs,
    ):
        if building is None or room is None:
            counter["n"] += 1
            building, rooms = make_building(f"Block {counter['n']}", rooms=("101",))
            room = rooms[0]
        return TenantService(db_session).create_tenant(
            building_id=building.id,
            room_id=room.id,
            name=name,
            rent=Decimal(rent),
            maintenance=Decimal(maintenance),
            **kwargs,
        )

    return _make


# API fixtures
@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        storage_dir=str(tmp_path / "files"),
        base_url="http://testserver",
        admin_username="admin",
        admin_password="admin@123",
        stripe_secret_key="sk_test_dummy",
        stripe_webhook_secret="whsec_dummy",
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    Base.metadata.create_all(bind=application.state.engine)
    yield application
    Base.metadata.drop_all(bind=application.state.engine)


@pytest.fixture
def api_session(app):
    """Session sharing the app's in-memory database, for arranging data."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def management_client(client):
    client.cookies.set("role", "management")
    return client


@pytest.fixture
def seeded(api_session):
    """One building with two rooms and one tenant in room 101."""
    buildings = BuildingService(api_session)
    building = buildings.create_building("Green View")
    room_101 = buildings.add_room(building.id, "101")
    room_102 = buildings.add_room(building.id, "102")
    created = TenantService(api_session).create_tenant(
        building_id=building.id,
        room_id=room_101.id,
        name="Asha Rao",
        rent=Decimal("8000"),
        maintenance=Decimal("2000"),
        advance_paid=Decimal("20000"),
        agreement_start=date(2024, 1, 1),
    )
    return {
        "building_id": building.id,
        "room_101_id": room_101.id,
        "room_102_id": room_102.id,
        "tenant_id": created.tenant.id,
        "username": created.credentials.username,
        "password": created.credentials.password,
    }


@pytest.fixture
def tenant_client(client, seeded):
    client.cookies.set("role", "tenant")
    client.cookies.set("tenantId", str(seeded["tenant_id"]))
    return client
