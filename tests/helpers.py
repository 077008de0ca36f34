"""Shared test setup: in-memory SQLite database and an API client bound to it."""

from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from venio.core.config import get_settings
from venio.core.database import get_db
from venio.models import Base, Role, User
from venio.models.seed import seed_rbac
from venio.schemas.user import UserCreate
from venio.services import user_service

DEFAULT_PASSWORD = "CorrectHorse42!"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with all tables and the built-in roles and permissions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = factory()
    try:
        seed_rbac(db)
    finally:
        db.close()
    return factory


def role_id(db: Session, name: str) -> int:
    return db.query(Role).filter(Role.name == name).one().id


def create_user(
    db: Session,
    username: str,
    roles: list[str] | None = None,
    password: str = DEFAULT_PASSWORD,
) -> User:
    """Create an active user holding exactly the named roles."""
    data = UserCreate(
        email=f"{username}@example.com",
        username=username,
        first_name=username.capitalize(),
        last_name="Tester",
        password=password,
    )
    role_ids = [role_id(db, name) for name in (roles or [])]
    return user_service.create_user_with_roles(db, data, role_ids, get_settings())


def make_client(factory: sessionmaker) -> TestClient:
    """TestClient whose get_db dependency yields sessions from factory."""
    from venio.main import app

    def override_get_db() -> Generator[Session, None, None]:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def clear_overrides() -> None:
    from venio.main import app

    app.dependency_overrides.clear()


def login(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def auth_headers(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    return {"Authorization": f"Bearer {login(client, email, password)['access_token']}"}
