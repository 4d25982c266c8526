"""
Pytest configuration and fixtures for backend tests.
"""

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from food_shared.config.constants import Role
from food_shared.config.settings import Settings
from food_shared.infrastructure.db import build_session_factory, get_db
from food_shared.security.auth import Principal, sign_principal_token
from food_api.main import create_app
from food_api.models import Base, Cart, Category, Food, Restaurant, User


_email_counter = itertools.count(1)


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = build_session_factory(engine)

TEST_SETTINGS = Settings(
    _env_file=None,
    database_url=SQLALCHEMY_DATABASE_URL,
    jwt_secret="test-secret-with-at-least-32-characters",
    environment="test",
    debug=False,
    create_schema=False,
)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_settings():
    return TEST_SETTINGS


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    app = create_app(TEST_SETTINGS)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Users
# =============================================================================


@pytest.fixture
def make_user(db_session):
    """Factory: create a user of the given role together with their cart."""

    def _make_user(role: Role = Role.CUSTOMER, email: str | None = None) -> User:
        if email is None:
            email = f"user{next(_email_counter)}@test.com"
        user = User(email=email, full_name=f"Test {role.name.title()}", role=role)
        db_session.add(user)
        db_session.flush()
        db_session.add(Cart(customer_id=user.id, total=0))
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def customer(make_user):
    return make_user(Role.CUSTOMER)


@pytest.fixture
def other_customer(make_user):
    return make_user(Role.CUSTOMER)


@pytest.fixture
def owner(make_user):
    return make_user(Role.OWNER)


@pytest.fixture
def other_owner(make_user):
    return make_user(Role.OWNER)


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN)


@pytest.fixture
def as_principal():
    """Build the Principal an authenticated request would carry for ``user``."""

    def _as_principal(user: User) -> Principal:
        return Principal(id=user.id, role=user.role, email=user.email)

    return _as_principal


@pytest.fixture
def auth_headers(as_principal):
    """Factory: Authorization header with a signed token for ``user``."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = sign_principal_token(as_principal(user), TEST_SETTINGS)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# =============================================================================
# Restaurant and menu
# =============================================================================


@pytest.fixture
def seed_restaurant(db_session, owner):
    """Create an open restaurant run by ``owner``."""
    restaurant = Restaurant(
        owner_id=owner.id,
        name="La Parrilla",
        description="Carnes a la parrilla",
        cuisine_type="Argentina",
        images=["https://cdn.example.com/parrilla.jpg"],
        open=True,
    )
    db_session.add(restaurant)
    db_session.commit()
    return restaurant


@pytest.fixture
def other_restaurant(db_session, other_owner):
    restaurant = Restaurant(owner_id=other_owner.id, name="Sushi Go", cuisine_type="Japonesa", open=True)
    db_session.add(restaurant)
    db_session.commit()
    return restaurant


@pytest.fixture
def seed_category(db_session, seed_restaurant):
    category = Category(name="Principales", restaurant_id=seed_restaurant.id)
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_food(db_session, seed_restaurant, seed_category):
    """Factory: create a food on ``seed_restaurant``'s menu."""

    def _make_food(name: str, price: int, **fields) -> Food:
        food = Food(
            name=name,
            price=price,
            restaurant_id=seed_restaurant.id,
            category_id=seed_category.id,
            **fields,
        )
        db_session.add(food)
        db_session.commit()
        return food

    return _make_food


@pytest.fixture
def food_f1(make_food):
    return make_food("Bife de chorizo", 500)


@pytest.fixture
def food_f2(make_food):
    return make_food("Ensalada mixta", 300, vegetarian=True)


@pytest.fixture
def sushi_roll(db_session, other_restaurant):
    """A food on ``other_restaurant``'s menu."""
    category = Category(name="Rolls", restaurant_id=other_restaurant.id)
    db_session.add(category)
    db_session.flush()
    food = Food(name="California roll", price=700, restaurant_id=other_restaurant.id, category_id=category.id)
    db_session.add(food)
    db_session.commit()
    return food
