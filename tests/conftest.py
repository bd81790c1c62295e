import os

# Settings are read at import time; point everything at local fakes first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_PROVIDER"] = "supabase"
os.environ["STORE_BACKEND"] = "sqlalchemy"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

from typing import Optional

import pytest
from fastapi import Header
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_rent_advisor
from app.core.auth import User, get_current_user
from app.core.database import Base
from app.core.errors import AuthError
from app.main import app
from app.models.rental import Rental  # noqa: F401
from app.schemas.suggestion import SuggestionResponse
from app.services.rent_advisor import RentAdvisor

TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeChatModel:
    """Stands in for ChatOpenAI: records calls, returns a canned result or raises."""

    def __init__(self, result=None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls = []
        self.schema = None

    def with_structured_output(self, schema):
        self.schema = schema
        return self

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_llm():
    return FakeChatModel(
        result=SuggestionResponse(
            suggested_rental_amount=1800.0,
            reasoning="Comparable two-bedroom apartments in Lagos rent for about this much.",
        )
    )


@pytest.fixture
def client(db_session, fake_llm):
    def _get_db():
        yield db_session

    def _current_user(x_test_user: Optional[str] = Header(None)) -> User:
        if not x_test_user:
            raise AuthError("Not authenticated")
        return User(user_id=x_test_user, email=f"{x_test_user}@example.com")

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _current_user
    app.dependency_overrides[get_rent_advisor] = lambda: RentAdvisor(llm=fake_llm)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    def headers(user_id: str) -> dict:
        return {"X-Test-User": user_id}
    return headers
