import pytest
from fastapi.testclient import TestClient

from callcenter import db as db_module
from callcenter.main import app

ENV_VARS = [
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_API_KEY",
    "TWILIO_API_SECRET",
    "TWILIO_TWIML_APP_SID",
    "TWILIO_PHONE_NUMBER",
    "TWILIO_IDENTITY",
    "EMERGENCY_PHONE_NUMBER",
    "SIMULATE_TWILIO",
    "PUBLIC_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(db_module, "_db_instance", None)


@pytest.fixture
def db():
    return db_module.get_db()


@pytest.fixture
def client():
    return TestClient(app)
