"""
Shared pytest fixtures for the certification exam API.
The database and certificate directory live in a throwaway temp dir; the
environment is set before `certify` is imported so settings pick it up.
"""
import os
import shutil
import tempfile

_tmp_root = tempfile.mkdtemp(prefix="certify-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmp_root, "test.db")
os.environ["CERTS_DIR"] = os.path.join(_tmp_root, "certs")
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["SEED_ADMIN_EMAIL"] = "admin@example.com"
os.environ["SEED_ADMIN_PASSWORD"] = "admin-pass"


import pytest
from fastapi.testclient import TestClient

from certify.db import Base, SessionLocal, engine
from certify.main import app
from certify.models import Question

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"
CERTS_DIR = os.environ["CERTS_DIR"]


@pytest.fixture(autouse=True)
def fresh_state():
	Base.metadata.drop_all(bind=engine)
	Base.metadata.create_all(bind=engine)
	shutil.rmtree(CERTS_DIR, ignore_errors=True)
	os.makedirs(CERTS_DIR, exist_ok=True)
	yield
	app.dependency_overrides.clear()


@pytest.fixture
def db():
	session = SessionLocal()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture
def client():
	with TestClient(app) as c:
		yield c


@pytest.fixture
def admin_headers(client):
	r = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
	assert r.status_code == 200, r.text
	return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def make_question(db):
	"""Insert a question directly, bypassing the admin per-level cap."""
	def _make(step=1, level="A1", correct=0, text="Pick one", options=None):
		row = Question(
			step=step,
			level=level,
			question_text=text,
			options=options or ["one", "two", "three", "four"],
			correct_option_index=correct,
		)
		db.add(row)
		db.commit()
		db.refresh(row)
		return row
	return _make


@pytest.fixture
def step1_bank(make_question):
	"""Four step-1 questions, all with option 0 correct."""
	return [make_question(step=1, level=lvl, correct=0) for lvl in ("A1", "A1", "A2", "A2")]
