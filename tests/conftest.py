import os

# must be set before taskboard.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("SEED_ADMIN_EMAIL", None)

import pytest
from fastapi.testclient import TestClient

from taskboard.app import app
from taskboard.db.session import Base, SessionLocal, engine
from taskboard.models import GlobalRole, Project, ProjectMember, ProjectRole, Task, User
from taskboard.security import create_token, hash_password


@pytest.fixture(autouse=True)
def _schema():
    import taskboard.models  # noqa
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(name, role, email=None, password="secret123"):
        u = User(
            name=name,
            email=email or f"{name.lower()}@acme.io",
            password_hash=hash_password(password),
            role=role,
        )
        db.add(u)
        db.commit()
        return u
    return _make


@pytest.fixture
def users(make_user):
    """Two admins, two project managers, three members."""
    return {
        "admin": make_user("Ada", GlobalRole.admin),
        "admin2": make_user("Alan", GlobalRole.admin),
        "pm1": make_user("Paula", GlobalRole.project_manager),
        "pm2": make_user("Peter", GlobalRole.project_manager),
        "m1": make_user("Mia", GlobalRole.member),
        "m2": make_user("Max", GlobalRole.member),
        "m3": make_user("Moe", GlobalRole.member),
    }


@pytest.fixture
def make_project(db):
    def _make(owner, members=(), name="Apollo"):
        p = Project(name=name, description="", owner_id=owner.id)
        p.members = [ProjectMember(user_id=u.id, role=r) for u, r in members]
        db.add(p)
        db.commit()
        return p
    return _make


@pytest.fixture
def project(users, make_project):
    """Owned by admin; pm1 is Project Manager; m1 and m2 are members."""
    return make_project(users["admin"], [
        (users["pm1"], ProjectRole.project_manager),
        (users["m1"], ProjectRole.member),
        (users["m2"], ProjectRole.member),
    ])


@pytest.fixture
def make_task(db):
    def _make(project, title="Write docs", assignee=None):
        t = Task(project_id=project.id, title=title, description="",
                 assignee_id=assignee.id if assignee else None)
        db.add(t)
        db.commit()
        return t
    return _make


def auth_header(user):
    return {"Authorization": f"Bearer {create_token(str(user.id), user.role.value)}"}


@pytest.fixture
def as_user():
    return auth_header
