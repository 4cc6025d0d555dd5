import os
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from payroll_api import create_app
from payroll_api.extensions import db
from payroll_api.models.user import User
from payroll_api.models.employee import Employee


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def session(app):
    yield db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(session):
    seq = {"n": 0}

    def _make(full_name=None, role="employee", status="active", email=None):
        seq["n"] += 1
        n = seq["n"]
        u = User(
            email=email or f"user{n}@test.local",
            full_name=full_name or f"User {n}",
            role=role,
            status=status,
        )
        u.set_password("secret")
        session.add(u)
        session.commit()
        return u
    return _make


@pytest.fixture
def make_employee(session, make_user):
    seq = {"n": 0}

    def _make(user="new", is_active=True, code=None, department="Engineering",
              designation="Engineer", **salary):
        seq["n"] += 1
        if user == "new":
            user = make_user()
        e = Employee(
            user_id=user.id if user is not None else None,
            code=code or f"HTEMP{seq['n']:03d}",
            department=department,
            designation=designation,
            is_active=is_active,
            **{k: (Decimal(str(v)) if v is not None else None) for k, v in salary.items()},
        )
        session.add(e)
        session.commit()
        return e
    return _make


@pytest.fixture
def auth_header(app):
    def _hdr(user):
        token = create_access_token(identity=str(user.id), additional_claims={"roles": user.role_codes()})
        return {"Authorization": f"Bearer {token}"}
    return _hdr
