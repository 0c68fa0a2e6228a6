#!/usr/bin/env python3
"""Tests for the Flask web front end."""

from datetime import date, timedelta

import pytest
from werkzeug.security import generate_password_hash

from models import ChildProfile, Session, User, load_store, save_child_profile, save_user
from models import auth
from web.app import app

USER = {"id": 1, "name": "Asha Rao", "email": "asha@example.com"}


@pytest.fixture
def store_file(tmp_path):
    return tmp_path / "vaxtrack.yaml"


@pytest.fixture
def client(store_file):
    app.config.update(TESTING=True, STORE_PATH=str(store_file), SIMULATED_DELAY=0)
    with app.test_client() as client:
        yield client


@pytest.fixture
def logged_in(client):
    with client.session_transaction() as sess:
        sess["auth"] = Session(user=dict(USER)).to_dict()
    return client


class TestPublicPages:
    """Tests for the landing and schedule pages."""

    def test_index_lists_timeline(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert b"BCG" in response.data
        assert b"Meningococcal" in response.data
        assert b"At birth" in response.data

    def test_schedule_page(self, client):
        response = client.get("/schedule?dob=2024-01-01")
        assert response.status_code == 200
        assert b"2024-02-12" in response.data

    def test_schedule_invalid_redirects(self, client):
        response = client.get("/schedule?dob=2024-02-30")
        assert response.status_code == 302

    def test_schedule_out_of_range_redirects(self, client):
        response = client.get("/schedule?dob=9999-12-31")
        assert response.status_code == 302


class TestScheduleApi:
    """Tests for GET /api/schedule."""

    def test_returns_schedule(self, client):
        response = client.get("/api/schedule?dob=2024-01-01")
        assert response.status_code == 200
        data = response.get_json()
        assert data["dob"] == "2024-01-01"
        assert len(data["schedule"]) == 32
        assert data["schedule"][3] == {
            "name": "DPT (1st dose)",
            "dueDate": "2024-02-12",
            "completed": False,
            "reminderSent": False,
        }

    def test_invalid_date(self, client):
        response = client.get("/api/schedule?dob=not-a-date")
        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_missing_date(self, client):
        assert client.get("/api/schedule").status_code == 400

    def test_date_too_late_for_schedule(self, client):
        response = client.get("/api/schedule?dob=9995-06-01")
        assert response.status_code == 400
        assert "out of range" in response.get_json()["error"]


class TestSignup:
    """Tests for signup and OTP verification."""

    FORM = {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "password": "Passw0rd!",
        "confirm_password": "Passw0rd!",
    }

    def test_form_error_shown(self, client):
        form = dict(self.FORM, email="asha")
        response = client.post("/signup", data=form)
        assert response.status_code == 200
        assert b"Please enter a valid email address" in response.data

    def test_full_flow(self, client, store_file, monkeypatch):
        monkeypatch.setattr(auth, "generate_otp", lambda: "123456")

        response = client.post("/signup", data=self.FORM)
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/verify")

        response = client.post("/verify", data={"otp": list("123456")})
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dashboard")

        assert load_store(store_file).get_user_by_email("asha@example.com") is not None
        response = client.get("/dashboard")
        assert response.status_code == 200
        assert b"Your children" in response.data

    def test_wrong_otp(self, client, monkeypatch):
        monkeypatch.setattr(auth, "generate_otp", lambda: "123456")
        client.post("/signup", data=self.FORM)
        response = client.post("/verify", data={"otp": list("654321")})
        assert response.status_code == 200
        assert b"Invalid OTP" in response.data

    def test_verify_without_signup_redirects(self, client):
        response = client.get("/verify")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/signup")


class TestLogin:
    """Tests for login and logout."""

    @pytest.fixture(autouse=True)
    def registered(self, store_file):
        save_user(
            store_file,
            User(None, "Asha Rao", "asha@example.com", generate_password_hash("Passw0rd!")),
        )

    def test_success(self, client):
        response = client.post(
            "/login", data={"email": "asha@example.com", "password": "Passw0rd!"}
        )
        assert response.status_code == 302
        assert client.get("/dashboard").status_code == 200

    def test_wrong_password(self, client):
        response = client.post(
            "/login", data={"email": "asha@example.com", "password": "nope"}
        )
        assert response.status_code == 200
        assert b"Invalid email or password" in response.data

    def test_logout(self, client):
        client.post("/login", data={"email": "asha@example.com", "password": "Passw0rd!"})
        assert client.post("/logout").status_code == 302
        assert client.get("/dashboard").status_code == 302


class TestChildren:
    """Tests for child profile pages."""

    def test_dashboard_requires_login(self, client):
        response = client.get("/dashboard")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login")

    def test_add_child(self, logged_in, store_file):
        dob = (date.today() - timedelta(days=30)).isoformat()
        response = logged_in.post(
            "/children", data={"name": "Meera", "dob": dob, "blood_group": "O+"}
        )
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/children/1")

        child = load_store(store_file).get_child(1)
        assert child.user_id == 1
        assert child.dob == dob
        assert child.blood_group == "O+"
        assert child.gender is None

    def test_add_child_future_dob(self, logged_in, store_file):
        dob = (date.today() + timedelta(days=1)).isoformat()
        response = logged_in.post("/children", data={"name": "Meera", "dob": dob})
        assert response.status_code == 302
        assert load_store(store_file).children == []

    def test_add_child_requires_name(self, logged_in, store_file):
        response = logged_in.post("/children", data={"name": " ", "dob": "2024-01-01"})
        assert response.status_code == 302
        assert load_store(store_file).children == []

    def test_child_detail(self, logged_in, store_file):
        save_child_profile(store_file, ChildProfile.create(1, "Meera", "2024-01-01"))
        response = logged_in.get("/children/1")
        assert response.status_code == 200
        assert b"Meera" in response.data
        assert b"DPT (1st dose)" in response.data

    def test_dashboard_lists_children(self, logged_in, store_file):
        save_child_profile(store_file, ChildProfile.create(1, "Meera", "2024-01-01"))
        response = logged_in.get("/dashboard")
        assert b"Meera" in response.data

    def test_other_users_child_hidden(self, logged_in, store_file):
        save_child_profile(store_file, ChildProfile.create(2, "Other", "2024-01-01"))
        response = logged_in.get("/children/1")
        assert response.status_code == 302

    def test_complete_and_undo(self, logged_in, store_file):
        save_child_profile(store_file, ChildProfile.create(1, "Meera", "2024-01-01"))

        response = logged_in.post("/children/1/events/0/complete")
        assert response.status_code == 302
        assert load_store(store_file).get_child(1).schedule[0].completed is True

        logged_in.post("/children/1/events/0/complete", data={"completed": "false"})
        assert load_store(store_file).get_child(1).schedule[0].completed is False

    def test_complete_bad_index(self, logged_in, store_file):
        save_child_profile(store_file, ChildProfile.create(1, "Meera", "2024-01-01"))
        response = logged_in.post("/children/1/events/40/complete")
        assert response.status_code == 302
        schedule = load_store(store_file).get_child(1).schedule
        assert not any(e.completed for e in schedule)
