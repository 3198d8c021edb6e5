"""HTTP-level tests for /api/v1/users profile endpoints."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from vetclinic.core.roles import Role
from vetclinic.db.models.user import User
from vetclinic.services import accounts as account_service

EMPLOYEE_PROFILE = "/api/v1/users/update-employee-profile"
OWNER_PROFILE = "/api/v1/users/update-petowner-profile"


@pytest.fixture
def owner_headers(client):
    client.post(
        "/api/v1/auth/register-owner",
        json={
            "email": "ana.reyes@example.com",
            "password": "correct-horse",
            "first_name": "Ana",
            "last_name": "Reyes",
            "contact": "09170000000",
            "address": "12 Mabini St",
            "alt_person": "Ben Reyes",
            "alt_contact": "09179999999",
        },
    )
    login = client.post(
        "/api/v1/auth/login", json={"email": "ana.reyes@example.com", "password": "correct-horse"}
    )
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


class TestEmployeeProfile:
    def test_partial_update_keeps_other_fields(self, client, auth_headers):
        headers = auth_headers(Role.DOCTOR)
        before = client.get("/api/v1/auth/me", headers=headers).json()

        response = client.put(EMPLOYEE_PROFILE, json={"first_name": "Gregorio"}, headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Employee profile updated successfully!"
        assert data["user"]["first_name"] == "Gregorio"
        assert data["user"]["last_name"] == before["last_name"]
        assert data["user"]["email"] == before["email"]

    def test_email_is_normalized(self, client, auth_headers):
        headers = auth_headers(Role.CLINICIAN)

        response = client.put(EMPLOYEE_PROFILE, json={"email": "  New.Mail@Clinic.TEST "}, headers=headers)

        assert response.json()["user"]["email"] == "new.mail@clinic.test"

    def test_email_taken_by_another_account(self, client, auth_headers, make_user):
        other = make_user(Role.CLINICIAN)
        headers = auth_headers(Role.DOCTOR)

        response = client.put(
            EMPLOYEE_PROFILE, json={"email": other.user_email, "first_name": "Gregorio"}, headers=headers
        )

        assert response.status_code == 409
        assert response.json() == {"detail": "Email already registered"}
        assert client.get("/api/v1/auth/me", headers=headers).json()["first_name"] == "Doctor"

    def test_email_race_lost_at_the_unique_index(self, client, auth_headers, make_user, db, monkeypatch):
        other = make_user(Role.CLINICIAN)
        headers = auth_headers(Role.DOCTOR)
        monkeypatch.setattr(account_service, "email_taken", lambda *args, **kwargs: False)

        response = client.put(EMPLOYEE_PROFILE, json={"email": other.user_email}, headers=headers)

        assert response.status_code == 409
        emails = db.scalars(select(User.user_email).where(User.user_email == other.user_email)).all()
        assert emails == [other.user_email]

    def test_database_failure(self, client, auth_headers, monkeypatch):
        def broken_flush(db):
            raise OperationalError("UPDATE users ...", {}, Exception("connection lost"))

        monkeypatch.setattr(account_service, "flush_unique", broken_flush)

        response = client.put(EMPLOYEE_PROFILE, json={"contact": "0999"}, headers=auth_headers(Role.DOCTOR))

        assert response.status_code == 500
        assert response.json() == {"detail": "Server error while updating profile."}

    def test_owners_cannot_use_employee_endpoint(self, client, owner_headers):
        response = client.put(EMPLOYEE_PROFILE, json={"first_name": "X"}, headers=owner_headers)
        assert response.status_code == 403


class TestOwnerProfile:
    def test_update_user_and_owner_fields(self, client, owner_headers):
        response = client.put(
            OWNER_PROFILE,
            json={"contact": "09171111111", "address": "3 Rizal Ave"},
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Pet owner profile updated successfully!"
        assert data["profile"]["contact"] == "09171111111"
        assert data["profile"]["address"] == "3 Rizal Ave"
        assert data["profile"]["alt_person"] == "Ben Reyes"
        assert data["profile"]["first_name"] == "Ana"

        fetched = client.get("/api/v1/users/petowner-profile", headers=owner_headers).json()
        assert fetched == data["profile"]

    def test_null_values_keep_stored_fields(self, client, owner_headers):
        response = client.put(
            OWNER_PROFILE, json={"address": None, "alt_contact": None}, headers=owner_headers
        )

        assert response.json()["profile"]["address"] == "12 Mabini St"
        assert response.json()["profile"]["alt_contact"] == "09179999999"

    def test_owner_user_without_owner_row(self, client, auth_headers):
        response = client.put(OWNER_PROFILE, json={"address": "X"}, headers=auth_headers(Role.OWNER))

        assert response.status_code == 404
        assert response.json() == {"detail": "Owner profile not found."}

    def test_staff_cannot_use_owner_endpoint(self, client, auth_headers):
        response = client.put(OWNER_PROFILE, json={"address": "X"}, headers=auth_headers(Role.DOCTOR))
        assert response.status_code == 403
