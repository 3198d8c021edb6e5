import pytest
from sqlalchemy import select

from vetclinic.core.roles import Role
from vetclinic.db.models.pet import PET_ARCHIVED, Pet


class TestPetProfile:
    def test_get_pet_detail(self, client, auth_headers, pet):
        response = client.get(f"/api/v1/pets/{pet.pet_id}", headers=auth_headers(Role.OWNER))

        assert response.status_code == 200
        data = response.json()
        assert data["pet_name"] == "Bantay"
        assert data["species"] == "Dog"
        assert data["owner_name"].startswith("Owner ")

    def test_unknown_pet(self, client, auth_headers):
        response = client.get("/api/v1/pets/404", headers=auth_headers(Role.DOCTOR))

        assert response.status_code == 404
        assert response.json() == {"detail": "Pet not found."}

    def test_age_mismatch_is_rejected_with_computed_age(self, client, auth_headers, pet):
        response = client.patch(
            f"/api/v1/pets/{pet.pet_id}",
            json={"pet_birthday": "2020-01-01", "pet_age_year": 3, "pet_age_month": 0},
            headers=auth_headers(Role.DOCTOR),
        )

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Age mismatch! The computed age based on birthday is 5 years and 3 months."
        }

    def test_new_birthday_stores_computed_age(self, client, auth_headers, pet, db):
        response = client.patch(
            f"/api/v1/pets/{pet.pet_id}",
            json={"pet_birthday": "2021-01-15", "pet_breed": "Shih Tzu"},
            headers=auth_headers(Role.CLINICIAN),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Pet profile updated successfully!"
        assert data["pet"]["pet_birthday"] == "2021-01-15"
        assert data["pet"]["pet_age_year"] == 4
        assert data["pet"]["pet_age_month"] == 2
        assert data["pet"]["pet_breed"] == "Shih Tzu"

    @pytest.mark.parametrize("years, months", [(5, 12), (-1, 3)])
    def test_out_of_range_age_is_an_age_mismatch(self, client, auth_headers, pet, years, months):
        response = client.patch(
            f"/api/v1/pets/{pet.pet_id}",
            json={"pet_birthday": "2020-01-01", "pet_age_year": years, "pet_age_month": months},
            headers=auth_headers(Role.DOCTOR),
        )

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Age mismatch! The computed age based on birthday is 5 years and 3 months."
        }

    def test_matching_age_is_accepted(self, client, auth_headers, pet):
        response = client.patch(
            f"/api/v1/pets/{pet.pet_id}",
            json={"pet_age_year": 5, "pet_age_month": 3},
            headers=auth_headers(Role.DOCTOR),
        )

        assert response.status_code == 200
        assert response.json()["pet"]["pet_age_year"] == 5

    def test_future_birthday_is_rejected(self, client, auth_headers, pet):
        response = client.patch(
            f"/api/v1/pets/{pet.pet_id}",
            json={"pet_birthday": "2025-05-01"},
            headers=auth_headers(Role.DOCTOR),
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Birthday cannot be in the future."}

    def test_species_change(self, client, auth_headers, pet):
        headers = auth_headers(Role.DOCTOR)

        ok = client.patch(f"/api/v1/pets/{pet.pet_id}", json={"species": "Cat"}, headers=headers)
        bad = client.patch(f"/api/v1/pets/{pet.pet_id}", json={"species": "Dragon"}, headers=headers)

        assert ok.json()["pet"]["species"] == "Cat"
        assert bad.status_code == 400
        assert bad.json() == {"detail": "Invalid species."}

    def test_owner_cannot_edit_profile(self, client, auth_headers, pet):
        response = client.patch(
            f"/api/v1/pets/{pet.pet_id}", json={"pet_name": "Rex"}, headers=auth_headers(Role.OWNER)
        )
        assert response.status_code == 403


class TestArchive:
    def test_archive_and_restore(self, client, auth_headers, pet, db):
        headers = auth_headers(Role.DOCTOR)

        archived = client.put(f"/api/v1/pets/{pet.pet_id}/archive", headers=headers)
        assert archived.json() == {"message": "Pet Bantay archived successfully!"}
        assert db.scalar(select(Pet.pet_status).where(Pet.pet_id == pet.pet_id)) == PET_ARCHIVED
        assert client.get("/api/v1/pets/active", headers=headers).json() == []
        assert [p["pet_id"] for p in client.get("/api/v1/pets/archived", headers=headers).json()] == [pet.pet_id]

        restored = client.put(f"/api/v1/pets/{pet.pet_id}/restore", headers=headers)
        assert restored.json() == {"message": "Pet Bantay restored successfully!"}
        assert [p["pet_id"] for p in client.get("/api/v1/pets/active", headers=headers).json()] == [pet.pet_id]
