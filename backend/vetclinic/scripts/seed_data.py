"""Module: seed_data."""

from faker import Faker
import random
import string
import csv
from pathlib import Path
from datetime import date, timedelta
from sqlalchemy import select, text

from vetclinic.core.roles import Role
from vetclinic.core.security import hash_password
from vetclinic.db.init_db import init_db
from vetclinic.db.session import SessionLocal

from vetclinic.db.models.user import User
from vetclinic.db.models.owner import Owner
from vetclinic.db.models.pet import Pet, Species
from vetclinic.db.models.laboratory import Laboratory
from vetclinic.db.models.vaccination import ImmunizationRecord, Vaccine
from vetclinic.db.models.record import RecordInfo
from vetclinic.services.age import compute_age

fake = Faker()

SPECIES = ["Dog", "Cat", "Bird", "Rabbit"]
VACCINES = ["Anti-Rabies", "5-in-1", "6-in-1", "8-in-1", "Kennel Cough", "4-in-1 (Feline)", "Deworming"]
LAB_TESTS = ["CBC", "Blood Chemistry", "Urinalysis", "Fecal Exam", "X-Ray", "Ultrasound", "Skin Scraping"]

DOG_BREEDS = [
    "Aspin",
    "Shih Tzu",
    "Labrador Retriever",
    "Golden Retriever",
    "Beagle",
    "Pomeranian",
    "Siberian Husky",
    "Chihuahua",
]

CAT_BREEDS = [
    "Puspin",
    "Persian",
    "Siamese",
    "British Shorthair",
    "Maine Coon",
]

VISIT_PURPOSES = ["Check-up", "Vaccination", "Deworming", "Follow-up", "Consultation", "Grooming check"]


# Shared helpers used by multiple seed builders.
def generate_password(length: int = 12) -> str:
    chars = string.ascii_letters + string.digits
    return "".join(random.choice(chars) for _ in range(length))


def generate_mobile() -> str:
    return "09" + "".join(random.choice(string.digits) for _ in range(9))


def export_credentials(rows: list[tuple[User, str]]) -> Path:
    # Plaintext passwords exist only here; the database keeps hashes.
    out_path = Path(__file__).resolve().parent / "seeded_user_credentials.csv"
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["user_id", "email", "password", "role"])
        for user, password in rows:
            writer.writerow([str(user.user_id), user.user_email, password, user.user_role])
    return out_path


def reset_db(session) -> None:
    # Keep reset order explicit so FK dependencies truncate cleanly.
    session.execute(text("""
        TRUNCATE TABLE
          immunization_record,
          match_record_lab,
          record_info,
          surgery_info,
          diagnosis_info,
          laboratories,
          vaccines,
          pet_info,
          species,
          owner,
          users
        RESTART IDENTITY CASCADE;
    """))
    session.commit()


def seed_lookups(session) -> dict[str, list]:
    species = [Species(spec_description=name) for name in SPECIES]
    vaccines = [Vaccine(vax_type=name) for name in VACCINES]
    labs = [Laboratory(lab_description=name) for name in LAB_TESTS]
    session.add_all(species + vaccines + labs)
    session.commit()
    return {"species": species, "vaccines": vaccines, "labs": labs}


def _new_user(role: Role, first_name: str, last_name: str) -> tuple[User, str]:
    password = generate_password()
    user = User(
        user_email=fake.unique.email(),
        user_password=hash_password(password),
        user_role=role.value,
        user_firstname=first_name,
        user_lastname=last_name,
        user_contact=generate_mobile(),
    )
    return user, password


def seed_staff(session, doctors: int = 2, clinicians: int = 4) -> list[tuple[User, str]]:
    rows: list[tuple[User, str]] = []
    for role, n in ((Role.DOCTOR, doctors), (Role.CLINICIAN, clinicians), (Role.ADMIN, 1)):
        for _ in range(n):
            rows.append(_new_user(role, fake.first_name(), fake.last_name()))
    session.add_all([user for user, _ in rows])
    session.commit()
    return rows


def seed_owners(session, n: int = 50) -> tuple[list[Owner], list[tuple[User, str]]]:
    # OWNER records are derived from users rather than generated independently.
    rows = [_new_user(Role.OWNER, fake.first_name(), fake.last_name()) for _ in range(n)]
    session.add_all([user for user, _ in rows])
    session.flush()

    owners = [
        Owner(
            user_id=user.user_id,
            owner_address=fake.address().replace("\n", ", "),
            owner_alt_person1=fake.name(),
            owner_alt_contact1=generate_mobile(),
        )
        for user, _ in rows
    ]
    session.add_all(owners)
    session.commit()
    return owners, rows


def seed_pets(session, owners: list[Owner], species: list[Species], n: int = 100) -> list[Pet]:
    # Mixed population; stored age is always derived from the birthday.
    today = date.today()
    by_name = {s.spec_description: s for s in species}
    pets: list[Pet] = []

    for _ in range(n):
        kind = random.choice(["Dog", "Cat"])
        breed = random.choice(DOG_BREEDS if kind == "Dog" else CAT_BREEDS)
        birthday = fake.date_between(start_date="-12y", end_date="-2m")
        age = compute_age(birthday, today)

        pets.append(Pet(
            owner_id=random.choice(owners).owner_id,
            species_id=by_name[kind].spec_id,
            pet_name=fake.first_name(),
            pet_gender=random.choice(["Male", "Female"]),
            pet_breed=breed,
            pet_color=fake.color_name(),
            pet_birthday=birthday,
            pet_age_year=age.years,
            pet_age_month=age.months,
        ))

    session.add_all(pets)
    session.commit()
    return pets


def seed_records_and_vaccinations(session, pets: list[Pet], vaccines: list[Vaccine]) -> tuple[int, int]:
    today = date.today()
    records: list[RecordInfo] = []
    immunizations: list[ImmunizationRecord] = []

    for pet in pets:
        for _ in range(random.randint(0, 3)):
            records.append(RecordInfo(
                pet_id=pet.pet_id,
                record_date=today - timedelta(days=random.randint(1, 720)),
                record_purpose=random.choice(VISIT_PURPOSES),
                record_weight=round(random.uniform(1.5, 40.0), 2),
                record_temp=round(random.uniform(37.5, 39.5), 1),
                record_condition=random.choice(["Stable", "Good", "Fair"]),
                record_symptom=random.choice(["None", "Coughing", "Lethargy", "Itching", "Vomiting"]),
                record_recent_visit=(today - timedelta(days=random.randint(30, 900))).isoformat(),
                record_purchase=random.choice(["None", "Dog food", "Shampoo", "Vitamins"]),
            ))
        for _ in range(random.randint(0, 2)):
            immunizations.append(ImmunizationRecord(
                pet_id=pet.pet_id,
                vax_id=random.choice(vaccines).vax_id,
                imm_rec_quantity=random.randint(1, 2),
                imm_rec_date=today - timedelta(days=random.randint(1, 720)),
            ))

    session.add_all(records + immunizations)
    session.commit()
    return len(records), len(immunizations)


if __name__ == "__main__":
    # Full reseed pipeline: python -m vetclinic.scripts.seed_data
    init_db()
    session = SessionLocal()
    try:
        print("Resetting tables...")
        reset_db(session)

        print("Seeding species, vaccines and laboratories...")
        lookups = seed_lookups(session)

        print("Seeding staff users...")
        staff_rows = seed_staff(session)

        print("Seeding owners (50)...")
        owners, owner_rows = seed_owners(session, 50)

        print("Seeding pets (100)...")
        pets = seed_pets(session, owners, lookups["species"], 100)

        print("Seeding visit records + vaccinations...")
        record_n, vax_n = seed_records_and_vaccinations(session, pets, lookups["vaccines"])

        creds_path = export_credentials(staff_rows + owner_rows)
        user_n = session.execute(select(User.user_id)).all()

        print(f"Done. users={len(user_n)}, pets={len(pets)}, records={record_n}, vaccinations={vax_n}")
        print(f"Credentials export: {creds_path}")
    finally:
        session.close()
