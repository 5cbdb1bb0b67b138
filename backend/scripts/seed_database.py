# backend/scripts/seed_database.py
import asyncio
import logging
import random
import sys
from pathlib import Path

# Add the parent directory to sys.path to allow importing from docportal
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from docportal.config.constants import DocumentStatus, DocumentType, Role
from docportal.config.settings import settings
from docportal.core.auth import get_password_hash
from docportal.db.base import create_tables
from docportal.db.models import (
    AccountModel,
    DoctorProfileModel,
    DocumentModel,
    StudentProfileModel,
)

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

COMMON_PASSWORD = "TestPassword123!"

# (userId, email, first, last, department, specialization, courses)
DOCTORS = [
    ("D1001", "h.khalil@university.edu", "Hana", "Khalil", "Computer Science", "Distributed Systems", ["CS101", "WEB ADVANCE"]),
    ("D1002", "o.saleh@university.edu", "Omar", "Saleh", "Mathematics", "Linear Algebra", ["MATH201"]),
    ("D1003", "r.nasser@university.edu", "Rania", "Nasser", "Humanities", "Academic Writing", ["ENG105"]),
]

STUDENT_FIRST_NAMES = ["Jad", "Lina", "Karim", "Maya", "Samir", "Nour", "Fadi", "Yara", "Rami", "Dana"]
STUDENT_LAST_NAMES = ["Haddad", "Mansour", "Aziz", "Khoury", "Fares", "Saad", "Hamdan", "Jaber"]
ALL_COURSES = ["CS101", "MATH201", "ENG105", "WEB ADVANCE"]
NUM_STUDENTS = 10
DOCUMENTS_PER_STUDENT = 3


async def main() -> None:
    logger.info(f"Connecting to database at: {settings.database_url}")
    engine = create_async_engine(settings.database_url)
    await create_tables(engine)
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    password_hash = get_password_hash(COMMON_PASSWORD)

    async with async_session() as db:
        for user_id, email, first, last, department, specialization, courses in DOCTORS:
            if await db.scalar(select(AccountModel.id).where(AccountModel.user_id == user_id)):
                logger.info(f"Doctor {user_id} already exists. Skipping.")
                continue
            account = AccountModel(
                user_id=user_id,
                email=email,
                password_hash=password_hash,
                first_name=first,
                last_name=last,
                role=Role.DOCTOR.value,
                courses=courses,
            )
            account.doctor_profile = DoctorProfileModel(
                doctor_id=f"DR-{user_id}",
                department=department,
                specialization=specialization,
                courses=courses,
                office_hours=[{"day": "Monday", "startTime": "10:00", "endTime": "12:00"}],
            )
            db.add(account)
            logger.info(f"Added doctor {first} {last} ({user_id}) teaching {courses}")

        for n in range(1, NUM_STUDENTS + 1):
            user_id = f"S{2000 + n}"
            if await db.scalar(select(AccountModel.id).where(AccountModel.user_id == user_id)):
                logger.info(f"Student {user_id} already exists. Skipping.")
                continue
            courses = random.sample(ALL_COURSES, k=2)
            account = AccountModel(
                user_id=user_id,
                email=f"{user_id.lower()}@students.university.edu",
                password_hash=password_hash,
                first_name=random.choice(STUDENT_FIRST_NAMES),
                last_name=random.choice(STUDENT_LAST_NAMES),
                role=Role.STUDENT.value,
                courses=courses,
            )
            account.student_profile = StudentProfileModel(
                student_id=f"ST-{user_id}",
                department="Computer Science",
                year=random.randint(1, 4),
                semester=random.randint(1, 2),
                gpa=round(random.uniform(2.0, 4.0), 2),
                courses=courses,
            )
            for i in range(DOCUMENTS_PER_STUDENT):
                status = random.choice([DocumentStatus.DRAFT, DocumentStatus.SUBMITTED, DocumentStatus.SUBMITTED])
                account.documents.append(
                    DocumentModel(
                        title=f"Homework {i + 1}",
                        type=random.choice(list(DocumentType)).value,
                        description=f"Seeded document {i + 1} for {user_id}",
                        course=random.choice(courses),
                        status=status.value,
                    )
                )
            db.add(account)
            logger.info(f"Added student {user_id} enrolled in {courses}")

        await db.commit()
    await engine.dispose()
    logger.info(f"Seeding done. All accounts use the password '{COMMON_PASSWORD}'.")


if __name__ == "__main__":
    asyncio.run(main())
