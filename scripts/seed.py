from sqlalchemy.orm import Session

from database.db import SessionLocal
from database.init_db import init_db
from models.users import User as UserModel, Role, WorkType, Permission

# ✅ 초기 계정 (관리자 / 학과장 / 교수)
SEED_USERS = [
    {"name": "Admin System", "email": "admin@school.edu", "department": "Administration",
     "work_type": WorkType.FULL_TIME, "role": Role.ADMIN},
    {"name": "Reyes Maria", "email": "head@school.edu", "department": "Information Technology",
     "work_type": WorkType.FULL_TIME, "role": Role.ACADEMIC_HEAD},
    {"name": "Santos Juan", "email": "faculty@school.edu", "department": "Information Technology",
     "work_type": WorkType.PART_TIME, "role": Role.FACULTY},
]


def seed_users():
    init_db()
    db: Session = SessionLocal()
    try:
        existing = {email for (email,) in db.query(UserModel.email).all()}
        created = 0
        for data in SEED_USERS:
            if data["email"] in existing:
                continue
            db.add(UserModel(permission=Permission.GRANTED, **data))
            created += 1
        db.commit()
    finally:
        db.close()
    print(f"✅ 초기 사용자 {created}명 등록 완료")


if __name__ == "__main__":
    seed_users()
