import argparse
import sys
import os

sys.path.append(os.getcwd())

from app.db.session import SessionLocal
from app.db.init_db import create_tables, seed_lookups
from app.db.models.user import User
from app.core.security import get_password_hash

def create_user(username: str, email: str, password: str, full_name: str, role: str):
    create_tables()
    db = SessionLocal()
    try:
        seed_lookups(db)
        existing = db.query(User).filter((User.username == username) | (User.email == email)).first()
        if existing:
            print(f"User '{existing.username}' already exists.")
            return

        user = User(
            username=username,
            email=email,
            hashed_password=get_password_hash(password),
            full_name=full_name,
            role=role
        )
        db.add(user)
        db.commit()
        print(f"{role.capitalize()} user '{username}' created (id {user.id}).")
    finally:
        db.close()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create an OJT Tracker account")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--full-name", default="Administrator")
    parser.add_argument("--role", choices=["admin", "user"], default="admin")
    args = parser.parse_args()
    create_user(args.username, args.email.strip().lower(), args.password, args.full_name, args.role)
