import sys
import os

sys.path.append(os.getcwd())

from app.db.session import SessionLocal
from app.db.init_db import create_tables, seed_lookups

def main():
    print("Creating all tables...")
    create_tables()
    db = SessionLocal()
    try:
        seed_lookups(db)
    finally:
        db.close()
    print("Tables created and reference data seeded.")

if __name__ == "__main__":
    main()
