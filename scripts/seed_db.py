# scripts/seed_db.py
"""Create tables and load the starter catalog into DATABASE_URL."""
from backend.db import Base, SessionLocal, engine
from backend.seed import seed_database

Base.metadata.create_all(bind=engine)
db = SessionLocal()
try:
    print("Seeded." if seed_database(db) else "Nothing to seed.")
finally:
    db.close()
