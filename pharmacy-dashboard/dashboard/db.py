"""
db.py
=====
SQLite connection for the ticket feed service.
The file location comes from DASHBOARD_FEED_DB (default data/feed.db).
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

DB_PATH = os.getenv("DASHBOARD_FEED_DB", "data/feed.db")

if os.path.dirname(DB_PATH):
    os.makedirs(os.path.dirname(DB_PATH), exist_ok=True)

# Requests are served from FastAPI's worker threads, so SQLite's same-thread check is off
engine = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(Base):
    """Create the feed tables if they are missing. Safe to call repeatedly."""
    Base.metadata.create_all(bind=engine)


def reset_db(Base):
    """Drop and recreate every feed table (local demos and tests)."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
