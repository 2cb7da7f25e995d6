"""
Database connection and session handling.

One engine per process; FastAPI routes get a short-lived session
through the get_db dependency.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from analytics_app.config import settings


connect_args = {}
if settings.database_url.startswith("sqlite"):
    # SQLite connections are shared across the threadpool used by FastAPI
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session and always close it afterwards"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
