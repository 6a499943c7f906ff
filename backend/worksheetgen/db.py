from __future__ import annotations
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./worksheets.db"

_is_sqlite = DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()

if _is_sqlite:
	@event.listens_for(engine, "connect")
	def _enable_foreign_keys(dbapi_conn, _record):
		# Progress rows cascade with their saved worksheet
		dbapi_conn.execute("PRAGMA foreign_keys=ON")


def init_db() -> None:
	from . import models  # noqa: F401  registers tables on Base

	Base.metadata.create_all(bind=engine)


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()
