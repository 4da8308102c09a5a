from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import SQLALCHEMY_DATABASE_URL


def make_engine(url: str = SQLALCHEMY_DATABASE_URL, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, echo=False, **kwargs)


engine = make_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind: Engine = engine) -> None:
    from . import model  # noqa: F401  register tables on Base.metadata

    Base.metadata.create_all(bind=bind)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
