import os
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import create_engine


def database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    db_user = os.environ["POSTGRES_USER"]
    db_password = os.environ["POSTGRES_PASSWORD"]
    db_name = os.environ["POSTGRES_DB"]
    db_host = os.environ["POSTGRES_HOST"]
    db_port = os.environ["POSTGRES_PORT"]

    return f"postgresql+psycopg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = database_url()
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)
