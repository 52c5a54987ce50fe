# database.py
from sqlmodel import create_engine, Session, SQLModel

from shop_api import settings
from shop_api.models import CustomerSQL, ProductSQL, UserSQL, AuthTokenSQL  # noqa: F401 (registers tables)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints in a threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """Yield one session per request; closed (and rolled back if uncommitted) afterwards."""
    with Session(engine) as session:
        yield session
