# catalogy/database.py
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine


def _with_ssl(db_url: str) -> str:
    """Append sslmode=require to Postgres URLs if it is not already present."""
    if not db_url.startswith("postgres") or "sslmode=" in db_url:
        return db_url
    if "?" in db_url:
        return db_url + "&sslmode=require"
    return db_url + "?sslmode=require"


def build_engine(db_url: str, **kwargs) -> Engine:
    """
    Create the SQL engine for the document store.

    Supabase Postgres connection (via pooler):
      - sslmode=require   : enforce SSL when running in the cloud
      - pool_size=1       : keep only 1 connection to the Supabase pooler
      - max_overflow=0    : do not open extra connections beyond the pool
      - pool_pre_ping=True: validate connections before using them

    Supabase Session mode limits the number of clients. If each backend
    process opens many connections you can easily hit
    "MaxClientsInSessionMode: max clients reached".

    Extra kwargs are passed straight to `create_engine` (tests use this to
    plug an in-memory SQLite engine with StaticPool).
    """
    if db_url.startswith("postgres"):
        options = {"pool_pre_ping": True, "pool_size": 1, "max_overflow": 0}
    else:
        options = {}
    options.update(kwargs)
    return create_engine(_with_ssl(db_url), echo=False, **options)


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    # Import models so SQLModel metadata is populated before create_all()
    from catalogy.models import analytics as _analytics_models  # noqa: F401
    from catalogy.models import profile as _profile_models  # noqa: F401
    from catalogy.models import store as _store_models  # noqa: F401

    SQLModel.metadata.create_all(engine)
