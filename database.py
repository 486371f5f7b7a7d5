import logging

from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import get_db_url, normalize_db_url, settings

logger = logging.getLogger(__name__)

# Always talk to MySQL through pymysql.
raw_url = get_db_url(settings)
normalized_url = normalize_db_url(raw_url)
url_obj = make_url(normalized_url)
if url_obj.drivername.startswith("mysql") and url_obj.drivername != "mysql+pymysql":
    url_obj = url_obj.set(drivername="mysql+pymysql")

if url_obj.drivername.startswith("mysql"):
    query = dict(url_obj.query) if url_obj.query else {}
    query.setdefault("charset", "utf8mb4")
    url_obj = url_obj.set(query=query)

DATABASE_URL = url_obj.render_as_string(hide_password=False)

# Every store round-trip is bounded; a hung connection surfaces as a driver error.
connect_args: dict = {}
if url_obj.drivername.startswith("mysql"):
    connect_args["connect_timeout"] = settings.db_timeout_seconds
    connect_args["read_timeout"] = settings.db_timeout_seconds
    connect_args["write_timeout"] = settings.db_timeout_seconds
    if settings.db_ssl_ca:
        connect_args["ssl"] = {"ca": settings.db_ssl_ca}
elif url_obj.drivername.startswith("sqlite"):
    connect_args["timeout"] = settings.db_timeout_seconds
    connect_args["check_same_thread"] = False

safe_url = url_obj.set(password="***").render_as_string(hide_password=False) if url_obj.password else DATABASE_URL
logger.info("Connecting DB with URL: %s", safe_url)

engine_kwargs: dict = {}
if not url_obj.drivername.startswith("sqlite"):
    engine_kwargs["pool_timeout"] = settings.db_timeout_seconds

engine = create_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    connect_args=connect_args,
    pool_pre_ping=True,
    **engine_kwargs,
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
