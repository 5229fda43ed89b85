import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from shortlinks.core.config import settings
from redis.connection import ConnectionPool
import redis
from sqlalchemy import text

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL
logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """Sessions for work that outlives the request (click recording, stats)."""
    return SessionLocal


redis_client = None
if settings.REDIS_URL:
    pool = ConnectionPool.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        max_connections=50,
        socket_connect_timeout=2,
        socket_keepalive=True,
        retry_on_timeout=True,
    )
    redis_client = redis.Redis(connection_pool=pool)


def get_redis_client():
    return redis_client


def verify_redis_connection():
    if redis_client is None:
        logger.info("Redis cache disabled")
        return False
    try:
        redis_client.ping()
        logger.info("Redis connection verified")
        return True
    except redis.exceptions.ConnectionError as e:
        logger.warning(f"Redis connection failed: {e}. Service will run with degraded performance.")
        return False
    except Exception as e:
        logger.error(f"Unexpected Redis error: {e}")
        return False


def verify_database_connection():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
