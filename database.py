# database.py - User directory storage
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request
import time
import logging

logger = logging.getLogger(__name__)


def create_engine_with_retry(database_url, max_retries=5, retry_delay=2):
    """Create database engine with connection retry logic"""
    if database_url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across threads
        options = {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    else:
        options = {
            "pool_pre_ping": True,  # Verify connections before use
            "pool_recycle": 300,    # Recycle connections every 5 minutes
        }

    for attempt in range(max_retries):
        try:
            engine = create_engine(database_url, echo=False, **options)

            # Test the connection
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()

            logger.info(f"Database engine created successfully on attempt {attempt + 1}")
            return engine

        except Exception as e:
            logger.warning(f"Database connection attempt {attempt + 1} failed: {e}")
            if attempt < max_retries - 1:
                logger.info(f"Retrying in {retry_delay} seconds...")
                time.sleep(retry_delay)
            else:
                logger.error("All database connection attempts failed")
                raise


Base = declarative_base()


def create_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Dependency to get a session on the app's own database"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind):
    """Create all tables"""
    # Register the models on Base.metadata before creating anything
    import model  # noqa: F401

    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        return False


def check_connection(bind):
    """Return True when the database answers a trivial query"""
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
