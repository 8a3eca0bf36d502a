from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Base class for all ORM models
Base = declarative_base()

# Import all models so that SQLAlchemy knows about them when creating tables
from .user import User
from .budget import Budget
from .transaction import Transaction
from .monthly_metric import MonthlyMetric


def init_db(database_url: str, **engine_options):
    """
    Initialize the database connection and create tables for all registered ORM models.
    """
    if database_url.startswith("sqlite"):
        engine_options.setdefault("connect_args", {"check_same_thread": False})
    else:
        engine_options.setdefault("pool_pre_ping", True)
    engine = create_engine(database_url, **engine_options)
    # Create all tables defined by subclasses of Base
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine):
    """SQLAlchemy session factory bound to one engine; shared by the web app and the scheduler."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
