import pytest
from sqlalchemy.orm import sessionmaker

from lado.db.base import Base
from lado.db.session import make_engine
from lado.models.age_verification_log import AgeVerificationLog
from lado.models.content import Content
from lado.models.subscription import Subscription
from lado.models.user import User

# moderation_logs uses JSONB and is left out of the SQLite schema.
SQLITE_TABLES = [
    User.__table__,
    Content.__table__,
    Subscription.__table__,
    AgeVerificationLog.__table__,
]


@pytest.fixture
def sqlite_db():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine, tables=SQLITE_TABLES)
    db = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
