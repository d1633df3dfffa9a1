import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from matcha_watch.config import Settings
from matcha_watch.db.database import Base, init_db

BASE_SETTINGS = {
    "job_interval_minutes": 15,
    "products_url": "https://shop.example.com/collections/matcha?page=1",
    "matcha_brands": "maruyasu,marukyu",
    "matcha_variants": "matcha,koicha",
    "smtp_url": "smtp.example.com",
    "smtp_user": "checker",
    "smtp_password": "secret",
    "smtp_sender": "Matcha Watch <checker@example.com>",
    "smtp_recipient": "me@example.com",
    "smtp_notification_subject": "Matcha in stock",
}


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {**BASE_SETTINGS, **overrides}
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def db_session():
    engine = create_engine("sqlite:///:memory:")
    init_db(engine)
    with Session(engine) as session:
        yield session
    Base.metadata.drop_all(engine)
