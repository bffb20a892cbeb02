import logging
from typing import Optional

from sqlalchemy.engine import Engine

from swipe_api.core.config import Settings
from swipe_api.core.database import create_db_engine, create_session_factory
from swipe_api.crud import AnswerStore, InMemoryAnswerStore, SqlAnswerStore
from swipe_api.crud.rooms import ensure_test_room
from swipe_api.models import Base

logger = logging.getLogger("uvicorn")


class ApplicationInitializer:
    """Builds the configured storage backend and prepares it for requests."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[Engine] = None

    def build_store(self) -> AnswerStore:
        backend = self.settings.STORAGE_BACKEND
        if backend == "memory":
            logger.info("🧠 Using in-memory answer store (data is lost on restart)")
            return InMemoryAnswerStore()

        self.engine = create_db_engine(self.settings.DATABASE_URL, echo=self.settings.SQL_ECHO)
        logger.info(f"🗄️ Using SQL answer store ({self.engine.dialect.name})")
        return SqlAnswerStore(create_session_factory(self.engine))

    def initialize_database(self) -> dict:
        if self.engine is None:
            return {"schema_created": False, "reason": "no database engine"}

        logger.info("🛠️ Creating database schema...")
        Base.metadata.create_all(bind=self.engine)
        logger.info("✅ Database schema ready")
        return {"schema_created": True, "tables": sorted(Base.metadata.tables)}

    def seed(self, store: AnswerStore) -> dict:
        if not self.settings.SEED_TEST_ROOM:
            return {"test_room": None}

        room = ensure_test_room(store, self.settings.TEST_ROOM_CODE)
        logger.info(f"🏠 Test room available: {room.code}")
        return {"test_room": room.code}

    def initialize(self) -> AnswerStore:
        store = self.build_store()
        self.initialize_database()
        self.seed(store)
        return store

    def shutdown(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
