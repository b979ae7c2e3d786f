# cartstore/repos/sqlite_storage.py
from sqlalchemy.exc import SQLAlchemyError

from cartstore.data.database import Base, make_session_factory
from cartstore.data.models.kv_entry import KVEntryModel
from cartstore.utils.settings import STORAGE_URL
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)


class SqliteStorage:
    """
    Domyslny, wbudowany magazyn trwaly: jedna tabela kv_store przez SQLAlchemy.
    Operacje sa synchroniczne i szybkie (plik lokalny), wiec nie ida do watku.
    """

    def __init__(self, url: str | None = None):
        self.url = url or STORAGE_URL
        self.engine, self.SessionLocal = make_session_factory(self.url)
        Base.metadata.create_all(bind=self.engine)

    async def get_item(self, key: str) -> str | None:
        try:
            with self.SessionLocal() as db:
                row = db.get(KVEntryModel, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            logger.error(f"Storage read failed for {key}: {e}")
            return None

    async def set_item(self, key: str, value: str) -> None:
        try:
            with self.SessionLocal() as db:
                # merge = upsert po kluczu glownym
                db.merge(KVEntryModel(key=key, value=value))
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Storage write failed for {key}: {e}")

    async def remove_item(self, key: str) -> None:
        try:
            with self.SessionLocal() as db:
                db.query(KVEntryModel).filter(KVEntryModel.key == key).delete()
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Storage delete failed for {key}: {e}")

    def close(self) -> None:
        self.engine.dispose()
