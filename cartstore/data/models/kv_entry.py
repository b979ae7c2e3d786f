# cartstore/data/models/kv_entry.py
from sqlalchemy import Column, String, Text

from cartstore.data.database import Base


class KVEntryModel(Base):
    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
