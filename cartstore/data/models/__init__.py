#import modeli zeby SQLAlchemy zarejestrowal je w Base.metadata

from cartstore.data.models.kv_entry import KVEntryModel

__all__ = ["KVEntryModel"]
