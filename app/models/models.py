from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, Integer, String, Text, DateTime, BigInteger
from datetime import datetime


Base = declarative_base()


class StorageEntry(Base):
    """
    Долговременное хранилище "ключ-значение" пользователя.
    Корзина хранится одной JSON-строкой под фиксированным ключом.
    """
    __tablename__ = "storage_entries"

    owner_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, nullable=False)
    key = Column(String(64), primary_key=True, nullable=False)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<StorageEntry(owner_id={self.owner_id}, key='{self.key}', size={len(self.value or '')})>"
