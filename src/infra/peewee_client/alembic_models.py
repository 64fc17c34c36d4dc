"""
SQLAlchemy models for Alembic migrations

peewee_models.AccountModel と同じテーブル定義を保つこと。
"""
from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Text, Index
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Account(Base):
    __tablename__ = 'accounts'

    id = Column(Integer, primary_key=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    number = Column(BigInteger, nullable=False)
    password = Column(Text, nullable=False)
    balance = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    # peewee が生成するインデックス名に合わせる
    __table_args__ = (
        Index("accounts_number", "number"),
    )
