from pathlib import Path
from peewee import Database
from playhouse.db_url import connect
from dotenv import load_dotenv

from .peewee_models import AccountModel, db_proxy
from src.infra.logging_config import get_logger

logger = get_logger("db")

SQLITE_PREFIX = "sqlite:///"


def _ensure_sqlite_directory(database_url: str) -> None:
    """SQLiteファイルの親ディレクトリを作成する"""
    if not database_url.startswith(SQLITE_PREFIX):
        return
    path = database_url[len(SQLITE_PREFIX):]
    if not path or path == ":memory:":
        return
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def initialize_database(database_url: str) -> Database:
    """
    データベースに接続し、db_proxy に束縛する

    accounts テーブルが存在しない場合のみ作成する。
    """
    _ensure_sqlite_directory(database_url)

    db = connect(database_url)
    db_proxy.initialize(db)
    db.connect(reuse_if_open=True)
    db.create_tables([AccountModel], safe=True)

    logger.info("Database initialized", extra={"backend": type(db).__name__})
    return db


def close_database() -> None:
    db = db_proxy.obj
    if db is not None and not db.is_closed():
        db.close()


if __name__ == "__main__":
    load_dotenv()
    from src.infra.config import Settings

    initialize_database(Settings().database_url)
    close_database()
