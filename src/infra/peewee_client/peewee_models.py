from peewee import (
    DatabaseProxy,
    Model,
    CharField,
    BigIntegerField,
    DateTimeField,
    TextField,
    )

import datetime

db_proxy = DatabaseProxy()


def utcnow_naive() -> datetime.datetime:
    # DB には UTC の naive datetime として保存する
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class AccountModel(Model):
    first_name = CharField(max_length=255)
    last_name = CharField(max_length=255)
    number = BigIntegerField(index=True)
    password = TextField()
    balance = BigIntegerField(default=0)
    created_at = DateTimeField(default=utcnow_naive)

    class Meta:
        database = db_proxy
        table_name = "accounts"
