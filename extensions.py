"""
Модуль: `extensions.py`.
Назначение: Инициализация и экспорт экземпляров Flask-расширений.
"""

import sqlite3

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_babel import Babel
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Все расширения создаём здесь и инициализируем в фабрике приложения
db = SQLAlchemy()
login_manager = LoginManager()
cors = CORS()
babel = Babel()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite по умолчанию не проверяет внешние ключи и не выполняет ON DELETE CASCADE."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
