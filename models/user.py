"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: models/user.py – модель пользователя системы.

Назначение модуля:
- Описание ORM-модели User для работы с таблицей пользователей в базе данных.
- Хранение учётных записей (логин, хеш пароля) и множества избранных персонажей.
"""

from flask_login import UserMixin
from extensions import db
from models.favorite import user_favorites


class User(UserMixin, db.Model):
    """Класс `User` описывает учётную запись пользователя."""
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    # Порядок элементов не гарантируется; повторное добавление ничего не меняет
    favorites = db.relationship(
        "Character",
        secondary=user_favorites,
        collection_class=set,
        lazy="select",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User {self.username!r}>"
