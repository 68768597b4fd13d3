"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: models/favorite.py – связующая таблица «пользователь – избранный персонаж».
"""

from extensions import db

# Составной первичный ключ не даёт добавить одного персонажа в избранное дважды
user_favorites = db.Table(
    "user_favorites",
    db.Column(
        "user_id",
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "character_id",
        db.Integer,
        db.ForeignKey("character.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
