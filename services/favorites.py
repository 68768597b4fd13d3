"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: services/favorites.py – избранные персонажи пользователя.

Назначение модуля:
- Проверка, добавление и удаление персонажа из избранного.
- Изменение избранного выполняется в одной транзакции: пользователь загружается
  вместе со всей коллекцией, коллекция изменяется и фиксируется целиком.
"""

from sqlalchemy.orm import selectinload

from models.character import Character
from models.user import User
from services.errors import CharacterNotFound, UserNotFound
from services.unit_of_work import unit_of_work


def _load_user_with_favorites(username: str) -> User:
    user = (
        User.query.options(selectinload(User.favorites))
        .filter_by(username=username)
        .first()
    )
    if user is None:
        raise UserNotFound(username)
    return user


def is_favorite(username: str, character_id: int) -> bool:
    return character_id in favorite_ids(username)


def favorite_ids(username: str) -> set[int]:
    """Идентификаторы избранных персонажей (для отметок в списке)."""
    return {character.id for character in _load_user_with_favorites(username).favorites}


def add_favorite(username: str, character_id: int) -> None:
    """Добавляет персонажа в избранное; повторное добавление ничего не меняет."""
    with unit_of_work() as session:
        user = _load_user_with_favorites(username)
        character = session.get(Character, character_id)
        if character is None:
            raise CharacterNotFound(character_id)
        user.favorites.add(character)


def remove_favorite(username: str, character_id: int) -> None:
    """Удаляет персонажа из избранного; отсутствие персонажа в избранном не ошибка."""
    with unit_of_work():
        user = _load_user_with_favorites(username)
        for character in [c for c in user.favorites if c.id == character_id]:
            user.favorites.discard(character)


def list_favorites(username: str) -> list[Character]:
    """Копия избранного, упорядоченная по идентификатору."""
    user = _load_user_with_favorites(username)
    return sorted(user.favorites, key=lambda c: c.id)
