"""
Модуль: `services/characters.py`.
Назначение: Чтение каталога персонажей и поиск по имени и расе.
"""

from extensions import db
from models.character import Character
from services.catalog import ensure_catalog
from services.errors import CharacterNotFound


def list_all() -> list[Character]:
    """Все персонажи; при пустом или незавершённом каталоге сначала выполняется импорт."""
    ensure_catalog()
    return Character.query.order_by(Character.id).all()


def find_by_id(character_id: int) -> Character | None:
    return db.session.get(Character, character_id)


def get_character(character_id: int) -> Character:
    character = find_by_id(character_id)
    if character is None:
        raise CharacterNotFound(character_id)
    return character


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def search_by_name(substring: str) -> list[Character]:
    """Регистронезависимый поиск подстроки в имени."""
    needle = substring.lower()
    return [c for c in list_all() if _contains(c.name, needle)]


def search_by_race(substring: str) -> list[Character]:
    """Регистронезависимый поиск подстроки в названии расы."""
    needle = substring.lower()
    return [c for c in list_all() if _contains(c.race, needle)]
