"""
Модуль: `models/__init__.py`.
Назначение: Импорт моделей для корректной регистрации в SQLAlchemy metadata.
"""

from .favorite import user_favorites
from .character import Character
from .user import User
from .catalog_import import CatalogImport

__all__ = ["user_favorites", "Character", "User", "CatalogImport"]
