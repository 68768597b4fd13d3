"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: models/character.py – модель персонажа каталога.

Назначение модуля:
- Описание ORM-модели Character, заполняемой только импортом из внешнего API.
- Равенство и хеш персонажа определяются исключительно идентификатором.
- Сериализация в JSON с именами полей внешнего API.
"""

from extensions import db


class Character(db.Model):
    """Класс `Character` описывает персонажа каталога."""
    # Идентификатор берётся из внешнего API и после импорта не меняется
    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    name = db.Column(db.String(255))
    ki = db.Column(db.String(100))
    max_ki = db.Column(db.String(100))
    race = db.Column(db.String(100))
    gender = db.Column(db.String(50))
    description = db.Column(db.String(1000))
    image = db.Column(db.String(500))
    affiliation = db.Column(db.String(255))
    # Логическое удаление: поле есть во внешнем API, запросами не используется
    deleted_at = db.Column(db.String(50), nullable=True)

    # Не хранится в БД
    transformations = None

    def __eq__(self, other):
        if not isinstance(other, Character):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        if self.id is None:
            return object.__hash__(self)
        return hash(self.id)

    def __repr__(self):
        return f"<Character {self.id} {self.name!r}>"

    def to_dict(self) -> dict:
        """Представление персонажа в формате внешнего API."""
        return {
            "id": self.id,
            "name": self.name,
            "ki": self.ki,
            "maxKi": self.max_ki,
            "race": self.race,
            "gender": self.gender,
            "description": self.description,
            "image": self.image,
            "affiliation": self.affiliation,
            "deletedAt": self.deleted_at,
            "transformations": list(self.transformations or []),
        }
