"""
Модуль: `services/errors.py`.
Назначение: Типизированные ошибки бизнес-логики.

Каждый вид ошибки несёт HTTP-статус и сообщение для пользователя, чтобы
вызывающий код мог отличить «пользователь не найден» от «персонаж не найден».
"""

from flask_babel import lazy_gettext as _l


class ServiceError(Exception):
    """Базовая ошибка бизнес-логики."""

    status_code = 500
    default_message = _l("Внутренняя ошибка сервера")

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(str(self.message))


class NotFoundError(ServiceError):
    status_code = 404
    default_message = _l("Запись не найдена")


class UserNotFound(NotFoundError):
    default_message = _l("Пользователь не найден")

    def __init__(self, username: str):
        self.username = username
        super().__init__()


class CharacterNotFound(NotFoundError):
    default_message = _l("Персонаж не найден")

    def __init__(self, character_id: int):
        self.character_id = character_id
        super().__init__()


class ConflictError(ServiceError):
    status_code = 409
    default_message = _l("Конфликт данных")


class UsernameTakenError(ConflictError):
    default_message = _l("Пользователь с таким именем уже существует")


class ValidationError(ServiceError):
    status_code = 400
    default_message = _l("Некорректные данные")


class RegistrationError(ValidationError):
    """Ошибка заполнения формы регистрации (в том числе несовпадение паролей)."""


class CatalogUnavailableError(ServiceError):
    """Внешний API каталога недоступен или вернул некорректный ответ."""

    status_code = 502
    default_message = _l("Не удалось загрузить каталог персонажей")
