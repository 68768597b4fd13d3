"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: services/accounts.py – регистрация и проверка учётных данных.

Назначение модуля:
- Регистрация пользователя с хешированием пароля (scrypt, соль на каждый вызов).
- Выдача минимального представления учётных данных для проверки входа.
- Явный контекст сессии `UserSession`, передаваемый в бизнес-логику из маршрутов.
"""

from dataclasses import dataclass

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from models.user import User
from services.errors import RegistrationError, UserNotFound, UsernameTakenError


@dataclass(frozen=True)
class UserSession:
    """Аутентифицированный пользователь текущего запроса."""
    username: str


@dataclass(frozen=True)
class Credentials:
    """Имя пользователя и хеш пароля; больше для проверки входа ничего не нужно."""
    username: str
    password_hash: str

    def __repr__(self):
        return f"Credentials(username={self.username!r}, password_hash='***')"


def _validate_username(username: str) -> str | None:
    if not username:
        return _("Имя пользователя обязательно.")
    if len(username) < 3:
        return _("Имя пользователя должно содержать минимум 3 символа.")
    if len(username) > 80:
        return _("Имя пользователя не должно превышать 80 символов.")
    if any(ch.isspace() for ch in username):
        return _("Имя пользователя не должно содержать пробелы.")
    return None


def username_exists(username: str) -> bool:
    return User.query.filter_by(username=username).first() is not None


def hash_password(raw_password: str) -> str:
    return generate_password_hash(raw_password, method="scrypt")


def verify_password(submitted: str, stored_hash: str) -> bool:
    """Сравнивает введённый пароль с сохранённым хешем."""
    if not submitted or not stored_hash:
        return False
    return check_password_hash(stored_hash, submitted)


def register(username: str, raw_password: str, confirm_password: str) -> User:
    """Создаёт пользователя.

    Порядок проверок: корректность имени, занятость имени (независимо от пароля),
    затем совпадение паролей.
    """
    username = (username or "").strip()
    username_error = _validate_username(username)
    if username_error:
        raise RegistrationError(username_error)

    if username_exists(username):
        raise UsernameTakenError()

    if not raw_password:
        raise RegistrationError(_("Пароль обязателен."))
    if raw_password != confirm_password:
        raise RegistrationError(_("Пароли не совпадают."))

    user = User(username=username, password_hash=hash_password(raw_password))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Имя заняли параллельным запросом между проверкой и вставкой
        db.session.rollback()
        raise UsernameTakenError() from exc

    current_app.logger.info("Зарегистрирован пользователь %s", username)
    return user


def load_credentials(username: str) -> Credentials:
    user = User.query.filter_by(username=username).first()
    if user is None:
        raise UserNotFound(username)
    return Credentials(username=user.username, password_hash=user.password_hash)


def authenticate(username: str, password: str) -> User | None:
    """Возвращает пользователя при верных данных, иначе None.

    Неизвестное имя и неверный пароль неразличимы для вызывающего кода.
    """
    try:
        credentials = load_credentials(username)
    except UserNotFound:
        return None
    if not verify_password(password, credentials.password_hash):
        return None
    return User.query.filter_by(username=credentials.username).first()
