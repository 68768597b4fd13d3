"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: routes/pages.py – маршруты пользовательских страниц.

Назначение модуля:
- Список персонажей с отметкой избранных, страница персонажа, страница избранного.
- Добавление и удаление избранного (только POST с CSRF-токеном).
- Переключение языка интерфейса.
"""

from flask import abort, current_app, flash, redirect, render_template, request, url_for
from flask_babel import force_locale, gettext as _
from flask_login import current_user, login_required

from services import characters, favorites
from services.accounts import UserSession
from utils.i18n import is_supported_language
from utils.redirects import is_safe_next_url


def _current_session() -> UserSession | None:
    """Явный контекст пользователя; дальше в бизнес-логику передаётся только он."""
    if not current_user.is_authenticated:
        return None
    return UserSession(username=current_user.username)


def register_routes(app):
    @app.get("/")
    def root():
        return redirect(url_for("characters_page"))

    @app.get("/vista/personajesweb")
    def characters_page():
        """Каталог персонажей; для вошедшего пользователя отмечаются избранные."""
        session = _current_session()
        favorite_ids = favorites.favorite_ids(session.username) if session else set()
        return render_template(
            "personajes.html",
            characters=characters.list_all(),
            favorite_ids=favorite_ids,
            page_title=_("Персонажи"),
        )

    @app.get("/vista/personajesweb/<int:character_id>")
    def character_detail(character_id: int):
        character = characters.get_character(character_id)
        session = _current_session()
        return render_template(
            "detalle_personaje.html",
            character=character,
            is_favorite=bool(session) and favorites.is_favorite(session.username, character.id),
        )

    @app.get("/vista/favoritos")
    @login_required
    def favorites_page():
        session = _current_session()
        favorite_characters = favorites.list_favorites(session.username)
        return render_template(
            "personajes.html",
            characters=favorite_characters,
            favorite_ids={c.id for c in favorite_characters},
            page_title=_("Мои избранные"),
        )

    @app.post("/favorito/agregar/<int:character_id>")
    @login_required
    def add_favorite(character_id: int):
        session = _current_session()
        favorites.add_favorite(session.username, character_id)
        current_app.logger.info("%s добавил в избранное персонажа %s", session.username, character_id)
        return redirect(url_for("characters_page"))

    @app.post("/favorito/quitar/<int:character_id>")
    @login_required
    def remove_favorite(character_id: int):
        session = _current_session()
        favorites.remove_favorite(session.username, character_id)
        current_app.logger.info("%s удалил из избранного персонажа %s", session.username, character_id)
        return redirect(url_for("characters_page"))

    @app.get("/idioma/<lang>")
    def set_language(lang: str):
        """Сохраняет выбранный язык в cookie и возвращает пользователя на прежнюю страницу."""
        if not is_supported_language(lang, app.config["SUPPORTED_LANGUAGES"]):
            abort(404)
        lang = lang.strip().lower()

        target = request.args.get("next")
        response = redirect(target if is_safe_next_url(target) else url_for("characters_page"))
        response.set_cookie(
            app.config["LANG_COOKIE_NAME"],
            lang,
            max_age=app.config["LANG_COOKIE_MAX_AGE"],
            secure=app.config["SESSION_COOKIE_SECURE"],
            httponly=False,
            samesite="Lax",
            path="/",
        )
        # Сообщение показывается уже на выбранном языке
        with force_locale(lang):
            flash(_("Язык интерфейса изменён"), "info")
        return response
