"""
Название: «Personajes»
Язык: Python (Flask)
Краткое описание: веб-приложение для просмотра каталога персонажей Dragon Ball
и ведения личного списка избранного
"""

import hmac
import os
import secrets

import click
from flask import (
    Flask,
    flash,
    g,
    has_request_context,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from config import Config
from extensions import db, login_manager, cors, babel
import models  # noqa: F401 - регистрирует модели для db.create_all()
from routes.pages import register_routes as register_page_routes
from routes.auth import register_routes as register_auth_routes
from routes.api import register_routes as register_api_routes, is_api_request
from services.catalog import bootstrap_catalog, needs_bootstrap
from services.errors import CatalogUnavailableError, ServiceError
from flask_babel import gettext as _, lazy_gettext as _l
from utils.i18n import resolve_request_language


def create_app(config_overrides: dict | None = None) -> Flask:
    """Фабрика приложения, собирающая все модули воедино."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Инициализация расширений
    db.init_app(app)
    login_manager.init_app(app)

    def select_locale() -> str:
        return getattr(g, "lang", app.config["DEFAULT_LANGUAGE"])

    babel.init_app(app, locale_selector=select_locale)

    if app.config["CORS_ENABLED"]:
        cors.init_app(
            app,
            resources={
                r"/personajes*": {"origins": app.config["CORS_ORIGINS"]},
                r"/buscar/*": {"origins": app.config["CORS_ORIGINS"]},
            },
        )

    login_manager.login_view = "login"
    login_manager.login_message = _l("Пожалуйста, войдите, чтобы получить доступ к этой странице.")
    login_manager.login_message_category = "error"

    os.makedirs(app.instance_path, exist_ok=True)

    # Регистрация роутов по модулям
    register_page_routes(app)
    register_auth_routes(app)
    register_api_routes(app)

    with app.app_context():
        # Создаем отсутствующие таблицы (без изменения существующих колонок)
        db.create_all()

    def _ensure_csrf_token() -> str:
        token = session.get("csrf_token")
        if not token:
            token = secrets.token_urlsafe(32)
            session["csrf_token"] = token
        return token

    def _is_csrf_valid() -> bool:
        expected = session.get("csrf_token")
        provided = request.headers.get("X-CSRF-Token") or request.form.get("csrf_token")
        if not expected or not provided:
            return False
        return hmac.compare_digest(expected, provided)

    def _current_lang() -> str:
        if not has_request_context():
            return app.config["DEFAULT_LANGUAGE"]
        return getattr(g, "lang", app.config["DEFAULT_LANGUAGE"])

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        """Анонимный пользователь на защищённой странице уходит на форму входа."""
        flash(str(login_manager.login_message), login_manager.login_message_category)
        # После входа `next` открывается GET-запросом, формы POST туда не возвращаем
        if request.method not in {"GET", "HEAD"}:
            return redirect(url_for("login"))
        next_url = request.full_path if request.query_string else request.path
        if next_url.endswith("?"):
            next_url = next_url[:-1]
        return redirect(url_for("login", next=next_url))

    @app.before_request
    def resolve_request_language_middleware():
        g.lang = resolve_request_language(
            request=request,
            supported_languages=app.config["SUPPORTED_LANGUAGES"],
            cookie_name=app.config["LANG_COOKIE_NAME"],
            default_language=app.config["DEFAULT_LANGUAGE"],
        )

    @app.context_processor
    def inject_template_globals():
        return {
            "csrf_token": _ensure_csrf_token(),
            "current_lang": _current_lang(),
            "supported_langs": app.config["SUPPORTED_LANGUAGES"],
        }

    @app.before_request
    def enforce_csrf():
        """Любой запрос, меняющий состояние, должен нести CSRF-токен сессии."""
        if request.method in {"GET", "HEAD", "OPTIONS", "TRACE"}:
            return None

        if _is_csrf_valid():
            return None

        if is_api_request():
            return (
                jsonify(
                    {
                        "success": False,
                        "error": _("Недействительный CSRF-токен. Обновите страницу и повторите попытку."),
                    }
                ),
                400,
            )

        flash(_("Сессия формы истекла. Обновите страницу и попробуйте снова."), "error")
        return redirect(url_for("characters_page"))

    @app.errorhandler(ServiceError)
    def handle_service_error(exc: ServiceError):
        """JSON-маршруты получают статус ошибки, HTML-страницы – общую страницу ошибки."""
        if not isinstance(exc, CatalogUnavailableError):
            app.logger.warning("%s: %s", type(exc).__name__, exc)

        if is_api_request():
            return jsonify({"success": False, "error": str(exc.message)}), exc.status_code
        return render_template("error.html", message=exc.message), 500

    @app.after_request
    def apply_security_headers(response):
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "camera=(), microphone=(), geolocation=()")
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    @app.cli.command("import-catalog")
    @click.option("--force", is_flag=True, help="Загрузить каталог заново, даже если импорт уже завершён.")
    def import_catalog_command(force: bool):
        """Импортирует персонажей из внешнего API."""
        if not force and not needs_bootstrap():
            click.echo("Каталог уже загружен. Используйте --force для повторного импорта.")
            return
        try:
            count = bootstrap_catalog()
        except CatalogUnavailableError as exc:
            raise click.ClickException(str(exc.message)) from exc
        click.echo(f"Импортировано персонажей: {count}")

    return app


app = create_app()


if __name__ == "__main__":
    is_production = os.environ.get("FLASK_ENV", "").lower() == "production"
    app.run(debug=not is_production)
