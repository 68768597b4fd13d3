"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: routes/auth.py – маршруты аутентификации и управления сессиями.

Назначение модуля:
- Регистрация новых пользователей с подтверждением пароля.
- Вход и выход из системы с использованием Flask-Login.
- Загрузка пользователя по идентификатору для управления сессией.
"""

from flask import current_app, render_template, request, flash, redirect, url_for
from flask_babel import gettext as _
from flask_login import login_user, logout_user, login_required, current_user

from extensions import login_manager, db
from models.user import User
from services import accounts
from services.errors import ConflictError, ValidationError
from utils.redirects import is_safe_next_url


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def register_routes(app):
    @app.route("/register", methods=["GET", "POST"])
    def register():
        if request.method == "POST":
            username = request.form.get("username") or ""
            password = request.form.get("password") or ""
            confirm_password = request.form.get("confirm_password") or ""

            try:
                accounts.register(username, password, confirm_password)
            except (ConflictError, ValidationError) as exc:
                flash(str(exc.message), "error")
                return redirect(url_for("register"))

            flash(_("Регистрация успешна! Теперь войдите в систему"), "success")
            return redirect(url_for("login"))

        return render_template("register.html")

    @app.route("/login", methods=["GET", "POST"])
    def login():
        if request.method == "POST":
            username = (request.form.get("username") or "").strip()
            password = request.form.get("password") or ""
            next_url = request.form.get("next") or request.args.get("next")

            user = accounts.authenticate(username, password)
            if user is None:
                current_app.logger.info("Неудачная попытка входа")
                flash(_("Неверное имя пользователя или пароль"), "error")
                return redirect(url_for("login"))

            login_user(user)
            current_app.logger.info("Пользователь вошёл: %s", user.username)
            flash(_("Вход выполнен успешно"), "success")
            if is_safe_next_url(next_url):
                return redirect(next_url)
            return redirect(url_for("characters_page"))

        if current_user.is_authenticated:
            return redirect(url_for("characters_page"))
        return render_template("login.html", next_url=request.args.get("next", ""))

    @app.route("/logout", methods=["POST"])
    @login_required
    def logout():
        logout_user()
        flash(_("Вы вышли из системы"), "info")
        return redirect(url_for("characters_page"))
