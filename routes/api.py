"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: routes/api.py – JSON-маршруты каталога.

Назначение модуля:
- Выдача всего каталога и отдельного персонажа.
- Поиск персонажей по подстроке имени или расы.
"""

from flask import jsonify, request

from services import characters
from services.errors import CharacterNotFound

# Префиксы JSON-маршрутов: для них ошибки отдаются в JSON, а не HTML-страницей
API_PATH_PREFIXES = ("/personajes", "/buscar/")


def is_api_request() -> bool:
    return request.path.startswith(API_PATH_PREFIXES)


def _characters_json(items):
    return jsonify([character.to_dict() for character in items])


def register_routes(app):
    @app.get("/personajes")
    def list_characters():
        return _characters_json(characters.list_all())

    @app.get("/personajes/<int:character_id>")
    def get_character(character_id: int):
        character = characters.find_by_id(character_id)
        if character is None:
            raise CharacterNotFound(character_id)
        return jsonify(character.to_dict())

    @app.get("/buscar/nombre")
    def search_by_name():
        # Отсутствие параметра даёт 400 Bad Request
        return _characters_json(characters.search_by_name(request.args["nombre"]))

    @app.get("/buscar/raza")
    def search_by_race():
        return _characters_json(characters.search_by_race(request.args["race"]))
