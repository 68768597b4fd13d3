import pytest
from sqlalchemy import delete

from extensions import db
from models.character import Character
from models.favorite import user_favorites
from services import favorites
from services.errors import CharacterNotFound, UserNotFound


@pytest.fixture
def goku(app, make_user, seed_catalog):
    username, _ = make_user("goku")
    return username


def ids(username):
    return [c.id for c in favorites.list_favorites(username)]


def test_new_user_has_no_favorites(app_context, goku):
    assert favorites.list_favorites(goku) == []
    assert not favorites.is_favorite(goku, 1)


def test_add_favorite(app_context, goku):
    favorites.add_favorite(goku, 3)
    favorites.add_favorite(goku, 1)

    assert ids(goku) == [1, 3]
    assert favorites.is_favorite(goku, 3)
    assert favorites.favorite_ids(goku) == {1, 3}


def test_add_favorite_is_idempotent(app_context, goku):
    favorites.add_favorite(goku, 2)
    favorites.add_favorite(goku, 2)

    assert ids(goku) == [2]
    rows = db.session.execute(db.select(user_favorites)).all()
    assert len(rows) == 1


def test_remove_absent_favorite_is_noop(app_context, goku):
    favorites.add_favorite(goku, 1)

    favorites.remove_favorite(goku, 5)
    favorites.remove_favorite(goku, 5)

    assert ids(goku) == [1]


def test_add_then_remove_restores_previous_set(app_context, goku):
    favorites.add_favorite(goku, 1)
    favorites.add_favorite(goku, 3)
    before = ids(goku)

    favorites.add_favorite(goku, 4)
    favorites.remove_favorite(goku, 4)

    assert ids(goku) == before


def test_unknown_user(app_context, seed_catalog):
    with pytest.raises(UserNotFound):
        favorites.is_favorite("nadie", 1)
    with pytest.raises(UserNotFound):
        favorites.add_favorite("nadie", 1)
    with pytest.raises(UserNotFound):
        favorites.remove_favorite("nadie", 1)
    with pytest.raises(UserNotFound):
        favorites.list_favorites("nadie")


def test_unknown_character_rolls_back(app_context, goku):
    favorites.add_favorite(goku, 1)

    with pytest.raises(CharacterNotFound):
        favorites.add_favorite(goku, 404)

    assert ids(goku) == [1]


def test_favorites_are_per_user(app_context, make_user, goku):
    vegeta, _ = make_user("vegeta")
    favorites.add_favorite(goku, 1)
    favorites.add_favorite(vegeta, 2)

    assert ids(goku) == [1]
    assert ids(vegeta) == [2]


def test_deleted_character_is_excluded_from_favorites(app_context, goku):
    favorites.add_favorite(goku, 1)
    favorites.add_favorite(goku, 3)

    # Удаление в обход приложения
    db.session.execute(delete(Character).where(Character.id == 3))
    db.session.commit()

    assert ids(goku) == [1]
    assert not favorites.is_favorite(goku, 3)
