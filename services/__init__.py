"""
Модуль: `services/__init__.py`.
Назначение: Бизнес-логика каталога, избранного и учётных записей.
"""
