"""
Исключения бизнес-логики.

Сервисы поднимают эти исключения, а обработчик в main.py превращает их
в JSON ответ с соответствующим HTTP статусом.
"""

from fastapi import status


class StoreError(Exception):
    """Базовое исключение приложения."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "internal"
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthenticationError(StoreError):
    """Нет валидной сессии (токен отсутствует, истек или пользователь удален)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"
    default_detail = "Could not validate credentials"


class PermissionDeniedError(StoreError):
    """Пользователь аутентифицирован, но роль не подходит для операции."""

    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"
    default_detail = "Not enough permissions"


class InvalidInputError(StoreError):
    """Отсутствует или некорректно обязательное поле."""

    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation"
    default_detail = "Invalid request"


class ConflictError(StoreError):
    """Нарушение уникальности (имя категории, username)."""

    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"
    default_detail = "Resource already exists"


class NotFoundError(StoreError):
    """Сущность не существует или не принадлежит пользователю."""

    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_detail = "Not found"
