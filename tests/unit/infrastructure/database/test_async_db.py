import pytest

from src.infrastructure.database.async_db import _build_async_url


@pytest.mark.parametrize(
    "raw, expected",
    [
        (
            "postgresql://u:p@db:5432/markethub",
            "postgresql+asyncpg://u:p@db:5432/markethub",
        ),
        (
            "postgresql+psycopg2://u:p@db:5432/markethub?sslmode=require",
            "postgresql+asyncpg://u:p@db:5432/markethub",
        ),
        (
            "postgresql+asyncpg://u:p@db/markethub?sslmode=disable&application_name=auth",
            "postgresql+asyncpg://u:p@db/markethub?application_name=auth",
        ),
    ],
)
def test_build_async_url(raw, expected):
    assert _build_async_url(raw) == expected
