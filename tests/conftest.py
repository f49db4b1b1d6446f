import pytest

from tests.token_helpers import token_expiring_in


@pytest.fixture
def valid_token() -> str:
    return token_expiring_in(3600)


@pytest.fixture
def expired_token() -> str:
    return token_expiring_in(-10)
