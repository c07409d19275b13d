from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path before tests import modules
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def auth_service():
    from storefront import build_auth_service
    return build_auth_service()


@pytest.fixture
def app(auth_service):
    from storefront import create_app
    return create_app(auth_service)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)
