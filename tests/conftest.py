import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from friendgraph.server.db import Database, get_database
from friendgraph.server.init import migrate_database
from friendgraph.server.server import get_app
from friendgraph.server.services import UserService


@pytest.fixture
def database(tmp_path):
    """每个测试使用独立的 SQLite 文件"""
    db = Database(str(tmp_path / "friendgraph.db"))
    migrate_database()
    yield db
    get_database().close()


@pytest.fixture
def service(database):
    return UserService(database)


@pytest.fixture
def app(database):
    return get_app()


@pytest_asyncio.fixture
async def api_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
