import pytest

from study_journal.db import init_db


class FakeGateway:
    """Stands in for ChatGateway: returns canned replies and records prompts."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts = []
        self.configured = True

    def complete(self, prompt, temperature=0.7):
        self.prompts.append((prompt, temperature))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)

    def forward(self, payload):
        self.prompts.append((payload, payload.get("temperature")))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_journal.db")
    return db_path


@pytest.fixture
def db(tmp_db):
    """A temporary database with the schema created."""
    init_db(tmp_db)
    return tmp_db


@pytest.fixture
def fake_gateway():
    return FakeGateway
