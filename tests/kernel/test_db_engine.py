"""
Engine lifecycle and transactional session scope.
"""

import pytest
from sqlalchemy import select

from realty_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from realty_kernel.models import ProjectModel


@pytest.fixture
def memory_engine():
    init_engine_from_url("sqlite://")
    create_tables()
    yield get_engine()
    reset_engine()


class TestEngineLifecycle:
    def test_uninitialized(self):
        reset_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session()

    def test_initialization_logged(self, captured_logs):
        init_engine_from_url("sqlite://")
        try:
            (record,) = [r for r in captured_logs() if r["message"] == "engine_initialized"]
            assert record["dialect"] == "sqlite"
        finally:
            reset_engine()


class TestSessionScope:
    def test_commits_on_success(self, memory_engine):
        with session_scope() as session:
            session.add(ProjectModel(id="proj-a", name="Alpha Towers"))

        with session_scope() as session:
            names = session.scalars(select(ProjectModel.name)).all()
        assert names == ["Alpha Towers"]

    def test_rolls_back_and_reraises(self, memory_engine, captured_logs):
        with pytest.raises(KeyError):
            with session_scope() as session:
                session.add(ProjectModel(id="proj-b", name="Beta Heights"))
                session.flush()
                raise KeyError("boom")

        with session_scope() as session:
            assert session.get(ProjectModel, "proj-b") is None
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())
