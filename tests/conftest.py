"""Pytest configuration and fixtures for ToDone tests."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from todone.core.clock import FixedClock
from todone.core.events import ChangeNotifier
from todone.database import enable_foreign_keys
from todone.repositories import SettingsRepository, TaskRepository
from todone.schemas.database import Task
from todone.schemas.models import TaskCore, TaskPriority
from todone.services import TaskService


FIXED_NOW = datetime(2026, 10, 17, 12, 0)


@pytest.fixture
def now():
    """Fixed current time shared by every time-dependent test."""
    return FIXED_NOW


@pytest.fixture
def clock(now):
    """Clock frozen at the fixed current time."""
    return FixedClock(now)


@pytest.fixture
def engine():
    """In-memory SQLite engine with foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Database session bound to the in-memory engine."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def task_repo(session):
    return TaskRepository(session)


@pytest.fixture
def settings_repo(session):
    return SettingsRepository(session)


@pytest.fixture
def notifier(clock):
    return ChangeNotifier(clock=clock)


@pytest.fixture
def service(session, clock, notifier):
    """Task service over the test session and fixed clock."""
    return TaskService(session=session, clock=clock, notifier=notifier)


@pytest.fixture
def make_task(session, now):
    """Factory that stores a task directly and returns the entity."""

    def _make_task(
        title: str = "Task",
        content: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: datetime | None = None,
        created_at: datetime | None = None,
        is_completed: bool = False,
        completed_at: datetime | None = None,
    ) -> Task:
        task = Task(
            title=title,
            content=content,
            priority=priority,
            due_date=due_date or now + timedelta(days=2),
            created_at=created_at or now,
            is_completed=is_completed,
            completed_at=completed_at,
        )
        session.add(task)
        session.commit()
        session.refresh(task)
        return task

    return _make_task


@pytest.fixture
def make_core(now):
    """Factory for in-memory ``TaskCore`` views used by the pure helpers."""
    counter = iter(range(1, 1000))

    def _make_core(
        title: str = "Task",
        content: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: datetime | None = None,
        created_at: datetime | None = None,
        is_completed: bool = False,
        completed_at: datetime | None = None,
    ) -> TaskCore:
        return TaskCore(
            id=next(counter),
            title=title,
            content=content,
            priority=priority,
            due_date=due_date or now + timedelta(days=2),
            created_at=created_at or now,
            is_completed=is_completed,
            completed_at=completed_at,
        )

    return _make_core
