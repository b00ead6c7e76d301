"""Context object shared across worker threads."""

from dataclasses import dataclass, field
from typing import Optional

from session_server.bootstrap.config import ServerConfig
from session_server.domain.sessions import SessionStore
from session_server.domain.users import InMemoryUserRepository
from session_server.lifecycle.state import ServerLifecycle
from session_server.pipeline.router import Router, build_default_router


@dataclass
class WorkerContext:
    """Stores and routing built once at startup and handed to every worker."""

    router: Router
    sessions: SessionStore
    users: InMemoryUserRepository
    config: ServerConfig = field(default_factory=ServerConfig)
    lifecycle: Optional[ServerLifecycle] = None


def build_worker_context(
    config: ServerConfig, lifecycle: Optional[ServerLifecycle] = None
) -> WorkerContext:
    """Create the shared stores and the default router for ``config``."""
    sessions = SessionStore()
    users = InMemoryUserRepository()
    return WorkerContext(
        router=build_default_router(config, sessions, users),
        sessions=sessions,
        users=users,
        config=config,
        lifecycle=lifecycle,
    )
