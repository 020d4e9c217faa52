# faber/api/deps.py
"""
Request-scoped access to the service container.
"""
from starlette.requests import HTTPConnection

from faber.container import ServiceContainer, build_container


def get_container(connection: HTTPConnection) -> ServiceContainer:
    """The app's container, built on first use unless main.py or a test set one."""
    state = connection.app.state
    container = getattr(state, "container", None)
    if container is None:
        container = build_container()
        state.container = container
    return container
