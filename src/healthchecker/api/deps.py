"""Dependency injection for API handlers."""

from typing import Annotated

from fastapi import Depends, Request

from healthchecker.core.runner import HealthCheckRunner


def get_runner(request: Request) -> HealthCheckRunner:
    """Report runner shared by all requests of the application.

    Stored on ``app.state`` by ``create_app`` so tests can swap it out.
    """
    return request.app.state.runner


RunnerDep = Annotated[HealthCheckRunner, Depends(get_runner)]
