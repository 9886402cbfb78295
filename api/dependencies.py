"""Dependency injection for API routes."""

from typing import Annotated

from fastapi import Depends, Request

from budgetlens.core.config import AppConfig


def get_config(request: Request) -> AppConfig:
    """Get the analytics configuration the app was created with."""
    return request.app.state.config


ConfigDep = Annotated[AppConfig, Depends(get_config)]
