"""FastAPI adapter for the provisioning API."""

from slack_provisioning.fastapi.router import create_app, create_provisioning_router

__all__ = ["create_app", "create_provisioning_router"]
