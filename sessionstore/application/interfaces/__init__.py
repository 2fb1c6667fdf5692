"""Ports implemented by the infrastructure layer."""

from sessionstore.application.interfaces.ports import (
    IRemoteSync,
    ISessionProvider,
    StorageProtocol,
)

__all__ = ["IRemoteSync", "ISessionProvider", "StorageProtocol"]
