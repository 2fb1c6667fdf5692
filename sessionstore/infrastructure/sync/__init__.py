"""Fire-and-forget mirroring of local mutations to a remote API."""

from sessionstore.infrastructure.sync.remote_sync import (
    NullRemoteSync,
    RemoteSyncClient,
    api_path,
    create_remote_sync,
)

__all__ = ["NullRemoteSync", "RemoteSyncClient", "api_path", "create_remote_sync"]
