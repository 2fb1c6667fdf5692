"""Domain enumerations: session lifecycle and known collections."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class SessionState(_ValuesMixin, str, Enum):
    """Authentication lifecycle state of the current session."""

    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


class CollectionName(_ValuesMixin, str, Enum):
    """Collections with built-in seed data and schemas."""

    AGENTS = "agents"
    CALLS = "calls"
    COMPLIANCE_SCRIPTS = "complianceScripts"
    CONVERSATION_FLOWS = "conversationFlows"
    KNOWLEDGE_BASES = "knowledgeBases"
    VIDEO_SUMMARIES = "videoSummaries"
    PHONE_NUMBERS = "phoneNumbers"


class SyncMethod(_ValuesMixin, str, Enum):
    """HTTP verbs used to mirror local mutations to the remote API."""

    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


# Table names used by the query facade that refer to a canonical collection.
_COLLECTION_ALIASES: dict[str, str] = {
    "compliance_scripts": CollectionName.COMPLIANCE_SCRIPTS.value,
    "conversation_flows": CollectionName.CONVERSATION_FLOWS.value,
    "knowledge_bases": CollectionName.KNOWLEDGE_BASES.value,
    "video_summaries": CollectionName.VIDEO_SUMMARIES.value,
    "phone_numbers": CollectionName.PHONE_NUMBERS.value,
}


def canonical_collection(name: str) -> str:
    """Map a collection or table name to its canonical collection name.

    Unknown names are returned unchanged so callers can use ad-hoc collections.

    Args:
        name: Collection name as given by a caller (camelCase or snake_case).

    Returns:
        Canonical collection name.
    """
    if not name:
        raise ValueError("Collection name must be non-empty")
    return _COLLECTION_ALIASES.get(name, name)
