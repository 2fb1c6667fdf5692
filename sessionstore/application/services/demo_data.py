"""Deterministic demo content used to seed a tenant's empty collections.

Seeding runs the first time a (tenant, collection) key is read and is absent.
Every call returns fresh deep copies of the same fixed records, so seeding an
empty collection twice yields identical data.
"""

import copy
from typing import Any

from sessionstore.domain.enums import CollectionName, canonical_collection

Record = dict[str, Any]

SEED_CREATED_AT = "2024-01-15T09:00:00.000Z"


def _stamp(records: list[Record]) -> list[Record]:
    """Add created_at and version=1 to every seed record."""
    return [{**r, "created_at": r.get("created_at", SEED_CREATED_AT), "version": 1} for r in records]


_AGENTS: list[Record] = _stamp([
    {
        "id": "agent_1",
        "name": "Dr. Sarah Johnson",
        "voice": "serena",
        "greeting": "Hello, I'm Dr. Sarah Johnson. How can I assist you today?",
        "specialty": "General Medicine",
        "temperature": 0.7,
        "interruption_sensitivity": 0.5,
        "contact": {"email": "sarah.johnson@example.com", "phone": "+1 (555) 123-4567"},
    },
    {
        "id": "agent_2",
        "name": "Dr. Michael Chen",
        "voice": "morgan",
        "greeting": "Hi there, this is Dr. Michael Chen. What brings you in today?",
        "specialty": "Cardiology",
        "temperature": 0.6,
        "interruption_sensitivity": 0.4,
        "contact": {"email": "michael.chen@example.com", "phone": "+1 (555) 234-5678"},
    },
    {
        "id": "agent_3",
        "name": "Dr. Emily Rodriguez",
        "voice": "ava",
        "greeting": "Hello, I'm Dr. Rodriguez. How may I help you today?",
        "specialty": "Pediatrics",
        "temperature": 0.7,
        "interruption_sensitivity": 0.6,
        "contact": {"email": "emily.rodriguez@example.com", "phone": "+1 (555) 345-6789"},
    },
    {
        "id": "agent_4",
        "name": "Dr. James Wilson",
        "voice": "ryan",
        "greeting": "Good day, this is Dr. Wilson speaking. How can I be of assistance?",
        "specialty": "Neurology",
        "temperature": 0.5,
        "interruption_sensitivity": 0.5,
        "contact": {"email": "james.wilson@example.com", "phone": "+1 (555) 456-7890"},
    },
])

_CALLS: list[Record] = _stamp([
    {
        "id": "call_1",
        "agent_id": "agent_1",
        "callee": "+1 (555) 010-2030",
        "direction": "inbound",
        "status": "completed",
        "started_at": "2024-01-15T10:12:00.000Z",
        "duration_seconds": 312,
        "sentiment": "positive",
    },
    {
        "id": "call_2",
        "agent_id": "agent_2",
        "callee": "+1 (555) 010-4050",
        "direction": "outbound",
        "status": "completed",
        "started_at": "2024-01-15T11:40:00.000Z",
        "duration_seconds": 185,
        "sentiment": "neutral",
    },
    {
        "id": "call_3",
        "agent_id": "agent_1",
        "callee": "+1 (555) 010-6070",
        "direction": "inbound",
        "status": "missed",
        "started_at": "2024-01-15T13:05:00.000Z",
        "duration_seconds": 0,
        "sentiment": None,
    },
])

_COMPLIANCE_SCRIPTS: list[Record] = _stamp([
    {
        "id": "script_1",
        "name": "HIPAA Compliance Introduction",
        "content": (
            "This call may be recorded for quality assurance. Your information is "
            "protected under HIPAA regulations. Do you consent to this recording?"
        ),
        "category": "healthcare",
        "required_phrases": [
            "This call may be recorded",
            "protected under HIPAA",
            "Do you consent",
        ],
    },
    {
        "id": "script_2",
        "name": "Financial Services Disclosure",
        "content": (
            "This call is being monitored and recorded. Investment products are not "
            "FDIC insured and past performance does not guarantee future results."
        ),
        "category": "financial",
        "required_phrases": [
            "monitored and recorded",
            "not FDIC insured",
            "past performance does not guarantee",
        ],
    },
    {
        "id": "script_3",
        "name": "Telehealth Consent",
        "content": (
            "This telehealth session is encrypted and confidential. Medical advice "
            "provided is not a substitute for in-person examination. Do you "
            "understand and consent to these terms?"
        ),
        "category": "telehealth",
        "required_phrases": ["encrypted and confidential", "not a substitute", "consent"],
    },
    {
        "id": "script_4",
        "name": "Medical Advice Disclaimer",
        "content": (
            "The information provided on this call is for general guidance only. "
            "In an emergency, please hang up and dial 911."
        ),
        "category": "healthcare",
        "required_phrases": ["general guidance only", "dial 911"],
    },
])

_CONVERSATION_FLOWS: list[Record] = _stamp([
    {
        "id": "flow_1",
        "name": "Appointment Scheduling",
        "description": "Template for scheduling patient appointments",
        "nodes": [
            {"id": "start", "type": "start", "content": "Conversation Start", "position": {"x": 100, "y": 100}},
            {
                "id": "greeting",
                "type": "message",
                "content": "Hello, I'd like to help you schedule an appointment. What day works best for you?",
                "position": {"x": 100, "y": 200},
            },
            {
                "id": "check_availability",
                "type": "condition",
                "content": "Check calendar availability",
                "position": {"x": 100, "y": 300},
            },
        ],
    },
    {
        "id": "flow_2",
        "name": "Insurance Verification",
        "description": "Template for verifying patient insurance",
        "nodes": [
            {"id": "start", "type": "start", "content": "Conversation Start", "position": {"x": 100, "y": 100}},
            {
                "id": "greeting",
                "type": "message",
                "content": "I'll help you verify your insurance coverage. Can you provide your insurance provider name?",
                "position": {"x": 100, "y": 200},
            },
        ],
    },
    {
        "id": "flow_3",
        "name": "Medication Refill",
        "description": "Template for handling medication refill requests",
        "nodes": [
            {"id": "start", "type": "start", "content": "Conversation Start", "position": {"x": 100, "y": 100}},
            {
                "id": "greeting",
                "type": "message",
                "content": "I can help with your refill. Which medication do you need refilled?",
                "position": {"x": 100, "y": 200},
            },
        ],
    },
])

_KNOWLEDGE_BASES: list[Record] = _stamp([
    {
        "id": "kb_1",
        "name": "Getting Started",
        "description": "Onboarding guides for new workspace members",
        "articles": [
            {"title": "Setting Up Your First AI Agent", "category": "agents"},
            {"title": "Understanding Call Analytics", "category": "analytics"},
        ],
    },
    {
        "id": "kb_2",
        "name": "Compliance",
        "description": "Regulatory guidance for recorded conversations",
        "articles": [
            {"title": "HIPAA Compliance Guide", "category": "compliance"},
            {"title": "Security Best Practices", "category": "security"},
        ],
    },
    {
        "id": "kb_3",
        "name": "Integrations",
        "description": "Connecting the workspace to external systems",
        "articles": [
            {"title": "Integrating with Your CRM", "category": "integrations"},
            {"title": "API Documentation", "category": "developers"},
        ],
    },
])

_VIDEO_SUMMARIES: list[Record] = _stamp([
    {
        "id": "video_1",
        "title": "Patient Consultation Summary",
        "timestamps": [
            {"time": "00:15", "label": "Introduction"},
            {"time": "01:23", "label": "Symptoms Discussion"},
            {"time": "03:45", "label": "Treatment Options"},
        ],
        "summary": "Treatment options for chronic back pain are reviewed with the patient.",
    },
    {
        "id": "video_2",
        "title": "Follow-up Appointment",
        "timestamps": [
            {"time": "00:10", "label": "Progress Review"},
            {"time": "01:05", "label": "Medication Adjustment"},
            {"time": "02:30", "label": "Next Steps"},
        ],
        "summary": "Progress since the last visit is reviewed and medication is adjusted.",
    },
    {
        "id": "video_3",
        "title": "Medication Review",
        "timestamps": [
            {"time": "00:20", "label": "Current Medications"},
            {"time": "02:10", "label": "Side Effects"},
        ],
        "summary": "Current prescriptions are reviewed for interactions and side effects.",
    },
])

_PHONE_NUMBERS: list[Record] = _stamp([
    {
        "id": "phone_1",
        "phone_number": "+1 (555) 123-4567",
        "provider": "elevenlabs",
        "type": "provisioned",
        "label": "Main Office",
        "is_active": True,
    },
    {
        "id": "phone_2",
        "phone_number": "+1 (555) 987-6543",
        "provider": "retell",
        "type": "provisioned",
        "label": "Support Line",
        "is_active": True,
    },
])

_SEEDS: dict[str, list[Record]] = {
    CollectionName.AGENTS.value: _AGENTS,
    CollectionName.CALLS.value: _CALLS,
    CollectionName.COMPLIANCE_SCRIPTS.value: _COMPLIANCE_SCRIPTS,
    CollectionName.CONVERSATION_FLOWS.value: _CONVERSATION_FLOWS,
    CollectionName.KNOWLEDGE_BASES.value: _KNOWLEDGE_BASES,
    CollectionName.VIDEO_SUMMARIES.value: _VIDEO_SUMMARIES,
    CollectionName.PHONE_NUMBERS.value: _PHONE_NUMBERS,
}

KNOWN_COLLECTIONS: tuple[str, ...] = tuple(_SEEDS)


def seed(collection: str) -> list[Record]:
    """Return the demo records for collection, newest-first.

    Args:
        collection: Collection or table name (aliases resolve to the canonical name).

    Returns:
        Fresh deep copies of the fixed seed records; [] for unknown collections.
    """
    return copy.deepcopy(_SEEDS.get(canonical_collection(collection), []))
