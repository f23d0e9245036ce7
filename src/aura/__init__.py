"""
Aura: a personal-assistant client for hosted generative-AI capabilities.

Chat, grounded research, speech, image understanding and image-to-video
are forwarded to the Gemini API; an append-only activity log is the only
persisted state.
"""

__version__ = "0.1.0"

from .activity import Activity, ActivityLog, ActivityType, create_storage
from .assistant import Assistant, ResearchMode
from .capabilities import (
    AspectRatio,
    Attachment,
    CapabilityClient,
    CapabilityError,
    GeoLocation,
    Message,
    ResearchResult,
    create_capability_client,
)
from .conversation import ChatSession

__all__ = [
    "Activity",
    "ActivityLog",
    "ActivityType",
    "AspectRatio",
    "Assistant",
    "Attachment",
    "CapabilityClient",
    "CapabilityError",
    "ChatSession",
    "GeoLocation",
    "Message",
    "ResearchMode",
    "ResearchResult",
    "create_capability_client",
    "create_storage",
]
