"""Remote capability clients.

Stateless wrappers around a hosted generative-AI service: chat, grounded
research, speech synthesis, image understanding and image-to-video.
"""

from .base import CapabilityClient
from .errors import (
    CapabilityError,
    MalformedResponseError,
    OperationTimeoutError,
    ServiceError,
)
from .factory import create_capability_client
from .models import (
    AspectRatio,
    Attachment,
    GeneratedVideo,
    GeoLocation,
    GroundingReference,
    Message,
    PlaceSource,
    ResearchResult,
    WebSource,
)
from .poller import OperationPoller

__all__ = [
    "AspectRatio",
    "Attachment",
    "CapabilityClient",
    "CapabilityError",
    "GeneratedVideo",
    "GeoLocation",
    "GroundingReference",
    "MalformedResponseError",
    "Message",
    "OperationPoller",
    "OperationTimeoutError",
    "PlaceSource",
    "ResearchResult",
    "ServiceError",
    "WebSource",
    "create_capability_client",
]
