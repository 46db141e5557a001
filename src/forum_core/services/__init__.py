"""Business logic services for the forum core."""

from .container import Services, build_services
from .credentials import CredentialStore
from .policy import Action, Decision, authorize, can, require
from .sanitizer import ContentSanitizer
from .session_codec import Identity, SessionClaims, SessionCodec
from .thread_store import CommentPage, NumberedComment, TagCount, ThreadStore

__all__ = [
    "Action",
    "CommentPage",
    "ContentSanitizer",
    "CredentialStore",
    "Decision",
    "Identity",
    "NumberedComment",
    "Services",
    "SessionClaims",
    "SessionCodec",
    "TagCount",
    "ThreadStore",
    "authorize",
    "build_services",
    "can",
    "require",
]
