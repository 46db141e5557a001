"""Construction of the long-lived service objects.

Services are built once at process start and handed to request handlers by
reference. Each service opens its own short-lived sessions per call.
"""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from forum_core.core.settings import Settings
from forum_core.services.credentials import CredentialStore
from forum_core.services.sanitizer import ContentSanitizer
from forum_core.services.session_codec import SessionCodec
from forum_core.services.thread_store import ThreadStore


@dataclass(frozen=True)
class Services:
    """Bundle of the core services shared by all request handlers."""

    settings: Settings
    credentials: CredentialStore
    sessions: SessionCodec
    sanitizer: ContentSanitizer
    threads: ThreadStore


def build_services(settings: Settings, session_factory: sessionmaker) -> Services:
    """Wire the core services against ``session_factory``."""
    sanitizer = ContentSanitizer()
    return Services(
        settings=settings,
        credentials=CredentialStore(session_factory, bcrypt_rounds=settings.bcrypt_rounds),
        sessions=SessionCodec(
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
            ttl_seconds=settings.session_ttl_seconds,
        ),
        sanitizer=sanitizer,
        threads=ThreadStore(session_factory, sanitizer=sanitizer),
    )
