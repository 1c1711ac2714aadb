"""Enumeration types for listing entities."""

from enum import Enum


class FlatStatus(str, Enum):
    CREATED = "created"
    APPROVED = "approved"
    DECLINED = "declined"
    ON_MODERATION = "on-moderation"


class Role(str, Enum):
    CLIENT = "client"
    MODERATOR = "moderator"
