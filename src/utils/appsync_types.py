"""
Type definitions for AppSync Lambda events.

Provides TypedDict definitions for the raw AppSync resolver event, plus a
parsed ResolverEvent with total, non-coercing argument extraction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, TypedDict, Union

# Dynamically-typed GraphQL argument value: string | number | list-of-self | absent
ArgumentValue = Union[str, int, float, bool, List["ArgumentValue"], Dict[str, Any], None]


class AppSyncIdentity(TypedDict, total=False):
    """AppSync Cognito User Pool identity."""

    sub: str  # Cognito user ID
    subject: str
    issuer: str
    username: str
    claims: Dict[str, Any]
    sourceIp: Union[List[str], str]
    defaultAuthStrategy: str


class AppSyncInfo(TypedDict, total=False):
    """Selection info for direct Lambda resolvers."""

    fieldName: str
    parentTypeName: str
    variables: Dict[str, Any]


class AppSyncEvent(TypedDict, total=False):
    """Base AppSync resolver event structure."""

    typeName: str
    fieldName: str
    identity: Optional[AppSyncIdentity]
    arguments: Dict[str, Any]
    source: Dict[str, Any]
    info: AppSyncInfo
    request: Dict[str, Any]
    prev: Dict[str, Any]  # Pipeline resolver previous result
    stash: Dict[str, Any]


# Helper functions for safe extraction


def as_string(value: ArgumentValue) -> Optional[str]:
    """Narrow a dynamic value to a string, or None if it is not one."""
    return value if isinstance(value, str) else None


def as_string_list(value: ArgumentValue) -> Optional[List[str]]:
    """Narrow a dynamic value to a list of strings, or None if any element is not one."""
    if not isinstance(value, list):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return list(value)


def get_caller_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract caller's Cognito sub (user ID) from event.

    Args:
        event: AppSync event

    Returns:
        Caller ID or None if not present
    """
    identity: Dict[str, Any] = event.get("identity") or {}
    result = identity.get("sub") or identity.get("subject")
    return result if isinstance(result, str) and result else None


def get_argument(event: Dict[str, Any], name: str, default: Any = None) -> Any:
    """
    Extract an argument from the event.

    Args:
        event: AppSync event
        name: Argument name
        default: Default value if not present

    Returns:
        Argument value or default
    """
    arguments = event.get("arguments") or {}
    return arguments.get(name, default)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as resolved by the API's auth mode."""

    subject: str
    issuer: Optional[str] = None
    username: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)
    source_ip: List[str] = field(default_factory=list)
    auth_strategy: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional["Identity"]:
        """Parse the identity block; None when no usable subject is present."""
        subject = raw.get("sub") or raw.get("subject")
        if not isinstance(subject, str) or not subject:
            return None

        source_ip = raw.get("sourceIp") or []
        if isinstance(source_ip, str):
            source_ip = [source_ip]

        return cls(
            subject=subject,
            issuer=raw.get("issuer"),
            username=raw.get("username"),
            claims=dict(raw.get("claims") or {}),
            source_ip=list(source_ip),
            auth_strategy=raw.get("defaultAuthStrategy") or raw.get("authStrategy"),
        )


@dataclass(frozen=True)
class ResolverEvent:
    """
    One field-resolution request from AppSync.

    source, request, prev and stash are carried through untouched.
    """

    type_name: str
    field_name: str
    arguments: Dict[str, ArgumentValue] = field(default_factory=dict)
    identity: Optional[Identity] = None
    source: Optional[Dict[str, Any]] = None
    request: Optional[Dict[str, Any]] = None
    prev: Optional[Dict[str, Any]] = None
    stash: Optional[Dict[str, Any]] = None

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "ResolverEvent":
        """
        Parse a raw AppSync Lambda event.

        typeName/fieldName are read from the top level, falling back to the
        direct-resolver `info` block.
        """
        info = event.get("info") or {}
        raw_identity = event.get("identity")

        return cls(
            type_name=event.get("typeName") or info.get("parentTypeName") or "",
            field_name=event.get("fieldName") or info.get("fieldName") or "",
            arguments=dict(event.get("arguments") or {}),
            identity=Identity.from_dict(raw_identity) if isinstance(raw_identity, Mapping) else None,
            source=event.get("source"),
            request=event.get("request"),
            prev=event.get("prev"),
            stash=event.get("stash"),
        )

    def argument(self, name: str) -> ArgumentValue:
        """Raw argument value, or None when absent."""
        return self.arguments.get(name)

    def has_argument(self, name: str) -> bool:
        return self.arguments.get(name) is not None

    def caller_subject(self) -> Optional[str]:
        """identity.subject if an identity is present, else None."""
        return self.identity.subject if self.identity else None
