"""
GraphQL response builders for Lambda resolvers.

Maps between the users table's typed attribute format and the User
profile returned to AppSync.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, TypedDict

# DynamoDB typed attribute, e.g. {"S": "bob"} or {"L": [{"S": "b-1"}]}
AttributeValue = Dict[str, Any]
AttributeMap = Dict[str, AttributeValue]

STRING_FIELDS = (
    "userId",
    "email",
    "username",
    "aboutMe",
    "pronoun",
    "avatarUrl",
    "createdTime",
)
STRING_LIST_FIELDS = ("joinedBuildings",)


class UserResponse(TypedDict):
    """GraphQL User response type."""

    userId: Optional[str]
    email: Optional[str]
    username: Optional[str]
    aboutMe: Optional[str]
    pronoun: Optional[str]
    avatarUrl: Optional[str]
    joinedBuildings: Optional[List[str]]
    createdTime: Optional[str]


@dataclass
class ProfileRecord:
    """
    A user's profile as stored in the users table.

    Every field other than userId is optional: an attribute missing from the
    stored item stays None, it never defaults to an empty value. Items
    written before pronoun/avatarUrl existed decode the same way.
    """

    user_id: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    about_me: Optional[str] = None
    pronoun: Optional[str] = None
    avatar_url: Optional[str] = None
    joined_buildings: Optional[List[str]] = None
    created_time: Optional[str] = None

    def to_dict(self) -> UserResponse:
        """Serialize with GraphQL field names; unset fields are null."""
        return UserResponse(
            userId=self.user_id,
            email=self.email,
            username=self.username,
            aboutMe=self.about_me,
            pronoun=self.pronoun,
            avatarUrl=self.avatar_url,
            joinedBuildings=list(self.joined_buildings) if self.joined_buildings is not None else None,
            createdTime=self.created_time,
        )


_ATTRIBUTE_TO_FIELD = {
    "userId": "user_id",
    "email": "email",
    "username": "username",
    "aboutMe": "about_me",
    "pronoun": "pronoun",
    "avatarUrl": "avatar_url",
    "joinedBuildings": "joined_buildings",
    "createdTime": "created_time",
}


def _decode_string(attribute: Any) -> Optional[str]:
    if not isinstance(attribute, Mapping):
        return None
    value = attribute.get("S")
    return value if isinstance(value, str) else None


def _decode_string_list(attribute: Any) -> Optional[List[str]]:
    # Accepts both a list of {"S": ...} and a string set; anything else is unset.
    if not isinstance(attribute, Mapping):
        return None

    if "SS" in attribute:
        values = attribute["SS"]
        if isinstance(values, list) and all(isinstance(v, str) for v in values):
            return list(values)
        return None

    elements = attribute.get("L")
    if not isinstance(elements, list):
        return None

    decoded = [_decode_string(element) for element in elements]
    if any(value is None for value in decoded):
        return None
    return [value for value in decoded if value is not None]


def to_record(attributes: Mapping[str, Any]) -> ProfileRecord:
    """
    Build a ProfileRecord from a users table item.

    Args:
        attributes: Item in DynamoDB typed attribute format

    Returns:
        ProfileRecord with every known attribute decoded; absent or
        malformed attributes are left as None
    """
    record = ProfileRecord()

    for name in STRING_FIELDS:
        if name in attributes:
            setattr(record, _ATTRIBUTE_TO_FIELD[name], _decode_string(attributes[name]))

    for name in STRING_LIST_FIELDS:
        if name in attributes:
            setattr(record, _ATTRIBUTE_TO_FIELD[name], _decode_string_list(attributes[name]))

    return record


def _encode(name: str, value: Any) -> AttributeValue:
    if name in STRING_LIST_FIELDS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError(f"{name} must be a list of strings")
        return {"L": [{"S": v} for v in value]}

    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    return {"S": value}


def from_updates(fields: Mapping[str, Any]) -> AttributeMap:
    """
    Encode the fields being changed into attribute values.

    Only the given fields are encoded; each entry replaces the stored value.

    Args:
        fields: GraphQL field name to new value

    Returns:
        Attribute map suitable for a SET update

    Raises:
        KeyError: If a field name is not part of the User schema
        TypeError: If a value does not match the field's declared type
    """
    encoded: AttributeMap = {}
    for name, value in fields.items():
        if name not in _ATTRIBUTE_TO_FIELD:
            raise KeyError(f"Unknown user field: {name}")
        encoded[name] = _encode(name, value)
    return encoded


def record_fields(record: ProfileRecord) -> Dict[str, Any]:
    """Populated fields of a record, keyed by GraphQL field name."""
    return {name: value for name, value in record.to_dict().items() if value is not None}
