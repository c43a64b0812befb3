"""
Record types and enumerations for the ADCortex API.

Each record validates its input in ``from_dict`` and serializes to the wire
shape with ``to_dict``. Validation failures raise
:class:`adcortex.exceptions.ValidationError`.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pycountry

from .exceptions import ValidationError


class Gender(str, Enum):
    """Gender of the user."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Role(str, Enum):
    """Sender of a chat message."""

    USER = "user"
    AI = "ai"

    @classmethod
    def _missing_(cls, value):
        if value == "assistant":
            return cls.AI
        return None


class Interest(str, Enum):
    """Interest categories understood by the matching service."""

    FLIRTING = "flirting"
    GAMING = "gaming"
    SPORTS = "sports"
    MUSIC = "music"
    TRAVEL = "travel"
    TECHNOLOGY = "technology"
    ART = "art"
    COOKING = "cooking"
    ALL = "all"


class Language(str, Enum):
    """Conversation language (ISO 639-1)."""

    AR = "ar"  # Arabic
    BG = "bg"  # Bulgarian
    CA = "ca"  # Catalan
    CS = "cs"  # Czech
    DA = "da"  # Danish
    DE = "de"  # German
    EL = "el"  # Greek
    EN = "en"  # English
    ES = "es"  # Spanish
    ET = "et"  # Estonian
    FA = "fa"  # Persian
    FI = "fi"  # Finnish
    FR = "fr"  # French
    GL = "gl"  # Galician
    GU = "gu"  # Gujarati
    HE = "he"  # Hebrew
    HI = "hi"  # Hindi
    HR = "hr"  # Croatian
    HU = "hu"  # Hungarian
    HY = "hy"  # Armenian
    ID = "id"  # Indonesian
    IT = "it"  # Italian
    JA = "ja"  # Japanese
    KA = "ka"  # Georgian
    KO = "ko"  # Korean
    KU = "ku"  # Kurdish
    LT = "lt"  # Lithuanian
    LV = "lv"  # Latvian
    MK = "mk"  # Macedonian
    MN = "mn"  # Mongolian
    MR = "mr"  # Marathi
    MS = "ms"  # Malay
    MY = "my"  # Burmese
    NB = "nb"  # Norwegian Bokmal
    NL = "nl"  # Dutch
    PL = "pl"  # Polish
    PT = "pt"  # Portuguese
    RO = "ro"  # Romanian
    RU = "ru"  # Russian
    SK = "sk"  # Slovak
    SL = "sl"  # Slovenian
    SQ = "sq"  # Albanian
    SR = "sr"  # Serbian
    SV = "sv"  # Swedish
    TH = "th"  # Thai
    TR = "tr"  # Turkish
    UK = "uk"  # Ukrainian
    UR = "ur"  # Urdu
    VI = "vi"  # Vietnamese


def _require(data: Any, key: str, expected: type | tuple[type, ...]) -> Any:
    """Fetch a required key from a mapping and check its type."""
    if not isinstance(data, dict):
        raise ValidationError(f"expected an object, got {type(data).__name__}")
    if key not in data or data[key] is None:
        raise ValidationError("field required", field=key)
    value = data[key]
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in (
        expected if isinstance(expected, tuple) else (expected,)
    ):
        raise ValidationError("unexpected boolean", field=key)
    if not isinstance(value, expected):
        raise ValidationError(f"unexpected type {type(value).__name__}", field=key)
    return value


def _enum_value(enum_cls: type[Enum], value: Any, key: str) -> Any:
    """Coerce a raw value to an enum member."""
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{value!r} is not a valid {enum_cls.__name__}", field=key) from None


@dataclass(frozen=True)
class Platform:
    """Platform the conversation happens on."""

    name: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Platform":
        return cls(
            name=_require(data, "name", str),
            version=_require(data, "version", str),
        )


@dataclass(frozen=True)
class UserInfo:
    """Information about the user in the conversation."""

    user_id: str
    age: int
    gender: Gender
    location: str  # ISO 3166-1 alpha-2
    language: Language = Language.EN
    interests: tuple[Interest, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "age": self.age,
            "gender": self.gender.value,
            "location": self.location,
            "language": self.language.value,
            "interests": [i.value for i in self.interests],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserInfo":
        location = _require(data, "location", str).upper()
        if pycountry.countries.get(alpha_2=location) is None:
            raise ValidationError(f"{location} is not a valid country code", field="location")

        language = data.get("language") or "en"
        if isinstance(language, str):
            language = language.lower()

        interests = data.get("interests", [])
        if not isinstance(interests, list):
            raise ValidationError("expected a list", field="interests")

        return cls(
            user_id=_require(data, "user_id", str),
            age=_require(data, "age", int),
            gender=_enum_value(Gender, _require(data, "gender", str), "gender"),
            location=location,
            language=_enum_value(Language, language, "language"),
            interests=tuple(_enum_value(Interest, i, "interests") for i in interests),
        )


@dataclass(frozen=True)
class SessionInfo:
    """Session details, fixed for the lifetime of a client."""

    session_id: str
    character_name: str
    user_info: UserInfo
    platform: Platform
    character_metadata: dict[str, Any] = field(default_factory=lambda: {"description": ""})

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "character_name": self.character_name,
            "character_metadata": dict(self.character_metadata),
            "user_info": self.user_info.to_dict(),
            "platform": self.platform.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionInfo":
        metadata = data.get("character_metadata") if isinstance(data, dict) else None
        if metadata is None:
            metadata = {"description": ""}
        elif isinstance(metadata, str):
            metadata = {"description": metadata}
        elif not isinstance(metadata, dict):
            raise ValidationError("expected an object", field="character_metadata")

        return cls(
            session_id=_require(data, "session_id", str),
            character_name=_require(data, "character_name", str),
            user_info=UserInfo.from_dict(_require(data, "user_info", dict)),
            platform=Platform.from_dict(_require(data, "platform", dict)),
            character_metadata=metadata,
        )


@dataclass(frozen=True)
class Message:
    """A single chat message."""

    role: Role
    content: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        role = _enum_value(Role, _require(data, "role", str), "role")
        content = _require(data, "content", str)
        if data.get("timestamp") is not None:
            return cls(role=role, content=content, timestamp=_require(data, "timestamp", (int, float)))
        return cls(role=role, content=content)


@dataclass(frozen=True)
class Ad:
    """An advertisement returned by the matching service."""

    ad_title: str
    ad_description: str
    placement_template: str
    link: str
    idx: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "ad_title": self.ad_title,
            "ad_description": self.ad_description,
            "placement_template": self.placement_template,
            "link": self.link,
        }
        if self.idx is not None:
            result["idx"] = self.idx
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Ad":
        idx = None
        if isinstance(data, dict) and data.get("idx") is not None:
            idx = _require(data, "idx", int)
        return cls(
            ad_title=_require(data, "ad_title", str),
            ad_description=_require(data, "ad_description", str),
            placement_template=_require(data, "placement_template", str),
            link=_require(data, "link", str),
            idx=idx,
        )


@dataclass(frozen=True)
class AdResponse:
    """Body of a successful ad match response."""

    ads: tuple[Ad, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"ads": [ad.to_dict() for ad in self.ads]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdResponse":
        ads = _require(data, "ads", list)
        return cls(ads=tuple(Ad.from_dict(ad) for ad in ads))
