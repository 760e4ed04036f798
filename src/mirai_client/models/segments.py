"""
Message segments, the typed units of a message chain.

Every wire node is `{"type": "<Kind>", ...camelCase fields}`. Decoding looks the
kind up in SEGMENT_TYPES; an unknown kind is rejected with DecodeError, never
skipped.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Sequence, Union

from pydantic import Field, ValidationError, field_validator

from mirai_client.errors import DecodeError
from mirai_client.models.base import WireModel


class Source(WireModel):
    """Id and send time of a delivered message. Always first in a received chain."""
    type: Literal["Source"] = "Source"
    id: int
    time: int


class Quote(WireModel):
    """Reference to the message being replied to."""
    type: Literal["Quote"] = "Quote"
    id: int
    group_id: int = 0
    sender_id: int = 0
    target_id: int = 0
    origin: list[Any] = Field(default_factory=list)

    @field_validator("origin", mode="before")
    @classmethod
    def _decode_origin(cls, value: Any) -> Any:
        if isinstance(value, list):
            return decode_chain(value)
        return value


class At(WireModel):
    type: Literal["At"] = "At"
    target: int
    display: str = ""


class AtAll(WireModel):
    type: Literal["AtAll"] = "AtAll"


class Face(WireModel):
    type: Literal["Face"] = "Face"
    face_id: Optional[int] = None
    name: Optional[str] = None


class Plain(WireModel):
    type: Literal["Plain"] = "Plain"
    text: str


class Image(WireModel):
    # Any one of image_id, url or path identifies the image when sending
    type: Literal["Image"] = "Image"
    image_id: Optional[str] = None
    url: Optional[str] = None
    path: Optional[str] = None


class FlashImage(WireModel):
    type: Literal["FlashImage"] = "FlashImage"
    image_id: Optional[str] = None
    url: Optional[str] = None
    path: Optional[str] = None


class Voice(WireModel):
    type: Literal["Voice"] = "Voice"
    voice_id: Optional[str] = None
    url: Optional[str] = None
    path: Optional[str] = None


class Xml(WireModel):
    type: Literal["Xml"] = "Xml"
    xml: str


class Json(WireModel):
    type: Literal["Json"] = "Json"
    json_: str = Field(alias="json")


class App(WireModel):
    type: Literal["App"] = "App"
    content: str


class Poke(WireModel):
    """Poke name, e.g. "Poke", "ShowLove", "Like", "Heartbroken", "SixSixSix", "FangDaZhao"."""
    type: Literal["Poke"] = "Poke"
    name: str


Segment = Union[Source, Quote, At, AtAll, Face, Plain, Image, FlashImage, Voice, Xml, Json, App, Poke]
MessageChain = list[Segment]

SEGMENT_TYPES: dict[str, type[WireModel]] = {
    "Source": Source,
    "Quote": Quote,
    "At": At,
    "AtAll": AtAll,
    "Face": Face,
    "Plain": Plain,
    "Image": Image,
    "FlashImage": FlashImage,
    "Voice": Voice,
    "Xml": Xml,
    "Json": Json,
    "App": App,
    "Poke": Poke,
}


def decode_segment(node: Any) -> Segment:
    if not isinstance(node, dict):
        raise DecodeError(f"Message segment must be an object, got {type(node).__name__}")
    kind = node.get("type")
    model = SEGMENT_TYPES.get(kind)  # type: ignore[arg-type]
    if model is None:
        raise DecodeError(f"Unknown message segment type: {kind!r}", details={"node": node})
    try:
        return model.model_validate(node)  # type: ignore[return-value]
    except ValidationError as e:
        raise DecodeError(f"Invalid {kind} segment: {e}", details={"node": node}) from e


def decode_chain(nodes: Any) -> MessageChain:
    if not isinstance(nodes, list):
        raise DecodeError(f"Message chain must be an array, got {type(nodes).__name__}")
    return [decode_segment(node) for node in nodes]


def as_chain(message: Union[str, Sequence[Segment]]) -> MessageChain:
    """Accept a bare string as a one-segment Plain chain."""
    if isinstance(message, str):
        return [Plain(text=message)]
    return list(message)


def chain_to_wire(chain: Sequence[Segment]) -> list[dict[str, Any]]:
    return [segment.to_wire() for segment in chain]


def plain_text(chain: Sequence[Segment]) -> str:
    return "".join(segment.text for segment in chain if isinstance(segment, Plain))
