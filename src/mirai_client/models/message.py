"""
Received messages: a decoded chain with its Source and Quote pulled out.
"""

from typing import Any, Iterable, Optional

from pydantic import model_validator

from mirai_client.models.base import WireModel
from mirai_client.models.segments import MessageChain, Quote, Segment, Source, decode_chain, plain_text


def _split(segments: Iterable[Segment]) -> dict[str, Any]:
    source: Optional[Source] = None
    quote: Optional[Quote] = None
    content: list[Segment] = []
    for segment in segments:
        # last one wins if the server sends more than one
        if isinstance(segment, Source):
            source = segment
        elif isinstance(segment, Quote):
            quote = segment
        else:
            content.append(segment)
    return {"source": source, "quote": quote, "content": tuple(content)}


class ReceivedMessage(WireModel):
    """A delivered message. Validating a raw wire chain (a list) decomposes it."""

    source: Optional[Source] = None
    quote: Optional[Quote] = None
    content: tuple[Segment, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _from_chain(cls, value: Any) -> Any:
        if isinstance(value, list):
            return _split(decode_chain(value))
        return value

    @property
    def text(self) -> str:
        return plain_text(self.content)

    def to_chain(self) -> MessageChain:
        """Rebuild the full chain, Source and Quote first as the server sends them."""
        head: MessageChain = [seg for seg in (self.source, self.quote) if seg is not None]
        return head + list(self.content)


def decompose(segments: Iterable[Segment]) -> ReceivedMessage:
    return ReceivedMessage(**_split(segments))
