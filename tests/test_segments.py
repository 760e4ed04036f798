"""Message segment decoding and encoding."""

import pytest

from mirai_client.errors import DecodeError
from mirai_client.models.segments import (
    SEGMENT_TYPES,
    At,
    AtAll,
    Image,
    Json,
    Plain,
    Quote,
    Source,
    as_chain,
    chain_to_wire,
    decode_chain,
    decode_segment,
    plain_text,
)


class TestDecodeSegment:
    def test_dispatches_on_type(self):
        assert decode_segment({"type": "Plain", "text": "hi"}) == Plain(text="hi")
        assert decode_segment({"type": "At", "target": 42, "display": "@bob"}) == At(target=42, display="@bob")
        assert isinstance(decode_segment({"type": "AtAll"}), AtAll)

    def test_camel_case_fields(self):
        image = decode_segment({"type": "Image", "imageId": "{ABC}.png", "url": "http://x/y.png", "path": None})
        assert isinstance(image, Image)
        assert image.image_id == "{ABC}.png"
        assert image.path is None

    def test_json_segment_field(self):
        segment = decode_segment({"type": "Json", "json": "{}"})
        assert isinstance(segment, Json)
        assert segment.json_ == "{}"
        assert segment.to_wire() == {"type": "Json", "json": "{}"}

    def test_quote_origin_is_decoded(self):
        quote = decode_segment({
            "type": "Quote", "id": 5, "groupId": 0, "senderId": 42, "targetId": 123456,
            "origin": [{"type": "Plain", "text": "earlier"}],
        })
        assert isinstance(quote, Quote)
        assert quote.sender_id == 42
        assert quote.origin == [Plain(text="earlier")]

    def test_unknown_type_is_rejected(self):
        with pytest.raises(DecodeError, match="MarketFace"):
            decode_segment({"type": "MarketFace", "id": 1})

    def test_missing_type_is_rejected(self):
        with pytest.raises(DecodeError, match="None"):
            decode_segment({"text": "no type"})

    def test_invalid_fields(self):
        with pytest.raises(DecodeError, match="Invalid Source"):
            decode_segment({"type": "Source", "id": "not-a-number", "time": 0})

    def test_non_object_node(self):
        with pytest.raises(DecodeError):
            decode_segment("Plain")

    def test_every_registered_kind_has_matching_literal(self):
        for kind, model in SEGMENT_TYPES.items():
            assert model.model_fields["type"].default == kind


class TestChains:
    def test_decode_chain_keeps_order(self):
        chain = decode_chain([
            {"type": "Source", "id": 1, "time": 2},
            {"type": "Plain", "text": "a"},
            {"type": "At", "target": 3},
        ])
        assert [type(s) for s in chain] == [Source, Plain, At]

    def test_decode_chain_requires_array(self):
        with pytest.raises(DecodeError):
            decode_chain({"type": "Plain", "text": "a"})

    def test_unknown_segment_fails_the_whole_chain(self):
        with pytest.raises(DecodeError):
            decode_chain([{"type": "Plain", "text": "a"}, {"type": "Dice", "value": 6}])

    def test_string_becomes_plain_chain(self):
        assert as_chain("hi") == [Plain(text="hi")]

    def test_wire_form_omits_unset_fields(self):
        wire = chain_to_wire([Plain(text="look"), Image(url="http://x/y.png"), At(target=42)])
        assert wire == [
            {"type": "Plain", "text": "look"},
            {"type": "Image", "url": "http://x/y.png"},
            {"type": "At", "target": 42, "display": ""},
        ]

    def test_plain_text(self):
        assert plain_text([Plain(text="a"), At(target=1), Plain(text="b")]) == "ab"
