"""JSON encoding and decoding for roster documents.

Input documents may begin with a UTF-8 byte-order mark (files saved by
Windows editors do); it is stripped before parsing. Decoding is strict and
every failure surfaces as a DecodeError carrying a readable reason.
"""

from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

from .exceptions import DecodeError
from .models import Character

BOM = "\ufeff"

_roster_adapter = TypeAdapter(list[Character])


def strip_bom(json_text: str) -> str:
    """Remove any leading byte-order marks."""
    return json_text.lstrip(BOM)


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single line.

    Args:
        error: The validation error raised while parsing

    Returns:
        Reason string such as ``"0.health: Input should be less than or equal to 255"``
    """
    parts = []
    for detail in error.errors(include_url=False):
        location = ".".join(str(p) for p in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def decode(json_text: str, *, companions: bool = True) -> list[Character]:
    """Decode a JSON array of characters.

    Args:
        json_text: JSON document text
        companions: Whether the companions field is part of the schema

    Returns:
        Characters in document order

    Raises:
        DecodeError: If the text is not valid JSON or violates the schema
    """
    try:
        return _roster_adapter.validate_json(
            strip_bom(json_text),
            strict=True,
            context={"companions": companions},
        )
    except ValidationError as e:
        raise DecodeError(describe_validation_error(e)) from None


def decode_one(json_text: str, *, companions: bool = True) -> Character:
    """Decode a single character object.

    Args:
        json_text: JSON object text
        companions: Whether the companions field is part of the schema

    Returns:
        The decoded Character

    Raises:
        DecodeError: If the text is not valid JSON or violates the schema
    """
    try:
        return Character.model_validate_json(
            strip_bom(json_text),
            strict=True,
            context={"companions": companions},
        )
    except ValidationError as e:
        raise DecodeError(describe_validation_error(e)) from None


def encode(characters: Iterable[Character], *, companions: bool = True) -> str:
    """Encode characters as a pretty-printed JSON array.

    Args:
        characters: Records to encode, in order
        companions: Whether to emit the companions field

    Returns:
        JSON text with two-space indentation
    """
    exclude = None if companions else {"__all__": {"companions"}}
    return _roster_adapter.dump_json(
        list(characters), indent=2, exclude=exclude
    ).decode("utf-8")


def encode_one(character: Character, *, companions: bool = True) -> str:
    """Encode a single character as a pretty-printed JSON object."""
    exclude = None if companions else {"companions"}
    return character.model_dump_json(indent=2, exclude=exclude)
