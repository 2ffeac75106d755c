"""Roster Lambda handler - HTTP surface for the admin UI."""
from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig, Response
from aws_lambda_powertools.event_handler.exceptions import BadRequestError
from aws_lambda_powertools.event_handler.exceptions import (
    NotFoundError as APINotFoundError,
)
from aws_lambda_powertools.utilities.typing import LambdaContext

from roster.service import RosterService
from shared.config import get_config
from shared.db import RosterTable
from shared.exceptions import DecodeError, IndexOutOfRangeError

logger = Logger()
tracer = Tracer()
cors_config = CORSConfig(
    allow_origin="*",
    allow_headers=["Content-Type"],
    max_age=300
)
app = APIGatewayRestResolver(cors=cors_config)

# Initialize service lazily
_service: RosterService | None = None


def get_service() -> RosterService:
    """Get or create the roster service instance."""
    global _service
    if _service is None:
        config = get_config()
        table = RosterTable(config.table_name)
        _service = RosterService(table, config.roster_id, config.options)
    return _service


def reset_service() -> None:
    """Reset the service instance (for testing)."""
    global _service
    _service = None


def parse_index(raw: str) -> int:
    """Parse a roster position from a path parameter.

    Raises:
        BadRequestError: If the value is not an integer
    """
    try:
        return int(raw)
    except ValueError:
        raise BadRequestError(f"Invalid character index: {raw}") from None


@app.get("/characters")
@tracer.capture_method
def list_characters() -> dict[str, Any]:
    """List character names in roster order.

    Query parameters ``q`` (name substring) and ``subclass`` narrow the
    ``matches`` list; ``names`` always holds the whole roster.

    Returns:
        200 response with count, names, pending flag, subclasses and matches
    """
    query = app.current_event.get_query_string_value("q")
    subclass = app.current_event.get_query_string_value("subclass")
    return get_service().list_characters(query=query, subclass=subclass)


@app.get("/characters/<index>")
@tracer.capture_method
def get_character(index: str) -> dict[str, Any]:
    """Get full character details.

    Args:
        index: Roster position

    Returns:
        200 response with character details
    """
    position = parse_index(index)

    try:
        return get_service().get_character(position)
    except IndexOutOfRangeError:
        raise APINotFoundError("Character not found") from None


@app.post("/characters")
@tracer.capture_method
def add_character() -> Response:
    """Append a character to the roster.

    Returns:
        201 response with the new count
    """
    body = app.current_event.body or ""

    try:
        result = get_service().add_character(body)
    except DecodeError as e:
        raise BadRequestError(e.reason) from None

    return Response(
        status_code=201,
        content_type="application/json",
        body=result,
    )


@app.put("/characters/<index>")
@tracer.capture_method
def update_character(index: str) -> dict[str, Any]:
    """Replace a character in place.

    Args:
        index: Roster position

    Returns:
        200 response with the count and pending flag
    """
    position = parse_index(index)
    body = app.current_event.body or ""

    try:
        return get_service().update_character(position, body)
    except IndexOutOfRangeError:
        raise APINotFoundError("Character not found") from None
    except DecodeError as e:
        raise BadRequestError(e.reason) from None


@app.delete("/characters/<index>")
@tracer.capture_method
def delete_character(index: str) -> Response:
    """Delete a character by position.

    Args:
        index: Roster position

    Returns:
        204 response (no content)
    """
    position = parse_index(index)

    if not get_service().delete_character(position):
        raise APINotFoundError("Character not found")

    return Response(
        status_code=204,
        content_type="application/json",
        body=None,
    )


@app.get("/roster")
@tracer.capture_method
def preview_roster() -> Response:
    """Serialized roster, as it would be submitted.

    Returns:
        200 response with the JSON document
    """
    return Response(
        status_code=200,
        content_type="application/json",
        body=get_service().preview(),
    )


@app.post("/roster/submit")
@tracer.capture_method
def submit_roster() -> dict[str, Any]:
    """Persist the roster and clear the pending flag.

    Returns:
        200 response with the submitted count
    """
    return get_service().submit()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """Main Lambda entry point.

    Args:
        event: API Gateway event
        context: Lambda context

    Returns:
        API Gateway response
    """
    return app.resolve(event, context)
