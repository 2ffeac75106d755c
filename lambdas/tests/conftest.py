"""Shared pytest fixtures for roster tests."""

import json
import os

import boto3
import pytest
from moto import mock_aws

from shared.config import reset_config

os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "lw-roster")

TABLE_NAME = "test-roster"


def make_character(name: str = "Test Warrior", **overrides) -> dict:
    """Build a valid character dict, overriding any field."""
    character = {
        "name": name,
        "health": 25,
        "subclass": "Test Fighter",
        "description": "A test character for unit testing",
        "attack": 6,
        "defense": 4,
        "will": 8,
        "speed": 7,
        "is_flying": False,
        "attacks": [
            "Sword Strike - 8 - basic melee attack within 1 pace",
            "Shield Bash - 4 - stun enemy for one turn within 1 pace",
        ],
    }
    character.update(overrides)
    return character


def character_json(name: str = "Test Warrior", **overrides) -> str:
    """Build a valid character JSON object."""
    return json.dumps(make_character(name, **overrides))


def roster_json(*names: str) -> str:
    """Build a roster document with one default character per name."""
    return json.dumps([make_character(name) for name in names])


@pytest.fixture
def env_setup(monkeypatch):
    """Set the environment variables the roster Lambda reads."""
    monkeypatch.setenv("TABLE_NAME", TABLE_NAME)
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("POWERTOOLS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ROSTER_ID", "test")
    monkeypatch.delenv("ROSTER_COMPANIONS", raising=False)
    monkeypatch.delenv("ROSTER_TRACK_PENDING", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def dynamodb_table(env_setup):
    """Create a mocked single-table DynamoDB table."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb")
        table = dynamodb.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        yield table
