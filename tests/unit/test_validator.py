"""Unit tests for message descriptor validation."""

import json

import pytest

from gh_issue_messages.validator import (
    ValidationError,
    options_from_descriptor,
    validate_message_data,
    validate_message_file,
)


def _write(tmp_path, data):
    path = tmp_path / "message.json"
    path.write_text(json.dumps(data))
    return path


class TestValidateMessageFile:
    """Test descriptor file validation."""

    def test_minimal_descriptor(self, tmp_path):
        """Test title and body alone are valid."""
        data = validate_message_file(_write(tmp_path, {"title": "Report", "body": "Something failed"}))
        assert data == {"title": "Report", "body": "Something failed"}

    def test_full_descriptor(self, tmp_path):
        """Test all optional fields are accepted."""
        descriptor = {
            "title": "Report",
            "body": "Something failed",
            "update": "Still failing",
            "update_after_days": 2.5,
            "owner": "acme",
            "repo": "tools",
        }
        assert validate_message_file(_write(tmp_path, descriptor)) == descriptor

    def test_missing_body(self, tmp_path):
        """Test a missing body is reported."""
        with pytest.raises(ValidationError, match="body"):
            validate_message_file(_write(tmp_path, {"title": "Report"}))

    def test_negative_days(self, tmp_path):
        """Test negative update_after_days is rejected with its path."""
        with pytest.raises(ValidationError, match="update_after_days"):
            validate_message_file(
                _write(tmp_path, {"title": "Report", "body": "x", "update_after_days": -1})
            )

    def test_unknown_field(self, tmp_path):
        """Test unexpected properties are rejected."""
        with pytest.raises(ValidationError):
            validate_message_file(_write(tmp_path, {"title": "Report", "body": "x", "labels": []}))

    def test_partial_repository_override(self):
        """Test owner without repo is rejected."""
        with pytest.raises(ValidationError, match="together"):
            validate_message_data({"title": "Report", "body": "x", "owner": "acme"})

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON is reported."""
        path = tmp_path / "message.json"
        path.write_text("{")

        with pytest.raises(ValidationError, match="Invalid JSON"):
            validate_message_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="not found"):
            validate_message_file(tmp_path / "nope.json")


class TestOptionsFromDescriptor:
    """Test conversion into delivery options."""

    def test_defaults(self):
        options = options_from_descriptor({"title": "Report", "body": "x"})

        assert options.update == ""
        assert options.update_after_days == 7
        assert options.owner is None and options.repo is None

    def test_values(self):
        options = options_from_descriptor(
            {"title": "t", "body": "b", "update": "u", "update_after_days": 1, "owner": "o", "repo": "r"}
        )

        assert (options.update, options.update_after_days, options.owner, options.repo) == (
            "u", 1, "o", "r",
        )
