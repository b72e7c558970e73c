"""Request id sanitization."""

import uuid

import pytest

from portal.middleware.request_id import sanitize_request_id


def test_safe_id_is_kept() -> None:
    assert sanitize_request_id("  req-42_A ") == "req-42_A"


@pytest.mark.parametrize("raw", [None, "", "has space", "semi;colon", "x" * 65])
def test_unsafe_id_is_replaced_with_uuid(raw) -> None:
    replaced = sanitize_request_id(raw)
    assert replaced != raw
    uuid.UUID(replaced)
