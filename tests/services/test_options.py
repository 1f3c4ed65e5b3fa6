import pytest

from app.core.exceptions import InvalidRequestError
from app.utils.options import parse_option_payload


def test_map_is_kept():
    assert parse_option_payload({"A": "x", "B": "y"}) == {"A": "x", "B": "y"}


def test_json_string_is_decoded():
    assert parse_option_payload('{"A": "x", "B": "y"}') == {"A": "x", "B": "y"}


@pytest.mark.parametrize("raw", ["{bad json", "[1, 2]", "{}", "", 42, None])
def test_invalid_payloads(raw):
    with pytest.raises(InvalidRequestError) as exc_info:
        parse_option_payload(raw)

    assert exc_info.value.detail == "Invalid options format"
