"""Testes para extração do token Bearer."""

import pytest

from app.core.dependencies import extract_bearer_token
from app.utils.errors import MalformedCredentialError


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc.def.ghi", "abc.def.ghi"),
        ("BEARER token", "token"),
    ],
)
def test_extract_valid_header(header, expected):
    assert extract_bearer_token(header) == expected


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "   ",
        "Bearer",
        "Bearer ",
        "Basic dXNlcjpwYXNz",
        "Token abc",
        "Bearer abc def",
        "Bearer  abc",
        "abc.def.ghi",
    ],
)
def test_extract_malformed_header(header):
    with pytest.raises(MalformedCredentialError):
        extract_bearer_token(header)
