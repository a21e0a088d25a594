"""Tests for bindata.identifiers."""

from __future__ import annotations

import re

import pytest

from bindata.identifiers import safe_function_name

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("CSS/Style-1.css", "css_style_1_css"),
        ("1abc", "_1abc"),
        ("___", "_"),
        ("_", "_"),
        ("a", "a"),
        ("__init__.py", "init_py"),
        ("img/2x/logo@2x.png", "img_2x_logo_2x_png"),
        ("/leading/slash", "leading_slash"),
        ("-9lives", "_9lives"),
        ("über.txt", "ber_txt"),
    ],
)
def test_safe_function_name_examples(name: str, expected: str) -> None:
    assert safe_function_name(name) == expected


@pytest.mark.parametrize(
    "name",
    [
        "a b c",
        "..",
        "0",
        "__9",
        "日本語.txt",
        "Makefile",
        "x--y__z",
        "web/static/js/app.min.js",
        "\\windows\\path.ini",
    ],
)
def test_safe_function_name_is_identifier(name: str) -> None:
    result = safe_function_name(name)

    assert _IDENTIFIER.match(result)
    assert "__" not in result
    assert result.isidentifier()
    assert safe_function_name(name) == result


def test_safe_function_name_rejects_empty_name() -> None:
    with pytest.raises(ValueError):
        safe_function_name("")
