"""Tests for the object key format."""

import re

import pytest

from snapvault.models.image import ImageDimensions
from snapvault.storage.keys import (
    build_object_key,
    key_extension,
    parse_dimensions_from_key,
    sanitize_extension,
)

KEY_SHAPE = re.compile(r"^uploads/[0-9a-f-]{36}_(\d+)x(\d+)\.([a-z0-9]+)$")


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("photo.PNG", "png"),
        ("archive.tar.gz", "gz"),
        ("weird.J-P_G", "jpg"),
        ("no_extension", ""),
        (".hidden", ""),
        ("trailing.", ""),
    ],
)
def test_sanitize_extension(file_name, expected):
    assert sanitize_extension(file_name) == expected


def test_build_key_with_dimensions():
    key = build_object_key("holiday.png", ImageDimensions(width=800, height=600))

    match = KEY_SHAPE.match(key)
    assert match is not None
    assert match.groups() == ("800", "600", "png")


def test_build_key_without_dimensions_uses_zero_sentinel():
    key = build_object_key("report.pdf")

    assert KEY_SHAPE.match(key).groups() == ("0", "0", "pdf")


def test_build_key_falls_back_to_bin():
    key = build_object_key("README")

    assert key.endswith("_0x0.bin")


def test_build_key_is_unique_for_identical_inputs():
    dims = ImageDimensions(width=10, height=20)
    keys = {build_object_key("a.png", dims) for _ in range(50)}

    assert len(keys) == 50


def test_parse_round_trip_with_dimensions():
    dims = ImageDimensions(width=1920, height=1080)

    assert parse_dimensions_from_key(build_object_key("wall.jpg", dims)) == dims


def test_parse_round_trip_without_dimensions():
    assert parse_dimensions_from_key(build_object_key("wall.jpg", None)) is None


def test_parse_zero_sentinel_non_strict():
    assert parse_dimensions_from_key("uploads/abc_0x0.png", strict=False) == ImageDimensions(width=0, height=0)


@pytest.mark.parametrize(
    "key",
    [
        "uploads/a_100x.png",
        "other/a_100x200.png",
        "uploads/zz_100x200.png",
        "uploads/a_100x200",
        "uploads/a_100x0.png",
        "",
    ],
)
def test_parse_rejects_malformed_keys(key):
    assert parse_dimensions_from_key(key) is None


def test_key_extension():
    assert key_extension("uploads/a_1x1.WEBP") == "webp"
    assert key_extension("uploads/noext") == ""
