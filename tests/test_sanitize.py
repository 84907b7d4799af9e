import pytest

from app.catalog.sanitize import (
    normalize_category,
    sanitize_images,
    sanitize_product_fields,
    sanitize_sizes,
    to_bool,
    to_number,
)
from app.utils.urls import normalize_image_url


def test_sizes_are_deduplicated_and_sorted():
    assert sanitize_sizes([10, "9", 9.0, "bad", None, True, "  ", 7.5]) == [7.5, 9, 10]


@pytest.mark.parametrize("values", [[3, 1, 2, 2], ["11", "10.5", 10.5, "x"], [], [float("nan"), 4]])
def test_size_sanitation_is_idempotent(values):
    once = sanitize_sizes(values)
    assert sanitize_sizes(once) == once
    assert once == sorted(set(once))


def test_sizes_require_a_list():
    assert sanitize_sizes("9") == []
    assert sanitize_sizes(None) == []


def test_to_number():
    assert to_number("1800") == 1800
    assert isinstance(to_number("1800"), int)
    assert to_number(" 10.5 ") == 10.5
    assert to_number(True) is None
    assert to_number("nan") is None
    assert to_number("") is None
    assert to_number([1]) is None


@pytest.mark.parametrize("value", ["Bags", "bags", "  BAGS "])
def test_category_matches_case_insensitively(value):
    assert normalize_category(value) == "Bags"


@pytest.mark.parametrize("value", ["Hats", "", None, 3])
def test_unknown_category_is_empty(value):
    assert normalize_category(value) == ""


@pytest.mark.parametrize("value,expected", [("true", True), ("On", True), ("false", False), ("", False), (1, True), (0, False)])
def test_to_bool(value, expected):
    assert to_bool(value) is expected


def test_images_are_trimmed_and_empties_dropped():
    assert sanitize_images([" a.jpg ", "", None, 4, "b.jpg"]) == ["a.jpg", "b.jpg"]


@pytest.mark.parametrize(
    "url",
    [
        "https://drive.google.com/file/d/abc123/view?usp=sharing",
        "https://drive.google.com/open?id=abc123",
        "https://drive.google.com/thumbnail?id=abc123&sz=w1000",
    ],
)
def test_drive_links_become_thumbnails(url):
    assert normalize_image_url(url) == "https://drive.google.com/thumbnail?id=abc123&sz=w1000"


def test_non_drive_urls_with_id_param_are_kept():
    assert normalize_image_url(" https://cdn.example.com/img?id=9 ") == "https://cdn.example.com/img?id=9"


def test_sanitize_product_fields_keeps_presence():
    data = sanitize_product_fields({"sizes": [], "brand": " Nike ", "id": "x", "color": "red"})
    assert data == {"brand": "Nike", "sizes": []}
