"""Data URL parsing: the base64/mime pair that goes into the request."""
import base64
from moderator.images import split_data_url, to_data_url, mime_from_filename


def test_split_png_data_url() -> None:
    payload, mime = split_data_url("data:image/png;base64,iVBORw0KGgo=")
    assert payload == "iVBORw0KGgo="
    assert mime == "image/png"


def test_to_data_url_then_split() -> None:
    url = to_data_url(b"\xff\xd8\xff", "image/jpeg")
    assert url.startswith("data:image/jpeg;base64,")
    payload, mime = split_data_url(url)
    assert base64.b64decode(payload) == b"\xff\xd8\xff"
    assert mime == "image/jpeg"


def test_to_data_url_defaults_to_png() -> None:
    assert to_data_url(b"x", None).startswith("data:image/png;base64,")


def test_missing_mime_header_gives_none() -> None:
    payload, mime = split_data_url("data:base64,AAAA")
    assert payload == "AAAA"
    assert mime is None


def test_more_than_one_comma_is_rejected() -> None:
    assert split_data_url("data:image/png;base64,AA,BB") == (None, None)


def test_no_comma_or_empty() -> None:
    assert split_data_url("data:image/png;base64") == (None, None)
    assert split_data_url("") == (None, None)
    assert split_data_url(None) == (None, None)


def test_mime_from_filename() -> None:
    assert mime_from_filename("socks.JPG") == "image/jpeg"
    assert mime_from_filename("shirt.png") == "image/png"
    assert mime_from_filename("notes") is None
    assert mime_from_filename(None) is None
