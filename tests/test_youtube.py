import pytest

from coursemarket.services.youtube import extract_youtube_id, normalize_youtube_url

EMBED = "https://www.youtube.com/embed/dQw4w9WgXcQ"


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ&t=42",
    "https://youtu.be/dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ?si=abc",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "dQw4w9WgXcQ",
    "  dQw4w9WgXcQ  ",
])
def test_normalize_known_forms(url):
    assert normalize_youtube_url(url) == EMBED


def test_normalize_is_idempotent():
    assert normalize_youtube_url(normalize_youtube_url("https://youtu.be/dQw4w9WgXcQ")) == EMBED


@pytest.mark.parametrize("url", [
    "https://vimeo.com/123456",
    "not a video",
    "",
])
def test_unrecognized_input_passes_through(url):
    assert normalize_youtube_url(url) == url


def test_extract_id():
    assert extract_youtube_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert extract_youtube_id(None) is None


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQX",
    "https://youtu.be/dQw4w9WgXcQX",
    "https://www.youtube.com/embed/dQw4w9WgXcQX",
    "dQw4w9WgXcQX",
])
def test_twelve_character_id_passes_through(url):
    assert extract_youtube_id(url) is None
    assert normalize_youtube_url(url) == url
