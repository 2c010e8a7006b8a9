import re
from urllib.parse import parse_qs, urlparse

from coursemarket.models.lesson import MediaType
from coursemarket.services.markdown_service import MarkdownService
from coursemarket.services.storage_service import StorageService


def make_storage():
    return StorageService(
        cdn_base_url="https://cdn.test/",
        upload_url="https://upload.test",
        signing_key="secret",
        algorithm="HS256",
    )


def test_build_key_format():
    key = make_storage().build_key(7, "../My Lecture (final).mp4")
    assert re.fullmatch(r"lesson-7/[0-9a-f]{32}-My-Lecture-final-.mp4", key)


def test_presigned_upload():
    result = make_storage().generate_presigned_upload(3, "clip.mp4", MediaType.VIDEO)

    assert result["key"].startswith("lesson-3/")
    assert result["public_url"] == f"https://cdn.test/{result['key']}"
    query = parse_qs(urlparse(result["upload_url"]).query)
    assert query["key"] == [result["key"]]
    assert query["type"] == ["VIDEO"]


def test_signed_url_token_verifies():
    storage = make_storage()
    url = "https://cdn.test/lesson-1/clip.mp4"

    result = storage.sign_url(url, expires_in=60)
    query = parse_qs(urlparse(result["signed_url"]).query)

    assert result["expires_in"] == 60
    assert storage.verify_token(query["token"][0], url) is True
    assert storage.verify_token(query["token"][0], "https://cdn.test/other.mp4") is False
    assert storage.verify_token("garbage", url) is False


def test_markdown_preview_is_sanitized():
    html = MarkdownService().convert_to_html("# Title\n\n<script>alert(1)</script>\n\n| a | b |\n|---|---|\n| 1 | 2 |")

    assert "<h1" in html
    assert "<table>" in html
    assert "<script>" not in html
