"""
Tests for the Quran and hadith content client.

HTTP is served by httpx.MockTransport; no network access.
"""

import io
import random

import httpx
import pytest
from PIL import Image

from mushafbot.content.quran import (
    SURAH_NAMES,
    ContentError,
    QuranClient,
    flatten_to_jpeg,
    parse_page_number,
    parse_surah_number,
)


def make_client(handler, **kwargs) -> QuranClient:
    return QuranClient(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        rng=random.Random(0),
        **kwargs,
    )


def png_bytes(mode: str = "RGBA") -> bytes:
    image = Image.new(mode, (4, 4), (0, 0, 0, 0) if mode == "RGBA" else (0, 0, 0))
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


class TestNumberParsing:
    """Tests for surah and page number parsing."""

    def test_surah_bounds(self):
        assert parse_surah_number("1") == 1
        assert parse_surah_number(" 114 ") == 114
        assert parse_surah_number("0") is None
        assert parse_surah_number("115") is None

    def test_surah_rejects_non_digits(self):
        assert parse_surah_number("abc") is None
        assert parse_surah_number("-1") is None
        assert parse_surah_number("1.5") is None
        assert parse_surah_number("") is None

    def test_page_bounds(self):
        assert parse_page_number("604") == 604
        assert parse_page_number("605") is None
        assert parse_page_number("0") is None

    def test_surah_names(self):
        assert len(SURAH_NAMES) == 114
        assert SURAH_NAMES[0] == "الفاتحة"
        assert SURAH_NAMES[17] == "الكهف"
        assert SURAH_NAMES[-1] == "الناس"

    def test_surah_names_have_no_stray_whitespace(self):
        for name in SURAH_NAMES:
            assert name == name.strip()
            assert not any(ch in name for ch in "\r\n\t")


class TestFlattenToJpeg:
    """Tests for flatten_to_jpeg."""

    def test_transparent_becomes_white(self):
        jpeg = flatten_to_jpeg(png_bytes())

        with Image.open(io.BytesIO(jpeg)) as image:
            assert image.format == "JPEG"
            assert image.getpixel((0, 0))[0] > 240

    def test_opaque_image(self):
        jpeg = flatten_to_jpeg(png_bytes("RGB"))

        with Image.open(io.BytesIO(jpeg)) as image:
            assert image.getpixel((0, 0))[0] < 15


class TestQuranClient:
    """Tests for QuranClient."""

    @pytest.mark.asyncio
    async def test_get_surah(self):
        def handler(request):
            assert request.url.path == "/api/surah/112"
            return httpx.Response(200, json={
                "nama": "Al-Ikhlas",
                "jumlah_ayat": 4,
                "tempat_turun": "mekah",
                "ayat": [{"nomor": i, "ar": f"verse {i}"} for i in range(1, 5)],
            })

        client = make_client(handler)
        surah = await client.get_surah(112)
        await client.close()

        assert surah.name == "Al-Ikhlas"
        assert surah.verse_count == 4
        assert not surah.is_madani
        assert surah.verses[0] == (1, "verse 1")

    @pytest.mark.asyncio
    async def test_surah_without_verses(self):
        client = make_client(lambda request: httpx.Response(200, json={"nama": "x"}))

        with pytest.raises(ContentError):
            await client.get_surah(1)

    @pytest.mark.asyncio
    async def test_http_error_becomes_content_error(self):
        client = make_client(lambda request: httpx.Response(500))

        with pytest.raises(ContentError):
            await client.get_surah(1)

    @pytest.mark.asyncio
    async def test_transport_error_becomes_content_error(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        client = make_client(handler)

        with pytest.raises(ContentError):
            await client.get_recitation(1)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(ContentError):
            await client.get_random_verse()

    @pytest.mark.asyncio
    async def test_get_recitation(self):
        def handler(request):
            assert request.url.path.endswith("/36.mp3")
            return httpx.Response(200, content=b"ID3audio")

        client = make_client(handler)

        assert await client.get_recitation(36) == b"ID3audio"

    @pytest.mark.asyncio
    async def test_get_page_image(self):
        def handler(request):
            assert request.url.path == "/png_big/1.png"
            return httpx.Response(200, content=png_bytes())

        client = make_client(handler)
        jpeg = await client.get_page_image(1)

        assert jpeg[:2] == b"\xff\xd8"

    @pytest.mark.asyncio
    async def test_undecodable_page(self):
        client = make_client(lambda request: httpx.Response(200, content=b"not an image"))

        with pytest.raises(ContentError):
            await client.get_page_image(1)

    @pytest.mark.asyncio
    async def test_get_random_verse(self):
        client = make_client(lambda request: httpx.Response(200, json={
            "code": 200,
            "status": "OK",
            "data": {"text": "آية", "numberInSurah": 5, "surah": {"name": "سورة الفاتحة"}},
        }))

        verse = await client.get_random_verse()

        assert verse.text == "آية"
        assert verse.surah_name == "سورة الفاتحة"
        assert verse.number_in_surah == 5

    @pytest.mark.asyncio
    async def test_verse_bad_status(self):
        client = make_client(lambda request: httpx.Response(200, json={"code": 404, "status": "Not Found"}))

        with pytest.raises(ContentError):
            await client.get_random_verse()

    @pytest.mark.asyncio
    async def test_hadith_requires_api_key(self):
        client = make_client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(ContentError):
            await client.get_random_hadith()

    @pytest.mark.asyncio
    async def test_get_random_hadith(self):
        def handler(request):
            assert request.url.params["apiKey"] == "secret"
            return httpx.Response(200, json={
                "status": 200,
                "hadiths": {"data": [{
                    "hadithNumber": "42",
                    "hadithArabic": "إنما الأعمال بالنيات",
                    "bookSlug": "sahih-bukhari",
                }]},
            })

        client = make_client(handler, hadith_api_key="secret")
        hadith = await client.get_random_hadith()

        assert hadith.number == "42"
        assert hadith.book_slug == "sahih-bukhari"

    @pytest.mark.asyncio
    async def test_hadith_empty_result(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"status": 200, "hadiths": {"data": []}}),
            hadith_api_key="secret",
        )

        with pytest.raises(ContentError):
            await client.get_random_hadith()
