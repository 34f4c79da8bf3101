"""
Quran and hadith content providers.

Thin async wrappers over public HTTP APIs:
- quran-api.santrikoding.com: full surah text
- cdn.islamic.network: surah recitation audio
- quran.ksu.edu.sa: mushaf page images
- api.alquran.cloud: single verses
- hadithapi.com: hadith
"""

import asyncio
import io
import random
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger
from PIL import Image


SURAH_COUNT = 114
PAGE_COUNT = 604
VERSE_COUNT = 6236
HADITH_RANGE = 7000

SURAH_URL = "https://quran-api.santrikoding.com/api/surah/{number}"
RECITATION_URL = "https://cdn.islamic.network/quran/audio-surah/128/ar.alafasy/{number}.mp3"
PAGE_URL = "https://quran.ksu.edu.sa/png_big/{number}.png"
VERSE_URL = "http://api.alquran.cloud/v1/ayah/{number}/ar.asad"
HADITH_URL = "https://hadithapi.com/public/api/hadiths"

SURAH_NAMES = (
    "الفاتحة", "البقرة", "آل عمران", "النساء", "المائدة", "الأنعام",
    "الأعراف", "الأنفال", "التوبة", "يونس", "هود", "يوسف",
    "الرعد", "إبراهيم", "الحجر", "النحل", "الإسراء", "الكهف",
    "مريم", "طه", "الأنبياء", "الحج", "المؤمنون", "النور",
    "الفرقان", "الشعراء", "النمل", "القصص", "العنكبوت", "الروم",
    "لقمان", "السجدة", "الأحزاب", "سبأ", "فاطر", "يس",
    "الصافات", "ص", "الزمر", "غافر", "فصلت", "الشورى",
    "الزخرف", "الدخان", "الجاثية", "الأحقاف", "محمد", "الفتح",
    "الحجرات", "ق", "الذاريات", "الطور", "النجم", "القمر",
    "الرحمن", "الواقعة", "الحديد", "المجادلة", "الحشر", "الممتحنة",
    "الصف", "الجمعة", "المنافقون", "التغابن", "الطلاق", "التحريم",
    "الملك", "القلم", "الحاقة", "المعارج", "نوح", "الجن",
    "المزمل", "المدثر", "القيامة", "الإنسان", "المرسلات", "النبأ",
    "النازعات", "عبس", "التكوير", "الانفطار", "المطففين", "الانشقاق",
    "البروج", "الطارق", "الأعلى", "الغاشية", "الفجر", "البلد",
    "الشمس", "الليل", "الضحى", "الشرح", "التين", "العلق",
    "القدر", "البينة", "الزلزلة", "العاديات", "القارعة", "التكاثر",
    "العصر", "الهمزة", "الفيل", "قريش", "الماعون", "الكوثر",
    "الكافرون", "النصر", "المسد", "الإخلاص", "الفلق", "الناس",
)


class ContentError(Exception):
    """A content provider failed or returned an unusable payload."""


@dataclass
class Surah:
    """A surah with its verses."""
    number: int
    name: str
    verse_count: int
    revelation: str  # "makkah" or "madinah"
    verses: list[tuple[int, str]]

    @property
    def is_madani(self) -> bool:
        return self.revelation == "madinah"


@dataclass
class Verse:
    """A single verse."""
    text: str
    surah_name: str
    number_in_surah: int


@dataclass
class Hadith:
    """A single hadith."""
    number: str
    text: str
    book_slug: str


def _parse_bounded_int(value: str, upper: int) -> int | None:
    value = value.strip()
    if not value.isdigit():
        return None
    number = int(value)
    return number if 1 <= number <= upper else None


def parse_surah_number(value: str) -> int | None:
    """Parse a surah number (1-114), or None if invalid."""
    return _parse_bounded_int(value, SURAH_COUNT)


def parse_page_number(value: str) -> int | None:
    """Parse a mushaf page number (1-604), or None if invalid."""
    return _parse_bounded_int(value, PAGE_COUNT)


def flatten_to_jpeg(png: bytes, quality: int = 90) -> bytes:
    """Composite a transparent PNG onto white and encode it as JPEG."""
    with Image.open(io.BytesIO(png)) as source:
        rgba = source.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))

    output = io.BytesIO()
    background.save(output, format="JPEG", quality=quality)
    return output.getvalue()


class QuranClient:
    """
    Fetches Quran text, audio, page images and hadith.

    All failures surface as ContentError.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        hadith_api_key: str = "",
        client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
    ):
        self.hadith_api_key = hadith_api_key
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._rng = rng or random.Random()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            raise ContentError(f"Request to {url} failed: {e}") from e

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._get(url, params)
        try:
            data = response.json()
        except ValueError as e:
            raise ContentError(f"Invalid JSON from {url}") from e
        if not isinstance(data, dict):
            raise ContentError(f"Unexpected payload from {url}")
        return data

    async def get_surah(self, number: int) -> Surah:
        """Fetch a full surah."""
        data = await self._get_json(SURAH_URL.format(number=number))
        verses = data.get("ayat")
        if not verses:
            raise ContentError("Invalid API response")

        return Surah(
            number=number,
            name=data.get("nama", ""),
            verse_count=int(data.get("jumlah_ayat") or len(verses)),
            revelation=data.get("tempat_turun", ""),
            verses=[(int(v.get("nomor", i)), v.get("ar", "")) for i, v in enumerate(verses, start=1)],
        )

    async def get_recitation(self, number: int) -> bytes:
        """Fetch a surah recitation as MP3 bytes."""
        response = await self._get(RECITATION_URL.format(number=number))
        return response.content

    async def get_page_image(self, number: int) -> bytes:
        """Fetch a mushaf page as a JPEG on a white background."""
        response = await self._get(PAGE_URL.format(number=number))
        try:
            return await asyncio.to_thread(flatten_to_jpeg, response.content)
        except OSError as e:
            raise ContentError(f"Cannot decode page {number}: {e}") from e

    async def get_random_verse(self) -> Verse:
        """Fetch a random verse."""
        number = self._rng.randint(1, VERSE_COUNT)
        data = await self._get_json(VERSE_URL.format(number=number))
        if data.get("code") != 200 or not data.get("status"):
            raise ContentError("Invalid API response")

        verse = data.get("data") or {}
        return Verse(
            text=verse.get("text", ""),
            surah_name=(verse.get("surah") or {}).get("name", ""),
            number_in_surah=int(verse.get("numberInSurah") or 0),
        )

    async def get_random_hadith(self) -> Hadith:
        """Fetch a random hadith."""
        if not self.hadith_api_key:
            raise ContentError("Hadith API key is not configured")

        number = self._rng.randint(1, HADITH_RANGE)
        data = await self._get_json(
            HADITH_URL,
            params={"apiKey": self.hadith_api_key, "hadithNumber": number},
        )
        if data.get("status") != 200:
            raise ContentError("Invalid API response")

        items = ((data.get("hadiths") or {}).get("data")) or []
        if not items:
            raise ContentError(f"No hadith number {number}")

        item = items[0]
        logger.debug(f"Fetched hadith {item.get('hadithNumber')}")
        return Hadith(
            number=str(item.get("hadithNumber", number)),
            text=item.get("hadithArabic", ""),
            book_slug=item.get("bookSlug", ""),
        )
