"""Tests for headline, keyword, prompt and wallpaper agents."""

from __future__ import annotations

import random
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, call, patch

import httpx
import pytest

from newswall.agents import wallpaper
from newswall.agents.headlines import fetch_headlines
from newswall.agents.keywords import extract_keywords
from newswall.agents.prompting import build_prompt, prompt_context, time_of_day_descriptor
from newswall.core.config import ImageConfig
from newswall.core.exceptions import WallpaperError
from newswall.core.paths import to_file_uri


def _rss(*titles: str) -> str:
    items = "".join(f"<item><title>{t}</title></item>" for t in titles)
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>t</title>{items}</channel></rss>'


ATOM = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"><title>a</title>
<entry><title>Rocket launch delayed by weather</title></entry>
</feed>"""


class TestHeadlines:
    @pytest.mark.asyncio
    async def test_merges_feeds_in_order_and_dedupes(self, mock_client):
        feeds = {
            "one.example": _rss("Storm hits coast", "  Markets rally  "),
            "two.example": _rss("Markets rally", "Festival opens"),
            "three.example": ATOM,
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=feeds[request.url.host])

        async with mock_client(handler) as http:
            headlines = await fetch_headlines(
                ["https://one.example/rss", "https://two.example/rss", "https://three.example/atom"],
                client=http,
            )

        assert headlines == [
            "Storm hits coast",
            "Markets rally",
            "Festival opens",
            "Rocket launch delayed by weather",
        ]

    @pytest.mark.asyncio
    async def test_failing_feed_is_skipped(self, mock_client):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "down.example":
                raise httpx.ConnectError("refused", request=request)
            if request.url.host == "gone.example":
                return httpx.Response(404)
            return httpx.Response(200, text=_rss("Only survivor"))

        async with mock_client(handler) as http:
            headlines = await fetch_headlines(
                ["https://down.example/", "https://gone.example/", "https://ok.example/"], client=http
            )

        assert headlines == ["Only survivor"]

    @pytest.mark.asyncio
    async def test_limit(self, mock_client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=_rss(*(f"Headline number {i}" for i in range(30))))

        async with mock_client(handler) as http:
            headlines = await fetch_headlines(["https://a.example/"], client=http, limit=10)

        assert len(headlines) == 10
        assert headlines[0] == "Headline number 0"

    @pytest.mark.asyncio
    async def test_garbage_feed_yields_nothing(self, mock_client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"\x00\x01 not a feed")

        async with mock_client(handler) as http:
            assert await fetch_headlines(["https://a.example/"], client=http) == []


class TestKeywords:
    def test_ranked_by_frequency_with_first_seen_ties(self):
        headlines = [
            "Storm batters coastal harbors",
            "Harbor workers brace for storm",
            "Coastal election results",
        ]
        assert extract_keywords(headlines, max_keywords=3) == ["storm", "coastal", "harbor"]

    def test_stopwords_and_short_words_dropped(self):
        keywords = extract_keywords(["The cat and the dog would have been there"], min_length=3)
        assert keywords == ["cat", "dog"]

    def test_depluralizes_long_words_only(self):
        keywords = extract_keywords(["Rockets rockets rocket gas bus"], min_length=3)
        assert keywords[0] == "rocket"
        assert "gas" in keywords
        assert "bus" in keywords

    def test_punctuation_is_split(self):
        assert extract_keywords(["AI-driven: markets, markets!"]) == ["market", "ai-driven"]

    def test_max_keywords(self):
        headlines = [" ".join(f"word{chr(97 + i)}" for i in range(20))]
        assert len(extract_keywords(headlines, max_keywords=10)) == 10

    def test_empty(self):
        assert extract_keywords([]) == []
        assert extract_keywords(["a an the of"]) == []


class TestPrompting:
    @pytest.mark.parametrize(
        "hour,expected",
        [
            (0, "pre-dawn night"),
            (5, "pre-dawn night"),
            (6, "morning golden light"),
            (11, "midday bright daylight"),
            (14, "afternoon warm light"),
            (18, "sunset dusk glow"),
            (21, "night cool tones"),
            (23, "night cool tones"),
        ],
    )
    def test_time_of_day(self, hour, expected):
        assert time_of_day_descriptor(datetime(2026, 1, 1, hour, 30)) == expected

    def test_build_prompt_full(self):
        cfg = ImageConfig(style="cinematic", vibe="hopeful", negative="text, watermark", artist_hints=["in the style of Turner"])
        prompt = build_prompt(["storm", "harbor"], cfg, date=datetime(2026, 1, 1, 19), rng=random.Random(0))

        assert prompt == (
            "A visually striking wallpaper evoking: storm, harbor. "
            "Atmosphere/time: sunset dusk glow. "
            "Style: cinematic. Vibe: hopeful. in the style of Turner. "
            "Avoid: text, watermark."
        )

    def test_build_prompt_minimal(self):
        prompt = build_prompt(["storm"], ImageConfig(), date=datetime(2026, 1, 1, 12))
        assert prompt == "A visually striking wallpaper evoking: storm. Atmosphere/time: midday bright daylight."
        assert "Avoid" not in prompt

    def test_prompt_context(self):
        cfg = ImageConfig(style="s", vibe="v", negative="n", style_pool=["a", "b"])
        ctx = prompt_context(["k"], ["h1", "h2"], cfg, date=datetime(2026, 1, 1, 3))

        assert ctx.time_of_day == "pre-dawn night"
        assert ctx.headlines == ["h1", "h2"]
        assert ctx.style_pool == ["a", "b"]


def _proc(returncode: int = 0, stderr: bytes = b"") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(b"", stderr))
    return proc


class TestWallpaper:
    @pytest.mark.asyncio
    async def test_gnome_sets_light_dark_and_options(self, tmp_path):
        image = tmp_path / "background.png"
        image.write_bytes(b"x")
        uri = to_file_uri(image)

        with patch.object(wallpaper, "gsettings_set", new=AsyncMock()) as gs:
            await wallpaper.set_wallpaper(image, "GNOME")

        schema = "org.gnome.desktop.background"
        assert gs.await_args_list == [
            call(schema, "picture-uri", uri),
            call(schema, "picture-uri-dark", uri),
            call(schema, "picture-options", "zoom"),
        ]

    @pytest.mark.asyncio
    async def test_other_env_is_cinnamon(self, tmp_path):
        image = tmp_path / "background.jpg"
        image.write_bytes(b"x")

        with patch.object(wallpaper, "gsettings_set", new=AsyncMock()) as gs:
            await wallpaper.set_wallpaper(image, "xfce")

        schema = "org.cinnamon.desktop.background"
        assert [c.args[:2] for c in gs.await_args_list] == [
            (schema, "picture-uri"),
            (schema, "picture-options"),
        ]

    @pytest.mark.asyncio
    async def test_optional_key_failure_is_tolerated(self, tmp_path):
        image = tmp_path / "background.png"
        image.write_bytes(b"x")

        async def fake(schema, key, value):
            if key != "picture-uri":
                raise WallpaperError("no such key")

        with patch.object(wallpaper, "gsettings_set", side_effect=fake):
            await wallpaper.set_wallpaper(image, "gnome")

    @pytest.mark.asyncio
    async def test_required_key_failure_raises(self, tmp_path):
        with patch.object(wallpaper, "gsettings_set", new=AsyncMock(side_effect=WallpaperError("denied"))):
            with pytest.raises(WallpaperError):
                await wallpaper.set_wallpaper(tmp_path / "x.png", "cinnamon")

    @pytest.mark.asyncio
    async def test_gsettings_invocation(self):
        proc = _proc()
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=proc)) as exec_:
            await wallpaper.gsettings_set("org.gnome.desktop.background", "picture-options", "zoom")

        assert exec_.await_args.args == (
            "gsettings",
            "set",
            "org.gnome.desktop.background",
            "picture-options",
            "zoom",
        )

    @pytest.mark.asyncio
    async def test_gsettings_nonzero_exit(self):
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=_proc(1, b"No such schema"))):
            with pytest.raises(WallpaperError, match="No such schema"):
                await wallpaper.gsettings_set("bad.schema", "picture-uri", "file:///x")

    @pytest.mark.asyncio
    async def test_gsettings_missing_binary(self):
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(side_effect=FileNotFoundError("gsettings"))):
            with pytest.raises(WallpaperError, match="not found"):
                await wallpaper.gsettings_set("s", "k", "v")
