"""
Tests for the built-in command handlers.

Handlers run against a mocked channel and content client.
"""

from unittest.mock import AsyncMock

import pytest

from mushafbot.auto_reply.classifier import MessageClassifier
from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.auto_reply.context import CommandContext
from mushafbot.content.quran import ContentError, Hadith, Surah, Verse
from mushafbot.handlers import general, media, owner, quran, register_default_commands

from tests.conftest import GROUP_JID, OWNER_JID, USER_JID, make_event


def make_ctx(services, text: str, **event_kwargs) -> CommandContext:
    """Classify and parse text into a command context."""
    classifier = MessageClassifier(services.config.bot.prefix)
    message = classifier.inspect(make_event(text, **event_kwargs))
    command = classifier.parse(message)
    return CommandContext(
        message=message,
        command=services.registry.resolve(command.name),
        args=command.arguments,
        services=services,
    )


def sent(channel) -> list:
    return [call.args[0] for call in channel.send.await_args_list]


@pytest.fixture
def services(services):
    register_default_commands(services.registry)
    return services


class TestGeneralHandlers:
    """Tests for help, echo and friends."""

    @pytest.mark.asyncio
    async def test_help_menu(self, services, channel):
        await general.handle_help(make_ctx(services, "/help"))

        text = sent(channel)[0].text
        assert services.config.bot.name in text
        assert "/سورة" in text

    @pytest.mark.asyncio
    async def test_help_for_command(self, services, channel):
        await general.handle_help(make_ctx(services, "/help سورة"))

        text = sent(channel)[0].text
        assert "surah" in text
        assert "سوره" in text

    @pytest.mark.asyncio
    async def test_help_for_unknown_command(self, services, channel):
        await general.handle_help(make_ctx(services, "/help nothing"))

        assert "nothing" in sent(channel)[0].text

    @pytest.mark.asyncio
    async def test_echo(self, services, channel):
        await general.handle_echo(make_ctx(services, "/echo hi there"))

        assert sent(channel)[0].text == "📢 hi there"

    @pytest.mark.asyncio
    async def test_echo_without_text(self, services, channel):
        await general.handle_echo(make_ctx(services, "/echo"))

        assert sent(channel)[0].text.startswith("❌")

    @pytest.mark.asyncio
    async def test_info(self, services, channel):
        await general.handle_info(make_ctx(services, "/info"))

        text = sent(channel)[0].text
        assert f"الأوامر: {len(services.registry)}" in text

    @pytest.mark.asyncio
    async def test_ping_replies_twice(self, services, channel):
        await general.handle_ping(make_ctx(services, "/ping"))

        assert len(sent(channel)) == 2
        assert "ms" in sent(channel)[1].text


class TestQuranHandlers:
    """Tests for Quran commands."""

    @pytest.mark.asyncio
    async def test_index_lists_every_surah(self, services, channel):
        await quran.handle_index(make_ctx(services, "/فهرس"))

        text = sent(channel)[0].text
        assert "1 - الفاتحة" in text
        assert "114 - الناس" in text

    @pytest.mark.asyncio
    async def test_surah_without_number(self, services, channel):
        await quran.handle_surah(make_ctx(services, "/سورة"))

        assert "أمر خاطيء" in sent(channel)[0].text
        services.quran.get_surah.assert_not_called()

    @pytest.mark.asyncio
    async def test_surah_invalid_number(self, services, channel):
        await quran.handle_surah(make_ctx(services, "/سورة 115"))

        assert "بين 1 و 114" in sent(channel)[0].text

    @pytest.mark.asyncio
    async def test_surah_text(self, services, channel):
        event_text = "/سورة 112"
        services.quran.get_surah = AsyncMock(return_value=Surah(
            number=112, name="الإخلاص", verse_count=2, revelation="makkah",
            verses=[(1, "قل هو الله أحد"), (2, "الله الصمد")],
        ))

        ctx = make_ctx(services, event_text)
        await quran.handle_surah(ctx)

        loading, body = sent(channel)
        assert loading.quoted is ctx.event
        assert "الإخلاص" in body.text
        assert "مـكـيـة" in body.text
        assert "(2) الله الصمد" in body.text
        assert body.text.endswith(quran.DUAA_FOOTER)

    @pytest.mark.asyncio
    async def test_surah_fetch_failure(self, services, channel):
        services.quran.get_surah = AsyncMock(side_effect=ContentError("down"))

        await quran.handle_surah(make_ctx(services, "/سورة 1"))

        assert sent(channel)[-1].text == quran.SURAH_FAILED_TEXT

    @pytest.mark.asyncio
    async def test_recitation_sends_info_audio_and_footer(self, services, channel):
        services.quran.get_surah = AsyncMock(return_value=Surah(
            number=36, name="يس", verse_count=83, revelation="makkah", verses=[(1, "يس")],
        ))
        services.quran.get_recitation = AsyncMock(return_value=b"ID3")

        await quran.handle_recitation(make_ctx(services, "/تلاوة 36"))

        info, audio, footer = sent(channel)
        assert "83 آية" in info.text
        assert audio.kind == "audio"
        assert audio.audio == b"ID3"
        assert footer.text == f"> {quran.DUAA_FOOTER}"

    @pytest.mark.asyncio
    async def test_page_image(self, services, channel):
        services.quran.get_page_image = AsyncMock(return_value=b"\xff\xd8jpeg")

        await quran.handle_page(make_ctx(services, "/صفحة 604"))

        message = sent(channel)[0]
        assert message.kind == "image"
        assert "604" in message.caption
        services.quran.get_page_image.assert_awaited_once_with(604)

    @pytest.mark.asyncio
    async def test_page_out_of_range(self, services, channel):
        services.quran.get_page_image = AsyncMock()

        await quran.handle_page(make_ctx(services, "/صفحة 605"))

        services.quran.get_page_image.assert_not_awaited()
        assert "604" in sent(channel)[0].text

    @pytest.mark.asyncio
    async def test_verse(self, services, channel):
        services.quran.get_random_verse = AsyncMock(
            return_value=Verse(text="آية", surah_name="سُورَةُ الفَاتِحَةِ", number_in_surah=3)
        )

        await quran.handle_verse(make_ctx(services, "/آية"))

        assert sent(channel)[0].text == "*آية*\n\n*-سُورَةُ الفَاتِحَةِ 3*"

    @pytest.mark.asyncio
    async def test_hadith_source_label(self, services, channel):
        services.quran.get_random_hadith = AsyncMock(
            return_value=Hadith(number="7", text="حديث", book_slug="sahih-bukhari")
        )

        await quran.handle_hadith(make_ctx(services, "/حديث"))

        assert "صحيح البخاري" in sent(channel)[0].text

    @pytest.mark.asyncio
    async def test_hadith_failure(self, services, channel):
        services.quran.get_random_hadith = AsyncMock(side_effect=ContentError("no key"))

        await quran.handle_hadith(make_ctx(services, "/حديث"))

        assert "الحديث" in sent(channel)[0].text

    @pytest.mark.asyncio
    async def test_quiz_starts_session(self, services, channel):
        await quran.handle_quiz(make_ctx(services, "/سؤال", chat_id=GROUP_JID, participant=USER_JID))

        assert services.quiz.store.has(GROUP_JID)
        assert "سؤال إسلامي" in sent(channel)[0].text
        services.quiz.cancel_all()


class TestMediaHandlers:
    """Tests for the sticker command."""

    @pytest.mark.asyncio
    async def test_sticker_requires_media(self, services, channel):
        await media.handle_sticker(make_ctx(services, "/sticker"))

        channel.download_media.assert_not_awaited()
        assert sent(channel)[0].text.startswith("❌")

    @pytest.mark.asyncio
    async def test_sticker_from_image(self, services, channel):
        await media.handle_sticker(make_ctx(services, "/ملصق", has_image=True))

        sticker = sent(channel)[-1]
        assert sticker.kind == "sticker"
        assert sticker.sticker == b"media-bytes"
        assert sticker.sticker_pack == services.config.sticker.pack_name

    @pytest.mark.asyncio
    async def test_sticker_download_failure(self, services, channel):
        channel.download_media.side_effect = TimeoutError()

        await media.handle_sticker(make_ctx(services, "/ملصق", quoted_has_video=True))

        assert "فشل" in sent(channel)[-1].text


class TestOwnerHandlers:
    """Tests for broadcast and chatstats."""

    @pytest.mark.asyncio
    async def test_broadcast_skips_origin_chat(self, services, channel):
        services.config.content.broadcast_delay_seconds = 0
        for chat in (OWNER_JID, GROUP_JID, USER_JID):
            services.tracked_chats.add(chat)

        await owner.handle_broadcast(make_ctx(services, "/broadcast salam", chat_id=OWNER_JID))

        targets = [m.chat_id for m in sent(channel) if m.text == "📢 *رسالة إذاعية*\n\nsalam"]
        assert sorted(targets) == sorted([GROUP_JID, USER_JID])
        assert "نجاح: 2" in sent(channel)[-1].text

    @pytest.mark.asyncio
    async def test_broadcast_counts_failures(self, services, channel):
        services.config.content.broadcast_delay_seconds = 0
        services.tracked_chats.add(GROUP_JID)

        async def flaky_send(message):
            if message.chat_id == GROUP_JID:
                raise RuntimeError("blocked")

        channel.send.side_effect = flaky_send

        await owner.handle_broadcast(make_ctx(services, "/broadcast salam", chat_id=OWNER_JID))

        assert "فشل: 1" in sent(channel)[-1].text

    @pytest.mark.asyncio
    async def test_broadcast_without_chats(self, services, channel):
        await owner.handle_broadcast(make_ctx(services, "/broadcast salam", chat_id=OWNER_JID))

        assert "لا توجد محادثات" in sent(channel)[0].text

    @pytest.mark.asyncio
    async def test_chatstats(self, services, channel):
        services.tracked_chats.add(GROUP_JID)
        services.tracked_chats.add(USER_JID)

        await owner.handle_chatstats(make_ctx(services, "/chatstats", chat_id=OWNER_JID))

        text = sent(channel)[0].text
        assert "الإجمالي: 2" in text
        assert "المجموعات: 1" in text


class TestRegistration:
    """Tests for register_default_commands."""

    def test_index_takes_shared_alias(self):
        registry = register_default_commands(CommandRegistry())

        assert registry.resolve("قائمة").name == "فهرس"
        assert registry.resolve("القائمة").name == "menu"

    def test_every_alias_is_a_single_token(self):
        registry = register_default_commands(CommandRegistry())

        for command in registry.list_unique():
            for token in (command.name, *command.aliases):
                assert token.split() == [token]
