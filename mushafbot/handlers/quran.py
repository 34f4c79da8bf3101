"""Quran commands: index, surah, recitation, page, verse, hadith, quiz."""

from loguru import logger

from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.auto_reply.context import CommandContext
from mushafbot.bus.events import OutboundMessage
from mushafbot.content.quran import (
    SURAH_NAMES,
    ContentError,
    parse_page_number,
    parse_surah_number,
)


DUAA_FOOTER = "تقبل الله منا و منكم ، لا تنسونا من صالح الدعاء 🤍"
INVALID_SURAH_TEXT = "❌ الرجاء إدخال رقم سورة صحيح بين 1 و 114.\n💡 مثال: {prefix}سورة 1"
SURAH_FAILED_TEXT = "❌ فشل في جلب سورة من القرآن الكريم. حاول مرة أخرى."


def build_surah_index(prefix: str) -> str:
    """Render all surah names, three per line."""
    cells = [f"{number} - {name}" for number, name in enumerate(SURAH_NAMES, start=1)]
    rows = ["\t".join(cells[i:i + 3]) for i in range(0, len(cells), 3)]
    return (
        f"🕌 فهرس سور القرآن الكريم 🕋\n💡استخدم الأمر : {prefix}سورة + رقم السورة\n\n"
        + "\n".join(rows)
    )


def _revelation_label(is_madani: bool) -> str:
    return "مـدنـيـة 🕌" if is_madani else "مـكـيـة 🕋"


async def _surah_number_or_reply(ctx: CommandContext, command_word: str) -> int | None:
    """Validate the first argument as a surah number, replying on failure."""
    prefix = ctx.config.primary_prefix
    if not ctx.args:
        await ctx.reply(
            f"أمر خاطيء ❌\n\nاستعمل الأمر : {prefix}{command_word} + رقم السورة"
            f"\n\nلعرض فهرس السور استخدم الأمر : {prefix}فهرس 📜"
        )
        return None

    number = parse_surah_number(ctx.args[0])
    if number is None:
        await ctx.reply(INVALID_SURAH_TEXT.format(prefix=prefix))
    return number


async def handle_index(ctx: CommandContext) -> None:
    await ctx.reply(build_surah_index(ctx.config.primary_prefix))


async def handle_surah(ctx: CommandContext) -> None:
    """Send the full text of one surah."""
    number = await _surah_number_or_reply(ctx, "سورة")
    if number is None:
        return

    await ctx.reply("🕌 جاري جلب سورة من القرآن الكريم...", quote=True)

    try:
        surah = await ctx.services.quran.get_surah(number)
    except ContentError as e:
        logger.error(f"Surah fetch failed: {e}")
        await ctx.reply(SURAH_FAILED_TEXT)
        return

    lines = [
        f"🕌 سـورة : {surah.name}",
        f"💡نـوعـهـا : {_revelation_label(surah.is_madani)}",
        f"📜عـدد آيـاتـهـا : {surah.verse_count}",
        "",
    ]
    lines.extend(f"({verse_number}) {text}" for verse_number, text in surah.verses)
    lines.extend(["", "", DUAA_FOOTER])
    await ctx.reply("\n".join(lines), quote=True)


async def handle_recitation(ctx: CommandContext) -> None:
    """
    Send a surah recitation.

    Three messages go out: a short info line, the MP3, then the closing
    supplication. WhatsApp cannot carry text and audio in one message.
    """
    number = await _surah_number_or_reply(ctx, "تلاوة")
    if number is None:
        return

    try:
        surah = await ctx.services.quran.get_surah(number)
        await ctx.reply(f"📖 ســورة {surah.name}\n🔸 {surah.verse_count} آية", quote=True)

        audio = await ctx.services.quran.get_recitation(number)
        await ctx.send(OutboundMessage(
            chat_id=ctx.chat_id,
            audio=audio,
            audio_mimetype="audio/mpeg",
            quoted=ctx.event,
        ))
    except ContentError as e:
        logger.error(f"Recitation fetch failed: {e}")
        await ctx.reply(SURAH_FAILED_TEXT)
        return

    await ctx.reply(f"> {DUAA_FOOTER}", quote=True)


async def handle_page(ctx: CommandContext) -> None:
    """Send one mushaf page as an image."""
    number = parse_page_number(" ".join(ctx.args))
    if number is None:
        prefix = ctx.config.primary_prefix
        await ctx.reply(f"❌ الرجاء إدخال رقم صفحة صحيح بين 1 و 604.\n💡 مثال: {prefix}صفحة 1")
        return

    try:
        image = await ctx.services.quran.get_page_image(number)
    except ContentError as e:
        logger.error(f"Failed to send quran page: {e}")
        await ctx.reply("❌ عذراً، حدث خطأ في جلب الصفحة. حاول مرة أخرى.")
        return

    await ctx.send(OutboundMessage(
        chat_id=ctx.chat_id,
        image=image,
        caption=f"📖رقـم الـصـفـحـة : {number}\n\n{DUAA_FOOTER}",
        quoted=ctx.event,
    ))


async def handle_verse(ctx: CommandContext) -> None:
    try:
        verse = await ctx.services.quran.get_random_verse()
    except ContentError as e:
        logger.error(f"Failed to fetch aya: {e}")
        await ctx.reply("❌ عذراً، حدث خطأ في جلب الآية. حاول مرة أخرى.")
        return

    await ctx.reply(f"*{verse.text}*\n\n*-{verse.surah_name} {verse.number_in_surah}*", quote=True)
    logger.success(f"Sent random aya to {ctx.chat_id}")


async def handle_hadith(ctx: CommandContext) -> None:
    try:
        hadith = await ctx.services.quran.get_random_hadith()
    except ContentError as e:
        logger.error(f"Failed to fetch hadith: {e}")
        await ctx.reply("❌ عذراً، حدث خطأ في جلب الحديث. حاول مرة أخرى.")
        return

    source = "صحيح البخاري" if hadith.book_slug == "sahih-bukhari" else "السنن"
    await ctx.reply(f"🔸 حديث رقم : {hadith.number}\n\n{hadith.text}\n\n📗 {source}", quote=True)
    logger.success(f"Sent random hadith to {ctx.chat_id}")


async def handle_quiz(ctx: CommandContext) -> None:
    # start() arms the session synchronously; only the send awaits.
    await ctx.reply(ctx.services.quiz.start(ctx.chat_id))


def register(registry: CommandRegistry) -> None:
    """Register Quran and quiz commands."""
    registry.register(
        "فهرس", handle_index,
        aliases=["قائمة", "لستة", "السور"],
        description="List all surahs",
        description_ar="ارسال قائمة السور",
        category="quran",
    )
    registry.register(
        "surah", handle_surah,
        aliases=["سورة", "سوره", "سور"],
        description="Show a full surah from the holy quran",
        description_ar="ارسال سورة كاملة من القرآن الكريم",
        usage="/سورة <رقم>",
        category="quran",
    )
    registry.register(
        "تلاوة", handle_recitation,
        aliases=["صوت", "تلاوه", "قراءة", "voice"],
        description="Send a surah recitation",
        description_ar="ارسال سورة كاملة بالصوت من القرآن الكريم",
        usage="/تلاوة <رقم>",
        category="quran",
    )
    registry.register(
        "صفحة", handle_page,
        aliases=["صفحه", "رقم", "ص"],
        description="Send a mushaf page",
        description_ar="ارسال صفحة من القرآن الكريم",
        usage="/صفحة <1-604>",
        category="quran",
    )
    registry.register(
        "آية", handle_verse,
        aliases=["اية", "aya", "آيه", "ايه"],
        description="Random verse from the holy quran",
        description_ar="ارسال آية عشوائية من القرآن الكريم",
        category="quran",
    )
    registry.register(
        "حديث", handle_hadith,
        aliases=["بخاري", "سنة", "hadith", "الحديث"],
        description="Random hadith from the sunnah",
        description_ar="حديث عشوائي من السنة النبوية",
        category="quran",
    )
    registry.register(
        "سؤال", handle_quiz,
        aliases=["أسئلة", "مسابقة", "quiz", "اختبار", "فوازير", "فزورة"],
        description="Random islamic quiz question",
        description_ar="سؤال إسلامي عشوائي مع خيارات",
        category="quran",
    )
