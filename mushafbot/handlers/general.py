"""General commands: help, menu, info, time, ping, echo."""

import time
from datetime import datetime

import psutil

from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.auto_reply.context import CommandContext
from mushafbot.utils.helpers import format_bytes, format_uptime


CATEGORY_NAMES = {
    "general": "عام",
    "fun": "ترفيه",
    "media": "وسائط",
    "owner": "المالك",
    "quran": "القرآن الكريم",
}

LINE = "┄" * 22


def build_menu(bot_name: str, prefix: str) -> str:
    """Render the main Quran menu."""
    return f"""
🌙 *{bot_name}*
{LINE}
📖 *أوامر القرآن الكريم*
{LINE}

🔹 {prefix}فهرس
     ↳ عرض قائمة أرقام جميع السور

🔹 {prefix}سورة + رقم
     ↳ إرسال سورة كاملة نصاً
     ↳ مثال : {prefix}سورة 18

🔹 {prefix}تلاوة + رقم
     ↳ إرسال سورة بالصوت
     ↳ مثال : {prefix}تلاوة 36

🔹 {prefix}صفحة + رقم
     ↳ إرسال صفحة من المصحف (1 - 604)
     ↳ مثال : {prefix}صفحة 1

🔹 {prefix}آية
     ↳ آيـة عشوائية من القرآن الكريم

🔹 {prefix}حديث
     ↳ حديث عشوائي من السنة النبوية

🔹 {prefix}سؤال
     ↳ سؤال إسلامي عشوائي مع خيارات
     ↳ أجب بـ 1 أو 2 أو 3

{LINE}
✨ *مميزات البوت*
{LINE}

🤲 دعاء تلقائي عند كل بضعة رسائل
📖 آيات قرآنية من المصحف
🎙️ تلاوة سور القرآن بأصوات عالية الجودة
🖼️ صفحات المصحف بجودة عالية

{LINE}
⚠️ يجب كتابة *{prefix}* قبل كل أمر
""".strip()


async def handle_help(ctx: CommandContext) -> None:
    """Show the menu, or details for one command."""
    prefix = ctx.config.primary_prefix

    if ctx.args:
        name = ctx.args[0].lower()
        cmd = ctx.services.registry.resolve(name)
        if cmd is None:
            await ctx.reply(f'❌ الأمر "{name}" غير موجود.')
            return

        lines = [
            f"📖 *الأمر: {prefix}{cmd.name}*",
            "",
            f"📝 الوصف: {cmd.description_ar}",
            f"💡 الاستخدام: {cmd.usage or prefix + cmd.name}",
            f"📁 التصنيف: {CATEGORY_NAMES.get(cmd.category, cmd.category)}",
            f"🔤 أسماء بديلة: {'، '.join(cmd.aliases) if cmd.aliases else 'لا يوجد'}",
        ]
        if cmd.owner_only:
            lines.append("🔒 للمالك فقط: نعم")
        if cmd.cooldown > 0:
            lines.append(f"⏱️ فترة الانتظار: {cmd.cooldown} ثانية")
        await ctx.reply("\n".join(lines))
        return

    await ctx.reply(build_menu(ctx.config.bot.name, prefix))


async def handle_menu(ctx: CommandContext) -> None:
    await handle_help(ctx)


async def handle_info(ctx: CommandContext) -> None:
    """Show bot name, uptime, command count and memory use."""
    memory = psutil.Process().memory_info().rss
    text = "\n".join([
        "🤖 *معلومات البوت*",
        "",
        f"📛 الاسم: {ctx.config.bot.name}",
        "📦 المكتبة: mushafbot",
        f"⏰ مدة التشغيل: {format_uptime(ctx.services.uptime_seconds)}",
        f"📊 الأوامر: {len(ctx.services.registry)}",
        f"💾 الذاكرة: {format_bytes(memory)}",
    ])
    await ctx.reply(text)


async def handle_time(ctx: CommandContext) -> None:
    now = datetime.now()
    await ctx.reply(f"🕐 الوقت الحالي: {now.strftime('%Y-%m-%d %H:%M:%S')}")


async def handle_ping(ctx: CommandContext) -> None:
    """Report round-trip time of one send."""
    start = time.perf_counter()
    await ctx.reply("🏓 جاري الفحص...")
    latency_ms = int((time.perf_counter() - start) * 1000)
    await ctx.reply(f"🏓 تم الاتصال!\n⏱️ زمن الاستجابة: {latency_ms}ms")


async def handle_echo(ctx: CommandContext) -> None:
    text = " ".join(ctx.args)
    if text:
        await ctx.reply(f"📢 {text}")
    else:
        await ctx.reply("❌ الرجاء إدخال نص!")


def register(registry: CommandRegistry) -> None:
    """Register general commands."""
    registry.register(
        "ping", handle_ping,
        aliases=["بنق", "اتصال"],
        description="Check if bot is alive",
        description_ar="التحقق من اتصال البوت",
    )
    registry.register(
        "help", handle_help,
        aliases=["مساعدة", "اوامر", "أوامر", "قران", "بوت", "أ", "ا", "م"],
        description="Show available commands",
        description_ar="عرض الأوامر المتاحة",
        usage="/help [command] | /مساعدة [أمر]",
    )
    registry.register(
        "info", handle_info,
        aliases=["معلومات", "عن", "حول"],
        description="Show bot information",
        description_ar="عرض معلومات البوت",
    )
    registry.register(
        "time", handle_time,
        aliases=["وقت", "الوقت", "ساعة"],
        description="Show current time",
        description_ar="عرض الوقت الحالي",
    )
    registry.register(
        "echo", handle_echo,
        aliases=["صدى", "ردد", "قل"],
        description="Echo back the provided text",
        description_ar="إعادة النص المرسل",
        usage="/echo <text> | /صدى <نص>",
        category="fun",
    )
    registry.register(
        "menu", handle_menu,
        aliases=["قائمة", "القائمة"],
        description="Show command menu",
        description_ar="عرض قائمة الأوامر",
    )
