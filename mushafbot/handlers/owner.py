"""Owner commands: broadcast, chatstats."""

import asyncio

from loguru import logger

from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.auto_reply.context import CommandContext
from mushafbot.bus.events import OutboundMessage


async def handle_broadcast(ctx: CommandContext) -> None:
    """Send a message to every tracked chat except the sender's."""
    text = " ".join(ctx.args)
    if not text:
        await ctx.reply("❌ الرجاء إدخال رسالة للإذاعة!\n\n💡 مثال: /اذاعة مرحباً بالجميع!")
        return

    chats = [chat for chat in ctx.services.tracked_chats if chat != ctx.chat_id]
    if not chats:
        await ctx.reply(
            "❌ لا توجد محادثات محفوظة للإذاعة.\n\nيتم حفظ المحادثات تلقائياً عند استلام رسائل."
        )
        return

    await ctx.reply(f"📢 *جاري الإذاعة...*\n\n📝 الرسالة: {text}\n📊 عدد المحادثات: {len(chats)}")

    delay = ctx.config.content.broadcast_delay_seconds
    success, failed = 0, 0
    for chat_id in chats:
        try:
            await ctx.send(OutboundMessage.reply(chat_id, f"📢 *رسالة إذاعية*\n\n{text}"))
            success += 1
        except Exception as e:
            failed += 1
            logger.warning(f"Broadcast to {chat_id} failed: {e}")
        if delay > 0:
            await asyncio.sleep(delay)

    logger.info(f"Broadcast finished: {success} sent, {failed} failed")
    await ctx.reply("\n".join([
        "✅ *تم الانتهاء من الإذاعة!*",
        "",
        "📊 *الإحصائيات:*",
        f"├ ✅ نجاح: {success}",
        f"├ ❌ فشل: {failed}",
        f"└ 📋 الإجمالي: {len(chats)}",
        "",
        f"📝 الرسالة: {text}",
    ]))


async def handle_chatstats(ctx: CommandContext) -> None:
    """Show how many groups and direct chats are tracked."""
    stats = ctx.services.tracked_chats.stats()
    if stats["total"] == 0:
        await ctx.reply("📊 لا توجد محادثات محفوظة بعد.")
        return

    prefix = ctx.config.primary_prefix
    await ctx.reply("\n".join([
        "📊 *إحصائيات المحادثات*",
        "",
        f"├ 📋 الإجمالي: {stats['total']}",
        f"├ 👥 المجموعات: {stats['groups']}",
        f"└ 👤 المحادثات الخاصة: {stats['private']}",
        "",
        f"💡 استخدم {prefix}اذاعة <رسالة> للإرسال للجميع",
    ]))


def register(registry: CommandRegistry) -> None:
    """Register owner-only commands."""
    registry.register(
        "broadcast", handle_broadcast,
        aliases=["اذاعة", "إذاعة", "بث"],
        description="Broadcast message to all chats",
        description_ar="إرسال رسالة لجميع المحادثات",
        usage="/broadcast <message> | /اذاعة <رسالة>",
        category="owner",
        owner_only=True,
    )
    registry.register(
        "chatstats", handle_chatstats,
        aliases=["احصائيات", "إحصائيات", "stats"],
        description="Show tracked chats statistics",
        description_ar="عرض إحصائيات المحادثات المحفوظة",
        category="owner",
        owner_only=True,
    )
