"""Media commands: sticker."""

from loguru import logger

from mushafbot.auto_reply.commands import CommandRegistry
from mushafbot.auto_reply.context import CommandContext
from mushafbot.bus.events import OutboundMessage


async def handle_sticker(ctx: CommandContext) -> None:
    """
    Turn an image or video into a sticker.

    The media may be attached to the command itself or to the message it
    replies to. Conversion to the sticker format happens on the bridge.
    """
    if not ctx.event.has_media:
        await ctx.reply("❌ الرجاء إرسال صورة/فيديو مع الأمر أو الرد على صورة/فيديو!")
        return

    await ctx.reply("🔄 جاري إنشاء الملصق...")

    try:
        media = await ctx.services.channel.download_media(ctx.event)
        await ctx.send(OutboundMessage(
            chat_id=ctx.chat_id,
            sticker=media,
            sticker_pack=ctx.config.sticker.pack_name,
            sticker_author=ctx.config.sticker.author,
        ))
        logger.success(f"Sticker created for {ctx.chat_id}")
    except Exception as e:
        logger.error(f"Sticker creation failed: {e}")
        await ctx.reply("❌ فشل في إنشاء الملصق. حاول مرة أخرى.")


def register(registry: CommandRegistry) -> None:
    """Register media commands."""
    registry.register(
        "sticker", handle_sticker,
        aliases=["ملصق", "ستيكر", "s"],
        description="Convert image to sticker",
        description_ar="تحويل صورة إلى ملصق",
        usage="/sticker | /ملصق (رد على صورة أو أرسل مع صورة)",
        category="media",
    )
