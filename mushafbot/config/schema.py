"""Configuration schema using Pydantic."""

from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class BotIdentityConfig(BaseModel):
    """Bot identity and command prefixes."""
    name: str = "مُــــصْــــحَــــفْ Ai 1.0.0 🌼🤍"
    prefix: list[str] = Field(default_factory=lambda: ["/"])  # Checked in order, first match wins
    owner: str = ""  # Owner phone number (digits only)
    owner_lid: str = ""  # Owner WhatsApp linked-device ID


class MessagesConfig(BaseModel):
    """User-facing notices."""
    owner_only: str = "🔒 هذا الأمر مخصص لمالك البوت فقط."
    group_only: str = "👥 هذا الأمر يعمل في المجموعات فقط."
    private_only: str = "🔐 هذا الأمر يعمل في المحادثات الخاصة فقط."
    command_failed: str = "❌ حدث خطأ أثناء تنفيذ الأمر."


class FeaturesConfig(BaseModel):
    """Feature toggles."""
    auto_read: bool = True  # Mark inbound messages as read
    auto_typing: bool = True  # Show typing indicator while a command runs
    log_messages: bool = True  # Log inbound messages
    respond_to_groups: bool = True
    respond_to_private: bool = True


class AutoDuaaConfig(BaseModel):
    """Ambient supplication replies to Arabic text."""
    enabled: bool = True
    probability: int = Field(default=7, ge=1)  # 1-in-N chance


class AntiSpamConfig(BaseModel):
    """Per-sender command rate limiting."""
    enabled: bool = True
    max_messages: int = 10  # Max commands per interval
    interval_seconds: float = 60.0
    block_duration_seconds: float = 300.0


class StickerConfig(BaseModel):
    """Sticker pack metadata."""
    pack_name: str = "مـصـحـف"
    author: str = "TRAMAZOOL 💊"


class QuizConfig(BaseModel):
    """Quiz settings."""
    timeout_seconds: float = 30.0
    questions_path: str = ""  # Empty = bundled question file

    @property
    def questions_file(self) -> Path | None:
        """Expanded question file path, or None for the bundled file."""
        return Path(self.questions_path).expanduser() if self.questions_path else None


class BridgeConfig(BaseModel):
    """WhatsApp bridge connection."""
    url: str = "ws://localhost:3001"
    token: str = ""  # Sent as a bearer token when set
    heartbeat_seconds: float = 30.0
    reconnect_delay_seconds: float = 1.0
    max_reconnect_delay_seconds: float = 60.0
    media_timeout_seconds: float = 60.0


class ContentConfig(BaseModel):
    """External content providers."""
    http_timeout_seconds: float = 30.0
    hadith_api_key: str = ""  # hadithapi.com key
    broadcast_delay_seconds: float = 0.5  # Pause between broadcast sends


class Config(BaseSettings):
    """Root configuration for mushafbot."""
    bot: BotIdentityConfig = Field(default_factory=BotIdentityConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    auto_duaa: AutoDuaaConfig = Field(default_factory=AutoDuaaConfig)
    anti_spam: AntiSpamConfig = Field(default_factory=AntiSpamConfig)
    sticker: StickerConfig = Field(default_factory=StickerConfig)
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    data_dir: str = "~/.mushafbot/data"

    @property
    def data_path(self) -> Path:
        """Get expanded data directory path."""
        return Path(self.data_dir).expanduser()

    @property
    def primary_prefix(self) -> str:
        """Prefix shown in menus and usage hints."""
        return self.bot.prefix[0] if self.bot.prefix else ""

    class Config:
        env_prefix = "MUSHAFBOT_"
        env_nested_delimiter = "__"
