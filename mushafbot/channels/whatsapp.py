"""
WhatsApp channel for mushafbot.

Talks to a WhatsApp Web bridge over a WebSocket. The bridge owns the
WhatsApp session (pairing, encryption, media transcoding) and exchanges
JSON frames with the bot:

- ``messages``: a batch of inbound messages (only ``notify`` upserts are handled)
- ``status``: connection state changes
- ``qr``: pairing code to scan
- ``media``: answer to a ``download`` request
"""

import asyncio
import base64
import json
import uuid
from typing import Any

import aiohttp
from loguru import logger

from mushafbot.bus.events import InboundEvent, OutboundMessage
from mushafbot.bus.queue import MessageBus
from mushafbot.channels.base import BaseChannel, BridgeError
from mushafbot.config.schema import BridgeConfig


class WhatsAppChannel(BaseChannel):
    """
    WhatsApp channel implementation using a WebSocket bridge.

    Configuration (via BridgeConfig):
    - url: Bridge WebSocket URL (e.g., ws://localhost:3001)
    - token: Optional bearer token
    - reconnect_delay_seconds / max_reconnect_delay_seconds: Backoff bounds
    """

    name = "whatsapp"

    def __init__(self, config: BridgeConfig, bus: MessageBus):
        super().__init__(bus)
        self.config = config
        self.url = config.url

        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._reader: asyncio.Task | None = None
        self._reconnect_attempts = 0

        # Download request id -> future resolved by a "media" frame
        self._pending_media: dict[str, asyncio.Future] = {}

    async def start(self) -> None:
        """
        Connect to the bridge and start the reader task.

        Raises:
            BridgeError: If the first connection attempt fails.
        """
        logger.info(f"Connecting to WhatsApp bridge at {self.url}")
        self._running = True
        await self._connect()
        self._reader = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the channel."""
        logger.info("Stopping WhatsApp channel")
        self._running = False

        if self._reader and not self._reader.done():
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
        self._reader = None

        await self._disconnect()
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def wait_closed(self) -> None:
        """Wait until the reader task finishes (logout or stop)."""
        if self._reader is not None:
            await self._reader

    async def _connect(self) -> None:
        """Open the WebSocket connection."""
        if self._session is None:
            headers = {}
            if self.config.token:
                headers["Authorization"] = f"Bearer {self.config.token}"
            self._session = aiohttp.ClientSession(headers=headers)

        try:
            self._ws = await self._session.ws_connect(
                self.url,
                heartbeat=self.config.heartbeat_seconds,
            )
        except (aiohttp.ClientError, OSError) as e:
            raise BridgeError(f"Cannot reach WhatsApp bridge at {self.url}: {e}") from e

        self._reconnect_attempts = 0
        logger.info("Connected to WhatsApp bridge")

    async def _disconnect(self) -> None:
        """Close the WebSocket and fail pending downloads."""
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None

        for future in self._pending_media.values():
            if not future.done():
                future.set_exception(BridgeError("Bridge connection closed"))
        self._pending_media.clear()

    async def _run(self) -> None:
        """Read frames until stopped, reconnecting with backoff."""
        while self._running:
            try:
                await self._read_loop()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"WhatsApp bridge error: {e}")

            await self._disconnect()
            if not self._running:
                break

            delay = min(
                self.config.reconnect_delay_seconds * (2 ** self._reconnect_attempts),
                self.config.max_reconnect_delay_seconds,
            )
            self._reconnect_attempts += 1
            logger.info(f"Reconnecting in {delay:.1f}s...")
            await asyncio.sleep(delay)

            try:
                await self._connect()
            except BridgeError as e:
                logger.warning(str(e))

    async def _read_loop(self) -> None:
        """Consume frames from the current connection."""
        if self._ws is None:
            return

        async for msg in self._ws:
            if msg.type == aiohttp.WSMsgType.TEXT:
                try:
                    data = json.loads(msg.data)
                except json.JSONDecodeError:
                    logger.warning("Ignoring malformed bridge frame")
                    continue
                await self._handle_frame(data)
            elif msg.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
                break

    async def _handle_frame(self, data: dict[str, Any]) -> None:
        """Handle a single bridge frame."""
        frame_type = data.get("type")

        if frame_type == "messages":
            if data.get("upsertType", "notify") != "notify":
                return
            batch = [
                InboundEvent.from_bridge(item)
                for item in data.get("messages", [])
                if item.get("message")
            ]
            await self._handle_batch(batch)

        elif frame_type == "status":
            status = data.get("status")
            if status == "open":
                logger.success("WhatsApp session connected")
            elif status == "close":
                if data.get("loggedOut"):
                    logger.warning("Logged out. Re-pair the bridge and restart.")
                    self._running = False
                else:
                    logger.error(f"WhatsApp session closed: {data.get('reason', 'unknown')}")

        elif frame_type == "qr":
            logger.info(f"Scan this pairing code with WhatsApp: {data.get('qr', '')}")

        elif frame_type == "media":
            future = self._pending_media.pop(data.get("requestId", ""), None)
            if future is None or future.done():
                return
            if data.get("error"):
                future.set_exception(BridgeError(f"Media download failed: {data['error']}"))
            else:
                future.set_result(base64.b64decode(data.get("data", "")))

        else:
            logger.debug(f"Unhandled bridge frame: {frame_type}")

    async def _send_frame(self, payload: dict[str, Any]) -> None:
        """Send a JSON frame to the bridge."""
        if self._ws is None or self._ws.closed:
            raise BridgeError("Not connected to WhatsApp bridge")
        await self._ws.send_json(payload)

    async def send(self, message: OutboundMessage) -> None:
        """Send a message via the bridge."""
        await self._send_frame(self._build_send_frame(message))

    @staticmethod
    def _build_send_frame(message: OutboundMessage) -> dict[str, Any]:
        """Encode an outbound message as a bridge frame."""
        kind = message.kind
        if kind == "image":
            content = {
                "image": base64.b64encode(message.image).decode("ascii"),
                "caption": message.caption,
            }
        elif kind == "audio":
            content = {
                "audio": base64.b64encode(message.audio).decode("ascii"),
                "mimetype": message.audio_mimetype,
                "ptt": False,
            }
        elif kind == "sticker":
            content = {
                "sticker": base64.b64encode(message.sticker).decode("ascii"),
                "pack": message.sticker_pack,
                "author": message.sticker_author,
            }
        else:
            content = {"text": message.text or ""}

        frame: dict[str, Any] = {"type": "send", "to": message.chat_id, "content": content}
        if message.quoted is not None:
            frame["quoted"] = message.quoted.raw
        return frame

    async def mark_read(self, event: InboundEvent) -> None:
        """Mark a message as read."""
        await self._send_frame({"type": "read", "keys": [event.raw.get("key", {})]})

    async def send_presence(self, chat_id: str, state: str) -> None:
        """Update presence in a chat."""
        await self._send_frame({"type": "presence", "to": chat_id, "state": state})

    async def download_media(self, event: InboundEvent) -> bytes:
        """
        Ask the bridge for the media attached to or quoted by a message.

        Raises:
            BridgeError: If the bridge reports a failure or the connection drops.
            asyncio.TimeoutError: If no answer arrives in time.
        """
        request_id = uuid.uuid4().hex
        future = asyncio.get_running_loop().create_future()
        self._pending_media[request_id] = future

        try:
            await self._send_frame({
                "type": "download",
                "requestId": request_id,
                "message": event.raw,
            })
            return await asyncio.wait_for(future, timeout=self.config.media_timeout_seconds)
        finally:
            self._pending_media.pop(request_id, None)
