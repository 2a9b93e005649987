import asyncio
from datetime import datetime, timezone
from typing import Optional, List, Set, Tuple

import discord


class LoggingHelper:
    """Handles all system logging operations, including Discord channel and console output."""

    def __init__(self, bot: Optional[discord.Client], log_channel_id: Optional[int] = None):
        self.bot = bot
        self.log_channel_id = log_channel_id
        self._init_log_queue: List[Tuple[str, str]] = []
        self._pending_sends: Set[asyncio.Task] = set()

    def set_log_channel(self, channel_id: Optional[int]):
        self.log_channel_id = channel_id

    async def log_to_discord(self, message: str, level: str = "INFO", embed: Optional[discord.Embed] = None):
        """Sends a formatted log message to the designated Discord log channel."""

        if self.bot is None or self.log_channel_id is None:
            print(f"[LOG|{level.upper()}] {message}")
            return

        if not self.bot.is_ready():
            self._init_log_queue.append((message, level))
            print(f"[LOG_QUEUE|{level.upper()}] Bot not ready. Queued: {message}")
            return

        log_channel = self.bot.get_channel(self.log_channel_id)

        if not isinstance(log_channel, discord.TextChannel):
            print(
                f"[LOG_ERROR|{level.upper()}] Log channel {self.log_channel_id} not found or not a TextChannel. "
                f"Message: {message}")
            return

        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')
        log_prefix = f"`[{timestamp}] [{level.upper()}]` "

        try:
            full_message = log_prefix + message

            if len(full_message) <= 2000:
                await log_channel.send(content=full_message, embed=embed,
                                       allowed_mentions=discord.AllowedMentions.none())
            else:
                await log_channel.send(content=f"{log_prefix}Log message exceeds 2000 characters. See chunks below.",
                                       embed=embed, allowed_mentions=discord.AllowedMentions.none())

                for i in range(0, len(message), 1900):
                    await log_channel.send(f"```{level.upper()} Chunk {i // 1900 + 1}```\n{message[i:i + 1900]}")
        except discord.Forbidden:
            print(f"[LOG_FORBIDDEN] No permission to send to log channel {self.log_channel_id}.")
        except discord.HTTPException as e:
            print(f"[LOG_HTTP_ERROR] Failed to send to log channel {self.log_channel_id}: {e}")

    def init_log(self, message: str, level: str = "INFO"):
        """
        Synchronous logger for use outside coroutines. Prints to the console immediately and
        forwards to Discord when an event loop is running, otherwise queues the message.
        """

        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')
        print(f"[INIT_LOG|{level.upper()}|{timestamp}] {message}")

        if self.bot is None or self.log_channel_id is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._init_log_queue.append((message, level))
            return

        task = loop.create_task(self.log_to_discord(message, level=level))
        self._pending_sends.add(task)
        task.add_done_callback(self._on_send_done)

    def _on_send_done(self, task: asyncio.Task):
        self._pending_sends.discard(task)
        if not task.cancelled() and task.exception() is not None:
            print(f"[LOG_ERROR] Failed to forward log to Discord: {task.exception()}")

    async def flush_init_log_queue(self):
        """Sends any queued logs generated before the bot was ready."""

        if self._init_log_queue:
            queued = list(self._init_log_queue)
            self._init_log_queue.clear()
            self.init_log(f"Flushing {len(queued)} queued startup logs...", "DEBUG")
            for msg, level in queued:
                await self.log_to_discord(msg, level)
