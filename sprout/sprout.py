import asyncio
import dataclasses
import io
import json
import time
from typing import Dict, List, Optional

import discord
from redbot.core import Config, commands, data_manager

from .constants import (
    ACTION_NEW_DAY,
    ACTION_PLANTING,
    LOG_EVENT,
    LOG_INFO,
    LOG_SUCCESS,
    LOG_WARNING,
    WATER_ACTION_COST,
    WATER_REFILL_AMOUNT,
    WATER_REFILL_COST,
    WEATHER_CLOUDY,
    WEATHER_HEATWAVE,
    WEATHER_RAINY,
    WEATHER_SUNNY,
)
from .decorators import is_cog_ready, is_not_locked
from .errors import SproutError
from .helpers import (
    AdvisorHelper,
    DataHelper,
    EventHelper,
    GardenHelper,
    LockHelper,
    LoggingHelper,
    PlantHelper,
    SimulationHelper,
)
from .models import GameStateView, LogEvent


class Sprout(commands.Cog):
    """Urban Sprout - Tend a rooftop garden one day at a time."""

    DEFAULT_ADVISOR_MODEL = "google/gemini-2.5-flash"
    DEFAULT_ADVISOR_TIMEOUT = 30
    RECENT_LOG_COUNT = 5

    WEATHER_EMOJI = {
        WEATHER_SUNNY: "☀️",
        WEATHER_RAINY: "🌧️",
        WEATHER_CLOUDY: "☁️",
        WEATHER_HEATWAVE: "🔥",
    }
    LOG_EMOJI = {
        LOG_INFO: "ℹ️",
        LOG_WARNING: "⚠️",
        LOG_SUCCESS: "✅",
        LOG_EVENT: "✨",
    }

    def __init__(self, bot: commands.Bot):
        self._initialized = False

        self.bot = bot
        self.config = Config.get_conf(self, identifier=736128450912004417)
        self.config.register_global(
            advisor_model=self.DEFAULT_ADVISOR_MODEL,
            advisor_timeout=self.DEFAULT_ADVISOR_TIMEOUT,
            log_channel_id=None,
        )

        self.cog_data_path = data_manager.bundled_data_path(self)
        self.lock_helper = LockHelper()
        self.logger = LoggingHelper(bot)
        self.data_loader = DataHelper(self.cog_data_path, self.logger)
        self.data_loader.load_all_data()

        self.plant_helper = PlantHelper(self.data_loader.plant_specs)
        self.simulation_helper = SimulationHelper(self.plant_helper)
        self.event_helper = EventHelper()
        self.advisor_helper: Optional[AdvisorHelper] = None

        self.sessions: Dict[int, GardenHelper] = {}
        self.startup_task: Optional[asyncio.Task] = None

    async def cog_load(self):
        settings = await self.config.all()
        self.logger.set_log_channel(settings["log_channel_id"])
        self.advisor_helper = AdvisorHelper(self.logger, settings["advisor_model"], settings["advisor_timeout"])
        self._initialized = True
        self.startup_task = asyncio.create_task(self._announce_startup())

    async def cog_unload(self):
        """Cog cleanup method."""

        if self.startup_task:
            self.startup_task.cancel()

        self.lock_helper.clear_all_locks()
        self.sessions.clear()
        if self.advisor_helper:
            await self.advisor_helper.close()
        self.logger.init_log("Urban Sprout greenhouse is now offline.", "INFO")

    async def _announce_startup(self):
        await self.bot.wait_until_ready()
        await self.logger.flush_init_log_queue()
        await self.logger.log_to_discord(
            f"Greenhouse online with {len(self.plant_helper.get_plantable_specs())} seed types. "
            f"Advisor model: `{self.advisor_helper.model}`.", "INFO")

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError):
        original = getattr(error, "original", None)
        if isinstance(error, commands.CommandInvokeError) and isinstance(original, SproutError):
            embed = discord.Embed(title="❌ Garden Error", description=str(original), color=discord.Color.red())
            embed.set_footer(text="Sprout - Garden Systems")
            await ctx.send(embed=embed)
            return
        await self.bot.on_command_error(ctx, error, unhandled_by_cog=True)

    # --- Session management ---

    def _get_session(self, user_id: int) -> GardenHelper:
        session = self.sessions.get(user_id)
        if session is None:
            session = GardenHelper(
                self.plant_helper,
                self.simulation_helper,
                self.event_helper,
                self.advisor_helper,
                self.logger,
            )
            session.subscribe(self._make_day_listener(user_id))
            self.sessions[user_id] = session
            self.logger.init_log(f"Garden: New session started for user {user_id}.", "INFO")
        return session

    def _make_day_listener(self, user_id: int):
        def on_change(view: GameStateView, reason: str):
            if reason == "advance_day":
                self.logger.init_log(
                    f"Garden {user_id}: Day {view.day} ({view.weather}), money {view.money}, "
                    f"water {view.water_supply}L.", "DEBUG")

        return on_change

    # --- Formatting ---

    def _format_log_lines(self, logs: List[LogEvent]) -> str:
        if not logs:
            return "Nothing has happened yet."
        return "\n".join(f"{self.LOG_EMOJI.get(log.kind, '•')} `Day {log.day}` {log.message}" for log in logs)

    @staticmethod
    def _new_logs(session: GardenHelper, log_count_before: int) -> List[LogEvent]:
        logs = session.get_view().logs
        return list(logs[:max(0, len(logs) - log_count_before)])

    def _weather_text(self, weather: str) -> str:
        return f"{self.WEATHER_EMOJI.get(weather, '❓')} {weather}"

    def _status_line(self, view: GameStateView) -> str:
        return (f"**Day:** {view.day} | **Weather:** {self._weather_text(view.weather)}\n"
                f"**Money:** ${view.money:,} | **Water:** {view.water_supply:,}L")

    async def _send_outcome(self, ctx: commands.Context, title: str, success: bool, session: GardenHelper,
                            log_count_before: int):
        new_logs = self._new_logs(session, log_count_before)
        view = session.get_view()
        desc = self._format_log_lines(list(reversed(new_logs))) + "\n\n" + self._status_line(view)
        desc = desc[-4000:]
        color = discord.Color.green() if success else discord.Color.orange()
        embed = discord.Embed(title=title, description=desc, color=color)
        embed.set_footer(text="Sprout - Garden Systems")
        await ctx.send(embed=embed)

    async def _check_plot_number(self, ctx: commands.Context, plot_number: int, session: GardenHelper) -> bool:
        plot_count = len(session.get_view().slots)
        if 1 <= plot_number <= plot_count:
            return True

        embed = discord.Embed(title="❌ Invalid Plot",
                              description=f"Plot {plot_number}: Invalid designation (must be 1-{plot_count}).",
                              color=discord.Color.red())
        await ctx.send(embed=embed)
        return False

    # --- Player commands ---

    @commands.command(name="garden")
    @is_cog_ready()
    async def garden_command(self, ctx: commands.Context):
        """Show your garden, its resources and the latest happenings."""

        session = self._get_session(ctx.author.id)
        view = session.get_view()

        embed = discord.Embed(color=discord.Color.blue())
        embed.set_author(name=f"{ctx.author.display_name}: Rooftop Garden",
                         icon_url=ctx.author.display_avatar.url)
        embed.add_field(name="📈 Garden Metrics", value=self._status_line(view), inline=False)
        embed.add_field(name="🌳 Garden Plots", value=session.get_text_garden_display(view), inline=False)
        embed.add_field(name="📜 Recent Log",
                        value=self._format_log_lines(list(view.logs[:self.RECENT_LOG_COUNT]))[:1024], inline=False)

        if session.is_advancing:
            embed.description = "⏳ A new day is dawning..."

        embed.set_footer(text="Sprout - Garden Systems")
        await ctx.send(embed=embed)

    @commands.command(name="seeds")
    @is_cog_ready()
    async def seeds_command(self, ctx: commands.Context):
        """List the seeds available for planting."""

        lines = []
        for spec in self.plant_helper.get_plantable_specs():
            lines.append(f"**{spec.type}** - ${spec.cost} | {spec.days_to_maturity} days | "
                         f"💧 {spec.water_needs}/day | sells for ${spec.value}\n*{spec.description}*")

        embed = discord.Embed(title="🌱 Seed Catalogue", description="\n\n".join(lines) or "No seeds in stock.",
                              color=discord.Color.green())
        embed.set_footer(text=f"Use {ctx.prefix}plant <plot> <seed> to plant.")
        await ctx.send(embed=embed)

    @commands.command(name="plant")
    @is_cog_ready()
    @is_not_locked()
    async def plant_command(self, ctx: commands.Context, plot_number: int, *, plant_name: str):
        """Plant a seed in an empty plot."""

        session = self._get_session(ctx.author.id)
        if not await self._check_plot_number(ctx, plot_number, session):
            return

        plant_type = self.plant_helper.resolve_plant_name(plant_name)
        if plant_type is None:
            embed = discord.Embed(title="❌ Unknown Seed",
                                  description=f"'{plant_name}' is not in the seed catalogue. "
                                              f"See `{ctx.prefix}seeds`.",
                                  color=discord.Color.red())
            await ctx.send(embed=embed)
            return

        if not session.get_view().slots[plot_number - 1].is_empty:
            embed = discord.Embed(title="❌ Plot Occupied",
                                  description=f"Plot {plot_number}: Currently occupied. Harvest or shovel it first.",
                                  color=discord.Color.red())
            await ctx.send(embed=embed)
            return

        if not self.lock_helper.add_lock(ctx.author.id, ACTION_PLANTING,
                                         f"Consulting the advisor before planting {plant_type}."):
            return

        log_count_before = len(session.get_view().logs)
        try:
            async with ctx.typing():
                success = await session.plant_seed(plot_number - 1, plant_type)
        finally:
            self.lock_helper.remove_lock_for_user(ctx.author.id)

        title = f"🌱 {plant_type} Planted" if success else "❌ Planting Failed"
        await self._send_outcome(ctx, title, success, session, log_count_before)

    @commands.command(name="water")
    @is_cog_ready()
    @is_not_locked()
    async def water_command(self, ctx: commands.Context, plot_number: int):
        """Water a plot from your tank."""

        session = self._get_session(ctx.author.id)
        if not await self._check_plot_number(ctx, plot_number, session):
            return

        log_count_before = len(session.get_view().logs)
        success = session.water_slot(plot_number - 1)
        title = f"💧 Plot {plot_number} Watered (-{WATER_ACTION_COST}L)" if success else "❌ Watering Failed"
        await self._send_outcome(ctx, title, success, session, log_count_before)

    @commands.command(name="harvest")
    @is_cog_ready()
    @is_not_locked()
    async def harvest_command(self, ctx: commands.Context, plot_number: int):
        """Harvest a fully grown plant."""

        session = self._get_session(ctx.author.id)
        if not await self._check_plot_number(ctx, plot_number, session):
            return

        log_count_before = len(session.get_view().logs)
        earnings = session.harvest_slot(plot_number - 1)
        success = earnings is not None
        title = f"💰 Harvested for ${earnings}" if success else "❌ Harvest Failed"
        await self._send_outcome(ctx, title, success, session, log_count_before)

    @commands.command(name="shovel")
    @is_cog_ready()
    @is_not_locked()
    async def shovel_command(self, ctx: commands.Context, plot_number: int):
        """Clear a plot. Seeds are not refunded."""

        session = self._get_session(ctx.author.id)
        if not await self._check_plot_number(ctx, plot_number, session):
            return

        log_count_before = len(session.get_view().logs)
        session.remove_slot(plot_number - 1)
        await self._send_outcome(ctx, f"🪏 Plot {plot_number} Cleared", True, session, log_count_before)

    @commands.command(name="buywater")
    @is_cog_ready()
    @is_not_locked()
    async def buywater_command(self, ctx: commands.Context):
        """Buy a refill for your water tank."""

        session = self._get_session(ctx.author.id)
        log_count_before = len(session.get_view().logs)
        success = session.buy_water()
        title = f"🚰 Bought {WATER_REFILL_AMOUNT}L (-${WATER_REFILL_COST})" if success else "❌ Purchase Failed"
        await self._send_outcome(ctx, title, success, session, log_count_before)

    @commands.command(name="nextday")
    @is_cog_ready()
    @is_not_locked()
    async def nextday_command(self, ctx: commands.Context):
        """End the day. Plants grow, drink and react to the weather, then a daily event is rolled."""

        session = self._get_session(ctx.author.id)

        if not self.lock_helper.add_lock(ctx.author.id, ACTION_NEW_DAY, "Waiting for today's events to unfold."):
            return

        log_count_before = len(session.get_view().logs)
        try:
            async with ctx.typing():
                view = await session.advance_day()
        finally:
            self.lock_helper.remove_lock_for_user(ctx.author.id)

        new_logs = self._new_logs(session, log_count_before)
        if new_logs:
            desc = self._format_log_lines(list(reversed(new_logs)))
        else:
            desc = "A quiet day. The weather shifted overnight."
        desc += "\n\n" + self._status_line(view)

        embed = discord.Embed(title=f"🌅 Day {view.day} Begins", description=desc, color=discord.Color.gold())
        embed.add_field(name="🌳 Garden Plots", value=session.get_text_garden_display(view), inline=False)
        embed.set_footer(text="Sprout - Garden Systems")
        await ctx.send(embed=embed)

    @commands.command(name="sproutlogs")
    @is_cog_ready()
    async def sproutlogs_command(self, ctx: commands.Context, count: int = 10):
        """Show your most recent garden log entries."""

        count = max(1, min(count, 25))
        view = self._get_session(ctx.author.id).get_view()
        desc = self._format_log_lines(list(view.logs[:count]))[:4000]
        embed = discord.Embed(title="📜 Garden Log", description=desc, color=discord.Color.blue())
        await ctx.send(embed=embed)

    @commands.command(name="sprouthistory")
    @is_cog_ready()
    async def sprouthistory_command(self, ctx: commands.Context, count: int = 10):
        """Show how your money and water have changed day by day."""

        count = max(1, min(count, 30))
        session = self._get_session(ctx.author.id)
        table = session.history_helper.get_text_table(count)
        embed = discord.Embed(title="📊 Garden History", description=f"```\n{table}\n```",
                              color=discord.Color.blue())
        await ctx.send(embed=embed)

    @commands.command(name="ask")
    @is_cog_ready()
    async def ask_command(self, ctx: commands.Context, *, question: str):
        """Ask Sprout, the garden advisor, a question."""

        view = self._get_session(ctx.author.id).get_view()
        async with ctx.typing():
            answer = await self.advisor_helper.get_farming_advice(question, view)

        embed = discord.Embed(description=answer[:4000], color=discord.Color.teal())
        embed.set_author(name="Sprout Advisor")
        await ctx.send(embed=embed)

    # --- Owner commands ---

    @commands.group(name="sproutadmin")
    @commands.is_owner()
    async def sproutadmin_group(self, ctx: commands.Context):
        """Urban Sprout administration."""
        pass

    @sproutadmin_group.command(name="model")
    async def admin_model_command(self, ctx: commands.Context, model: Optional[str] = None):
        """Show or set the advisor model."""

        if model is None:
            await ctx.send(f"Current advisor model: `{self.advisor_helper.model}`.")
            return

        await self.config.advisor_model.set(model)
        self.advisor_helper.model = model
        await self.logger.log_to_discord(f"Admin: {ctx.author.id} set the advisor model to `{model}`.", "INFO")
        await ctx.send(f"Advisor model set to `{model}`.")

    @sproutadmin_group.command(name="timeout")
    async def admin_timeout_command(self, ctx: commands.Context, seconds: Optional[int] = None):
        """Show or set the advisor request timeout in seconds."""

        if seconds is None:
            await ctx.send(f"Current advisor timeout: {self.advisor_helper.timeout}s.")
            return

        if seconds <= 0:
            await ctx.send("The timeout must be a positive number of seconds.")
            return

        await self.config.advisor_timeout.set(seconds)
        self.advisor_helper.timeout = seconds
        await self.logger.log_to_discord(f"Admin: {ctx.author.id} set the advisor timeout to {seconds}s.", "INFO")
        await ctx.send(f"Advisor timeout set to {seconds}s.")

    @sproutadmin_group.command(name="logchannel")
    async def admin_logchannel_command(self, ctx: commands.Context, channel: Optional[discord.TextChannel] = None):
        """Set the system log channel, or clear it when no channel is given."""

        channel_id = channel.id if channel else None
        await self.config.log_channel_id.set(channel_id)
        self.logger.set_log_channel(channel_id)
        await ctx.send(f"System log channel set to {channel.mention}." if channel else "System log channel cleared.")

    @sproutadmin_group.command(name="reset")
    async def admin_reset_command(self, ctx: commands.Context, target_user: discord.User):
        """Throw away a player's garden so they start over."""

        if self.lock_helper.get_user_lock(target_user.id):
            await ctx.send(f"{target_user.mention} has an action in progress. Try again in a moment.")
            return

        self.sessions.pop(target_user.id, None)
        await self.logger.log_to_discord(f"Admin: {ctx.author.id} reset the garden of {target_user.id}.", "INFO")
        await ctx.send(f"The garden of {target_user.mention} has been reset.")

    @sproutadmin_group.command(name="dumpstate")
    async def admin_dumpstate_command(self, ctx: commands.Context, target_user: discord.User):
        """Dumps a player's current garden and history into a JSON file."""

        session = self.sessions.get(target_user.id)
        if session is None:
            await ctx.send(f"{target_user.mention} has no garden yet.")
            return

        dump = {
            "state": dataclasses.asdict(session.get_view()),
            "history": [dataclasses.asdict(sample) for sample in session.history],
        }
        buffer = io.BytesIO(json.dumps(dump, indent=4).encode('utf-8'))
        file = discord.File(buffer, filename=f"sprout_{target_user.id}_{int(time.time())}.json")

        embed = discord.Embed(title="⚙️ Debug: Garden Dump",
                              description=f"Garden of {target_user.mention} serialized.",
                              color=discord.Color.green())
        embed.set_footer(text="Sprout - Administrative Data Systems")
        await ctx.send(embed=embed, file=file)
