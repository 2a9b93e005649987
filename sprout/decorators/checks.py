import discord
from redbot.core import commands


def is_not_locked():
    """
    A commands.check decorator that refuses garden commands while the author still has a planting
    or a new day waiting on the advisor.
    """

    async def predicate(ctx: commands.Context):
        if not hasattr(ctx.cog, 'lock_helper'):
            return True

        lock_helper = ctx.cog.lock_helper
        lock = lock_helper.get_user_lock(ctx.author.id)
        if lock:
            embed = discord.Embed(
                title=f"❌ {lock_helper.get_lock_title(lock)}",
                description=f"{ctx.author.mention}, your garden is busy. {lock.message}\n\n"
                            f"Started {lock_helper.get_lock_age(lock)}s ago. Try again once it finishes.",
                color=discord.Color.orange()
            )
            embed.set_footer(text="Sprout - Garden Lock")
            await ctx.send(embed=embed)
            return False
        return True

    return commands.check(predicate)


def is_cog_ready():
    """
    A commands.check decorator that fails if the cog's data and advisor have not yet been loaded.
    This prevents commands from running during the initial startup sequence.
    """

    async def predicate(ctx: commands.Context):
        if not getattr(ctx.cog, '_initialized', False):
            embed = discord.Embed(
                title="⏳ Garden Initializing",
                description="Sprout is still setting up the greenhouse. Please wait a moment and try again.",
                color=discord.Color.orange()
            )
            await ctx.send(embed=embed, delete_after=10)
            return False
        return True

    return commands.check(predicate)
