__red_end_user_data_statement__ = (
    "This cog keeps each player's garden in memory only. Nothing is stored once the cog is unloaded."
)


async def setup(bot):
    # Imported here so the simulation helpers can be used without a Red installation.
    from .sprout import Sprout

    await bot.add_cog(Sprout(bot))
