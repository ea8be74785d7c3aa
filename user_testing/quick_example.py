#!/usr/bin/env python3
"""
Quick RecLeague Example - Standings and Home Page
=================================================

Builds the sample league in memory and prints the standings table, the
latest results with a box score, and the upcoming schedule.
"""
import asyncio
import sys
import os

# Add backend source to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend', 'src'))

from core.utils import EnvironmentManager
from adapters.external.league_api_client import LeagueAPIClient
from adapters.repository import build_sample_store
from domain.services.league_view_service import LeagueViewService
from domain.services.game_service import format_game_score, format_game_time
from domain.services.stats_service import format_win_percentage, format_team_record

EnvironmentManager.load_env_vars()


async def standings_example(views: LeagueViewService):
    """Print the league table."""
    print("🏀 RecLeague Standings\n")
    for standing in await views.get_standings():
        team = standing.team
        print(
            f"  {standing.rank}. {team.name:<10} "
            f"{format_team_record(team.wins, team.losses, team.draws):>6}  "
            f"{format_win_percentage(team.win_percentage):>6}  "
            f"diff {team.point_differential:+d}  "
            f"streak {standing.streak or '-'}"
        )
    print()


async def home_page_example(views: LeagueViewService):
    """Print recent results (with the last game's box score) and upcoming games."""
    home = await views.get_home_page()

    print("📅 Recent results")
    for game in home['recentGames']:
        print(
            f"  {format_game_time(game.game_time)}: {game.home_team_name} vs {game.away_team_name} "
            f"{format_game_score(game.home_score, game.away_score)}"
        )

    if home['recentGames'] and home['recentGames'][-1].details:
        details = home['recentGames'][-1].details
        print(f"\n📊 Box score, {home['recentGames'][-1].home_team_name}")
        print(f"  Halves: {details.home_first_half} / {details.home_second_half}")
        for line in details.home_player_stats:
            print(f"  #{line.jersey_number:<3} {line.player_name:<20} {line.points}")

    print("\n🗓️  Upcoming")
    for game in home['upcomingGames']:
        print(f"  {format_game_time(game.game_time)}: {game.home_team_name} vs {game.away_team_name}")


async def main():
    if EnvironmentManager.get_env_bool("RECLEAGUE_USE_REMOTE"):
        # Read from the league service configured by LEAGUE_API_BASE_URL
        async with LeagueAPIClient() as client:
            views = LeagueViewService(client)
            await standings_example(views)
            await home_page_example(views)
        return

    store = await build_sample_store()
    views = LeagueViewService(store)
    await standings_example(views)
    await home_page_example(views)


if __name__ == "__main__":
    asyncio.run(main())
