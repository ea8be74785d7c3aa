"""
Sample league for local development and demos: six teams, their rosters and a
partly played season. Team records are not seeded; they are built by
submitting each result, so counters always agree with the games.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from domain.models.game import Game
from domain.models.player import Player, User
from domain.models.team import Team

from .memory_store import InMemoryLeagueStore

TEAMS = [
    ('1', 'Thunder', 'Mike Stevens', 'Fairfield Community Center'),
    ('2', 'Lightning', 'Robert Chen', 'Darien YMCA'),
    ('3', 'Storm', 'David Martinez', 'Westport High School'),
    ('4', 'Hawks', 'Tom Anderson', 'Norwalk Recreation Center'),
    ('5', 'Blaze', 'Jason Wright', 'Stamford High School'),
    ('6', 'Eagles', 'Chris Thompson', 'Greenwich Community Center'),
]

# team id -> (first name, last name, jersey number, points per game)
ROSTERS = {
    '1': [('Marcus', 'Johnson', 23, 18.5), ('Tyler', 'Rodriguez', 12, 15.2), ('Chris', 'Anderson', 7, 12.8),
          ('Brandon', 'Lee', 33, 11.4), ('Kevin', 'Martinez', 5, 10.6), ('Josh', 'Williams', 21, 9.8)],
    '2': [('James', 'Mitchell', 10, 19.2), ('Daniel', 'Brooks', 24, 16.1), ('Alex', 'Turner', 3, 13.5),
          ('Michael', 'Chen', 15, 11.8), ('Patrick', "O'Brien", 42, 10.2), ('Sam', 'Richards', 8, 9.5)],
    '3': [('Jake', 'Harrison', 11, 17.3), ('Noah', 'Campbell', 22, 15.7), ('Ethan', 'Parker', 4, 13.9),
          ('Luke', 'Sanders', 32, 12.1), ('Mason', 'Cooper', 9, 10.8), ('Owen', 'Bennett', 25, 9.2)],
    '4': [('Justin', 'Wright', 1, 16.8), ('Nathan', 'Gray', 16, 14.9), ('Aaron', 'Kelly', 6, 13.2),
          ('Jordan', 'Hayes', 27, 11.5), ('Cameron', 'Price', 2, 10.4), ('Dylan', 'Moore', 18, 9.1)],
    '5': [('Trevor', 'Morgan', 19, 15.6), ('Andrew', 'Coleman', 26, 14.3), ('Zachary', 'Bell', 5, 12.7),
          ('Sean', 'Hughes', 17, 11.9), ('Kyle', 'Barnes', 28, 10.1), ('Brian', 'Fisher', 41, 8.8)],
    '6': [('Ryan', 'Peterson', 14, 14.2), ('Matthew', 'Long', 29, 13.1), ('Jacob', 'Ellis', 7, 11.8),
          ('Nicholas', 'Ross', 38, 10.6), ('Ian', 'Scott', 3, 9.4), ('Colin', 'Ward', 21, 8.3)],
}

FREE_AGENTS = [('Derek', 'Thompson', 14.0), ('Ryan', 'Davis', 7.5)]

# (home id, away id, home score, away score); scores of None are unplayed
SEASON: List[Tuple[str, str, Optional[int], Optional[int]]] = [
    ('1', '2', 95, 88), ('3', '5', 102, 98), ('4', '6', 87, 92),
    ('2', '3', 91, 85), ('5', '1', 78, 94), ('6', '4', 88, 90),
    ('1', '3', 99, 95), ('4', '2', 84, 96), ('6', '5', 79, 86),
    ('3', '6', 105, 89), ('2', '5', 93, 82), ('1', '4', 97, 89),
    ('5', '4', 91, 94), ('6', '1', 81, 98), ('3', '2', 87, 92),
    ('1', '6', None, None), ('2', '4', None, None), ('3', '5', None, None),
    ('4', '1', None, None), ('5', '3', None, None), ('6', '2', None, None),
]


async def build_sample_store(season_start: Optional[datetime] = None) -> InMemoryLeagueStore:
    """
    Build a populated store. Games are three per week starting at
    season_start, alternating 7:00 PM and 8:30 PM. The default start puts every
    played week in the past and every unplayed week in the future.
    """
    if season_start is None:
        season_start = datetime.now().replace(hour=19, minute=0, second=0, microsecond=0) - timedelta(weeks=5, days=-1)

    store = InMemoryLeagueStore()

    for team_id, name, coach, venue in TEAMS:
        await store.create_team(Team(id=team_id, name=name, coach=coach, home_venue=venue))

    player_number = 0
    for team_id, roster in ROSTERS.items():
        for first_name, last_name, jersey, ppg in roster:
            player_number += 1
            user = await store.create_user(_user(player_number, first_name, last_name))
            await store.create_player(Player(
                id=f"p{player_number}",
                user_id=user.id,
                team_id=team_id,
                jersey_number=jersey,
                points_per_game=ppg,
                is_fully_registered=True,
            ))

    for first_name, last_name, ppg in FREE_AGENTS:
        player_number += 1
        user = await store.create_user(_user(player_number, first_name, last_name))
        await store.create_player(Player(id=f"p{player_number}", user_id=user.id, points_per_game=ppg))

    for index, (home_id, away_id, home_score, away_score) in enumerate(SEASON):
        week, slot = divmod(index, 3)
        game_time = season_start + timedelta(weeks=week, days=slot // 2, minutes=90 * (slot % 2))
        game = await store.create_game(Game(
            id=str(index + 1),
            home_team_id=home_id,
            away_team_id=away_id,
            game_time=game_time,
        ))
        if home_score is not None:
            await store.submit_game_result(game.id, home_score, away_score)

    return store


def _user(number: int, first_name: str, last_name: str) -> User:
    return User(
        id=f"u{number}",
        email=f"{first_name.lower()}.{last_name[0].lower()}@fcabl.com",
        first_name=first_name,
        last_name=last_name,
        role="player",
    )
