"""
Tests for the in-memory league store and the sample league.
"""

import pytest

from test_utils import TestDataFactory, NOW

from adapters.repository.memory_store import InMemoryLeagueStore
from adapters.repository.sample_data import build_sample_store, SEASON, TEAMS
from core.exceptions import (
    ValidationError, InvariantViolationError, TeamNotFoundError,
    GameNotFoundError, PlayerNotFoundError, UserNotFoundError, PaymentNotFoundError
)
from domain.models.payment import Payment, PaymentStatus
from domain.models.statistics import GameDetails, PlayerGameStats


def make_store(**entities) -> InMemoryLeagueStore:
    teams = entities.pop('teams', [
        TestDataFactory.create_team("1", "Thunder"),
        TestDataFactory.create_team("2", "Lightning"),
    ])
    return InMemoryLeagueStore(teams=teams, **entities)


class TestStoreReads:
    """Reads hand out copies, never stored state."""

    @pytest.mark.asyncio
    async def test_returned_entities_are_copies(self):
        store = make_store()

        team = await store.get_team("1")
        team.wins = 99
        team.name = "Changed"

        stored = await store.get_team("1")
        assert stored.wins == 0
        assert stored.name == "Thunder"

    @pytest.mark.asyncio
    async def test_constructor_copies_inputs(self):
        team = TestDataFactory.create_team("1", "Thunder")
        store = InMemoryLeagueStore(teams=[team])
        team.name = "Mutated"

        assert (await store.get_team("1")).name == "Thunder"

    @pytest.mark.asyncio
    async def test_missing_entities_raise_not_found(self):
        store = make_store()

        with pytest.raises(TeamNotFoundError):
            await store.get_team("99")
        with pytest.raises(GameNotFoundError):
            await store.get_game("99")
        with pytest.raises(PlayerNotFoundError):
            await store.get_player("99")
        with pytest.raises(UserNotFoundError):
            await store.get_user("99")


class TestStoreTeams:
    """Team writes."""

    @pytest.mark.asyncio
    async def test_create_team_sets_created_at(self):
        store = make_store()
        created = await store.create_team(TestDataFactory.create_team("3", "Storm"))

        assert created.created_at is not None
        assert len(await store.list_teams()) == 3

    @pytest.mark.asyncio
    async def test_duplicate_team_id_rejected(self):
        store = make_store()
        with pytest.raises(ValidationError):
            await store.create_team(TestDataFactory.create_team("1", "Another"))

    @pytest.mark.asyncio
    async def test_negative_counter_rejected(self):
        store = make_store()
        with pytest.raises(ValidationError):
            await store.create_team(TestDataFactory.create_team("3", "Storm", wins=-1))

    @pytest.mark.asyncio
    async def test_update_presentation_fields(self):
        store = make_store()
        updated = await store.update_team("1", coach="Mike Stevens", home_venue="Fairfield")

        assert updated.coach == "Mike Stevens"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_counters_cannot_be_edited(self):
        store = make_store()
        with pytest.raises(ValidationError):
            await store.update_team("1", wins=5)

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self):
        store = make_store()
        with pytest.raises(ValidationError):
            await store.update_team("1", mascot="Owl")

    @pytest.mark.asyncio
    async def test_delete_team_frees_players(self):
        store = make_store(
            users=[TestDataFactory.create_user()],
            players=[TestDataFactory.create_player(team_id="2")]
        )

        assert await store.delete_team("2") is True
        assert (await store.get_player("p1")).team_id is None
        with pytest.raises(TeamNotFoundError):
            await store.get_team("2")

    @pytest.mark.asyncio
    async def test_delete_team_with_games_refused(self):
        store = make_store(games=[TestDataFactory.create_game()])
        with pytest.raises(ValidationError):
            await store.delete_team("1")


class TestStoreGames:
    """Game writes and result submission."""

    @pytest.mark.asyncio
    async def test_create_game_requires_known_teams(self):
        store = make_store()
        with pytest.raises(TeamNotFoundError):
            await store.create_game(TestDataFactory.create_game(away_team_id="9"))

    @pytest.mark.asyncio
    async def test_create_game_with_result_rejected(self):
        store = make_store()
        with pytest.raises(ValidationError):
            await store.create_game(TestDataFactory.create_game(home_score=80, away_score=70))

    @pytest.mark.asyncio
    async def test_update_game_time(self):
        store = make_store(games=[TestDataFactory.create_game()])
        updated = await store.update_game("g1", game_time=NOW)
        assert updated.game_time == NOW

    @pytest.mark.asyncio
    async def test_scores_cannot_be_edited_directly(self):
        store = make_store(games=[TestDataFactory.create_game()])
        with pytest.raises(ValidationError):
            await store.update_game("g1", home_score=90)

    @pytest.mark.asyncio
    async def test_submit_result_updates_both_records(self):
        store = make_store(games=[TestDataFactory.create_game()])

        game = await store.submit_game_result("g1", 95, 88)

        assert game.has_result
        home = await store.get_team("1")
        away = await store.get_team("2")
        assert (home.wins, home.losses, home.points_for, home.points_against) == (1, 0, 95, 88)
        assert (away.wins, away.losses, away.points_for, away.points_against) == (0, 1, 88, 95)

    @pytest.mark.asyncio
    async def test_submit_draw(self):
        store = make_store(games=[TestDataFactory.create_game()])
        await store.submit_game_result("g1", 70, 70)

        for team in await store.list_teams():
            assert team.draws == 1
            assert team.wins == 0 and team.losses == 0

    @pytest.mark.asyncio
    async def test_duplicate_result_rejected(self):
        store = make_store(games=[TestDataFactory.create_game()])
        await store.submit_game_result("g1", 95, 88)

        with pytest.raises(ValidationError):
            await store.submit_game_result("g1", 100, 80)

        home = await store.get_team("1")
        assert home.points_for == 95

    @pytest.mark.asyncio
    async def test_negative_result_rejected(self):
        store = make_store(games=[TestDataFactory.create_game()])
        with pytest.raises(ValidationError):
            await store.submit_game_result("g1", -1, 80)
        assert not (await store.get_game("g1")).has_result

    @pytest.mark.asyncio
    async def test_details_must_match_result(self):
        store = make_store(games=[TestDataFactory.create_game()])
        details = GameDetails(
            game_id="g1",
            home_first_half=40, home_second_half=40,
            away_first_half=35, away_second_half=35,
        )

        with pytest.raises(InvariantViolationError):
            await store.submit_game_result("g1", 95, 70, details)

        assert (await store.get_team("1")).points_for == 0

    @pytest.mark.asyncio
    async def test_matching_details_are_stored(self):
        store = make_store(games=[TestDataFactory.create_game()])
        details = GameDetails(
            game_id="",
            home_first_half=40, home_second_half=40,
            away_first_half=35, away_second_half=35,
            home_player_stats=[PlayerGameStats("p1", "Marcus Johnson", 23, 80)],
        )

        game = await store.submit_game_result("g1", 80, 70, details)

        assert game.details.game_id == "g1"
        assert game.details.home_player_stats[0].points == 80

    @pytest.mark.asyncio
    async def test_delete_unplayed_game(self):
        store = make_store(games=[TestDataFactory.create_game()])
        assert await store.delete_game("g1") is True
        assert await store.list_games() == []

    @pytest.mark.asyncio
    async def test_played_game_teams_cannot_change(self):
        store = make_store(
            teams=[TestDataFactory.create_team(str(n), f"Team {n}") for n in (1, 2, 3)],
            games=[TestDataFactory.create_game()]
        )
        await store.submit_game_result("g1", 90, 80)

        with pytest.raises(ValidationError):
            await store.update_game("g1", home_team_id="3")
        with pytest.raises(ValidationError):
            await store.update_game("g1", away_team_id="3")

        games = await store.list_games()
        for team in await store.list_teams():
            played = [g for g in games if g.has_result and g.involves(team.id)]
            assert team.wins + team.losses + team.draws == len(played)

    @pytest.mark.asyncio
    async def test_played_game_can_be_retimed(self):
        store = make_store(games=[TestDataFactory.create_game()])
        await store.submit_game_result("g1", 90, 80)

        updated = await store.update_game("g1", game_time=NOW, home_team_id="1")

        assert updated.game_time == NOW
        assert updated.home_score == 90

    @pytest.mark.asyncio
    async def test_unplayed_game_teams_can_change(self):
        store = make_store(
            teams=[TestDataFactory.create_team(str(n), f"Team {n}") for n in (1, 2, 3)],
            games=[TestDataFactory.create_game()]
        )
        updated = await store.update_game("g1", away_team_id="3")
        assert updated.away_team_id == "3"

    @pytest.mark.asyncio
    async def test_delete_played_game_refused(self):
        store = make_store(games=[TestDataFactory.create_game()])
        await store.submit_game_result("g1", 95, 88)
        with pytest.raises(ValidationError):
            await store.delete_game("g1")


class TestStorePlayers:
    """Players, users and payments."""

    @pytest.mark.asyncio
    async def test_create_player_requires_user(self):
        store = make_store()
        with pytest.raises(UserNotFoundError):
            await store.create_player(TestDataFactory.create_player())

    @pytest.mark.asyncio
    async def test_assign_player_to_team(self):
        store = make_store(
            users=[TestDataFactory.create_user()],
            players=[TestDataFactory.create_player(team_id=None, jersey_number=None)]
        )

        player = await store.assign_player_to_team("p1", "2", jersey_number=4)

        assert player.team_id == "2"
        assert player.jersey_number == 4

    @pytest.mark.asyncio
    async def test_release_player(self):
        store = make_store(users=[TestDataFactory.create_user()], players=[TestDataFactory.create_player()])
        player = await store.assign_player_to_team("p1", None)
        assert player.is_free_agent

    @pytest.mark.asyncio
    async def test_assign_to_unknown_team(self):
        store = make_store(users=[TestDataFactory.create_user()], players=[TestDataFactory.create_player()])
        with pytest.raises(TeamNotFoundError):
            await store.assign_player_to_team("p1", "42")

    @pytest.mark.asyncio
    async def test_payments(self):
        store = make_store(users=[TestDataFactory.create_user()], players=[TestDataFactory.create_player()])

        await store.create_payment(Payment(id="pay1", player_id="p1", amount=150.0))
        assert len(await store.list_payments()) == 1

        with pytest.raises(ValidationError):
            await store.create_payment(Payment(id="pay2", player_id="p1", amount=-5.0))
        with pytest.raises(PlayerNotFoundError):
            await store.create_payment(Payment(id="pay3", player_id="nobody", amount=10.0))

    @pytest.mark.asyncio
    async def test_payment_status_moves(self):
        store = make_store(
            users=[TestDataFactory.create_user()],
            players=[TestDataFactory.create_player()],
            payments=[Payment(id="pay1", player_id="p1", amount=150.0)]
        )

        updated = await store.update_payment_status("pay1", PaymentStatus.FAILED.value)

        assert updated.status == "failed"
        assert updated.updated_at is not None
        assert (await store.list_payments())[0].status == "failed"

        with pytest.raises(ValidationError):
            await store.update_payment_status("pay1", "refunded")
        with pytest.raises(PaymentNotFoundError):
            await store.update_payment_status("nope", "completed")

    @pytest.mark.asyncio
    async def test_delete_payment(self):
        store = make_store(
            users=[TestDataFactory.create_user()],
            players=[TestDataFactory.create_player()],
            payments=[Payment(id="pay1", player_id="p1", amount=150.0)]
        )

        assert await store.delete_payment("pay1") is True
        assert await store.list_payments() == []
        with pytest.raises(PaymentNotFoundError):
            await store.delete_payment("pay1")

    @pytest.mark.asyncio
    async def test_update_player_registration(self):
        store = make_store(users=[TestDataFactory.create_user()], players=[TestDataFactory.create_player()])

        player = await store.update_player_registration("p1", True, registration_fee_due=0.0)
        assert player.is_fully_registered
        assert player.registration_fee_due == 0.0

        player = await store.update_player_registration("p1", False)
        assert not player.is_fully_registered
        assert player.registration_fee_due == 0.0

    @pytest.mark.asyncio
    async def test_delete_player(self):
        store = make_store(
            users=[TestDataFactory.create_user()],
            players=[TestDataFactory.create_player(), TestDataFactory.create_player("p2")],
            payments=[Payment(id="pay1", player_id="p1", amount=150.0)]
        )

        with pytest.raises(ValidationError):
            await store.delete_player("p1")
        assert await store.delete_player("p2") is True
        assert [p.id for p in await store.list_players()] == ["p1"]

    @pytest.mark.asyncio
    async def test_update_user(self):
        store = make_store(users=[TestDataFactory.create_user()])

        user = await store.update_user("u1", email="marcus.j@fcabl.com", role="coach")

        assert user.email == "marcus.j@fcabl.com"
        assert user.role == "coach"
        with pytest.raises(ValidationError):
            await store.update_user("u1", id="u9")
        with pytest.raises(ValidationError):
            await store.update_user("u1", nickname="MJ")

    @pytest.mark.asyncio
    async def test_delete_user(self):
        store = make_store(
            users=[TestDataFactory.create_user(), TestDataFactory.create_user("u2", "Derek", "Thompson")],
            players=[TestDataFactory.create_player()]
        )

        with pytest.raises(ValidationError):
            await store.delete_user("u1")
        assert await store.delete_user("u2") is True
        with pytest.raises(UserNotFoundError):
            await store.get_user("u2")


class TestSampleStore:
    """The sample league is internally consistent."""

    @pytest.mark.asyncio
    async def test_records_agree_with_games(self):
        store = await build_sample_store(season_start=NOW)

        teams = await store.list_teams()
        games = await store.list_games()
        played = [g for g in games if g.has_result]

        assert len(teams) == len(TEAMS)
        assert len(games) == len(SEASON)
        assert len(played) == sum(1 for g in SEASON if g[2] is not None)

        for team in teams:
            team_games = [g for g in played if g.involves(team.id)]
            assert team.wins + team.losses + team.draws == len(team_games)
            scored = sum(g.home_score if g.home_team_id == team.id else g.away_score for g in team_games)
            assert team.points_for == scored

    @pytest.mark.asyncio
    async def test_thunder_leads_sample_league(self):
        store = await build_sample_store(season_start=NOW)
        thunder = await store.get_team("1")
        assert (thunder.wins, thunder.losses) == (5, 0)

    @pytest.mark.asyncio
    async def test_free_agents_present(self):
        store = await build_sample_store(season_start=NOW)
        players = await store.list_players()
        assert sum(1 for p in players if p.is_free_agent) == 2
        assert len(players) == 38
