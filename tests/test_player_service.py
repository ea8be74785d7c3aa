"""
Tests for the player service and registration payments.
"""

from datetime import datetime

import pytest

from test_utils import TestDataFactory

from adapters.repository.memory_store import InMemoryLeagueStore
from core.exceptions import (
    TeamNotFoundError, UserNotFoundError, PlayerNotFoundError, PaymentNotFoundError, ValidationError
)
from domain.models.payment import Payment, PaymentStatus
from domain.models.player import Player
from domain.services.player_service import PlayerService, build_profiles, summarize_payments


class TestBuildProfiles:
    """Joining players with their accounts."""

    def test_identity_fields_joined(self):
        profiles = build_profiles([TestDataFactory.create_player()], [TestDataFactory.create_user()])

        assert profiles[0].full_name == "Marcus Johnson"
        assert profiles[0].email == "marcus@fcabl.com"
        assert profiles[0].points_per_game == 18.5

    def test_unknown_user_leaves_identity_blank(self):
        profiles = build_profiles([TestDataFactory.create_player(user_id="ghost")], [])
        assert profiles[0].full_name == ""
        assert profiles[0].id == "p1"


class TestSummarizePayments:
    """Payment totals by status."""

    def setup_method(self):
        self.payments = [
            Payment(id="1", player_id="p1", amount=100.0, status=PaymentStatus.COMPLETED.value,
                    payment_date=datetime(2025, 3, 1)),
            Payment(id="2", player_id="p1", amount=50.0, status=PaymentStatus.PENDING.value),
            Payment(id="3", player_id="p1", amount=25.0, status=PaymentStatus.FAILED.value,
                    payment_date=datetime(2025, 1, 15)),
            Payment(id="4", player_id="p2", amount=500.0, status=PaymentStatus.COMPLETED.value),
        ]

    def test_totals(self):
        summary = summarize_payments("p1", self.payments, "Marcus Johnson")

        assert summary.total_paid == 100.0
        assert summary.total_pending == 50.0
        assert summary.total_failed == 25.0
        assert summary.player_name == "Marcus Johnson"

    def test_history_dated_first_oldest_first(self):
        summary = summarize_payments("p1", self.payments)
        assert [p.id for p in summary.payment_history] == ["3", "1", "2"]

    def test_player_without_payments(self):
        summary = summarize_payments("p9", self.payments)
        assert summary.payment_history == []
        assert summary.total_paid == 0.0


class TestPlayerService:
    """Player service over an in-memory store."""

    def setup_method(self):
        self.store = InMemoryLeagueStore(
            teams=[TestDataFactory.create_team("1", "Thunder"), TestDataFactory.create_team("2", "Lightning")],
            users=[
                TestDataFactory.create_user("u1"),
                TestDataFactory.create_user("u2", "Derek", "Thompson"),
            ],
            players=[
                TestDataFactory.create_player("p1", "u1", team_id="1"),
                TestDataFactory.create_player("p2", "u2", team_id=None, jersey_number=None),
                TestDataFactory.create_player("p3", "missing", team_id="1"),
            ],
            payments=[Payment(id="pay1", player_id="p1", amount=150.0, status=PaymentStatus.COMPLETED.value)],
        )
        self.service = PlayerService(self.store)

    @pytest.mark.asyncio
    async def test_get_player_profile(self):
        profile = await self.service.get_player_profile("p1")
        assert profile.full_name == "Marcus Johnson"
        assert profile.team_id == "1"

    @pytest.mark.asyncio
    async def test_profile_with_missing_user(self):
        profile = await self.service.get_player_profile("p3")
        assert profile.full_name == ""

    @pytest.mark.asyncio
    async def test_unknown_player(self):
        with pytest.raises(PlayerNotFoundError):
            await self.service.get_player("nobody")

    @pytest.mark.asyncio
    async def test_roster_and_free_agents(self):
        roster = await self.service.get_roster("1")
        free_agents = await self.service.list_free_agents()

        assert sorted(p.id for p in roster) == ["p1", "p3"]
        assert [p.full_name for p in free_agents] == ["Derek Thompson"]

    @pytest.mark.asyncio
    async def test_assign_free_agent(self):
        player = await self.service.assign_to_team("p2", "2", jersey_number=14)

        assert player.team_id == "2"
        assert [p.id for p in await self.service.get_roster("2")] == ["p2"]
        assert await self.service.list_free_agents() == []

    @pytest.mark.asyncio
    async def test_assign_to_unknown_team(self):
        with pytest.raises(TeamNotFoundError):
            await self.service.assign_to_team("p2", "77")

    @pytest.mark.asyncio
    async def test_register_player(self):
        player = await self.service.register_player("u2", points_per_game=9.5)

        assert player.user_id == "u2"
        assert player.is_free_agent
        assert len(await self.service.get_all()) == 4

    @pytest.mark.asyncio
    async def test_register_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            await self.service.register_player("nobody")

    @pytest.mark.asyncio
    async def test_payment_summary(self):
        summary = await self.service.get_payment_summary("p1")
        assert summary.total_paid == 150.0
        assert summary.player_name == "Marcus Johnson"

    @pytest.mark.asyncio
    async def test_active_players(self):
        await self.store.create_player(Player(id="p4", user_id="u2", is_active=False))

        active = await self.service.list_active_players()
        assert sorted(p.id for p in active) == ["p1", "p2", "p3"]

    @pytest.mark.asyncio
    async def test_filter_by_team(self):
        response = await self.service.filter(team_id="1")
        assert response.success
        assert sorted(p.id for p in response.data) == ["p1", "p3"]

    @pytest.mark.asyncio
    async def test_failed_payment_retried_to_completed(self):
        await self.store.create_payment(
            Payment(id="pay2", player_id="p1", amount=50.0, status=PaymentStatus.FAILED.value)
        )
        assert (await self.service.get_payment_summary("p1")).total_failed == 50.0

        payment = await self.service.update_payment_status("pay2", "completed")

        assert payment.status == PaymentStatus.COMPLETED.value
        summary = await self.service.get_payment_summary("p1")
        assert summary.total_paid == 200.0
        assert summary.total_failed == 0.0

    @pytest.mark.asyncio
    async def test_unknown_payment_status_rejected(self):
        with pytest.raises(ValidationError):
            await self.service.update_payment_status("pay1", "refunded")

        payments = await self.store.list_payments()
        assert payments[0].status == PaymentStatus.COMPLETED.value

    @pytest.mark.asyncio
    async def test_unknown_payment(self):
        with pytest.raises(PaymentNotFoundError):
            await self.service.update_payment_status("nope", "pending")

    @pytest.mark.asyncio
    async def test_update_registration(self):
        player = await self.service.update_registration("p2", True, registration_fee_due=0.0)

        assert player.is_fully_registered
        assert player.registration_fee_due == 0.0

    @pytest.mark.asyncio
    async def test_negative_fee_rejected(self):
        with pytest.raises(ValidationError):
            await self.service.update_registration("p2", False, registration_fee_due=-10.0)
        assert not (await self.service.get_player("p2")).is_fully_registered

    @pytest.mark.asyncio
    async def test_remove_player(self):
        assert await self.service.remove_player("p2") is True

        with pytest.raises(PlayerNotFoundError):
            await self.service.get_player("p2")

    @pytest.mark.asyncio
    async def test_player_with_payments_kept(self):
        with pytest.raises(ValidationError):
            await self.service.remove_player("p1")
        assert (await self.service.get_player("p1")).id == "p1"
