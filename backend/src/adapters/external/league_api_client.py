"""
HTTP client for the remote league service.
Implements LeagueRepository over the service's JSON API with retry and optional Redis caching.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from config.settings import settings
from core.exceptions import (
    APIConnectionError, APITimeoutError, APINotFoundError, APIServerError,
    APIResponseError, ConfigurationError, ErrorContext, TeamNotFoundError, GameNotFoundError,
    PlayerNotFoundError, UserNotFoundError, PaymentNotFoundError
)
from core.error_handler import with_api_error_handling
from core.utils import APIResponseProcessor, format_datetime
from adapters.cache.redis_client import RedisCache
from adapters.repository.base import LeagueRepository
from domain.models.base import serialize_value, to_camel_case
from domain.models.game import Game, GameStatus
from domain.models.payment import Payment
from domain.models.player import Player, User
from domain.models.statistics import GameDetails
from domain.models.team import Team

logger = logging.getLogger(__name__)


@dataclass
class APIResponse:
    """Standardized API response structure."""
    data: Any
    success: bool
    status: int = 200
    error: Optional[str] = None
    meta: Optional[Dict] = None


# Endpoints whose cached reads go stale after a write to each resource
INVALIDATES = {
    'team': ('/api/team/list', '/api/team', '/api/team/standings'),
    'game': ('/api/game/list', '/api/game', '/api/team/list', '/api/team', '/api/team/standings'),
    'player': ('/api/player/list', '/api/player', '/api/player/free-agents'),
    'user': ('/api/user/list', '/api/user'),
    'payment': ('/api/payment/list', '/api/payment'),
}


class LeagueAPIClient(LeagueRepository):
    """
    League service client.
    Use as an async context manager so the HTTP session (and cache) are opened and closed.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        cache: Optional[RedisCache] = None,
        enable_cache: Optional[bool] = None
    ):
        self.base_url = (base_url or settings.league_api_base_url).rstrip('/')
        self.api_token = api_token if api_token is not None else settings.league_api_token
        self.timeout = settings.api_request_timeout
        self.user_agent = settings.api_user_agent

        self.session: Optional[aiohttp.ClientSession] = None

        # Cache configuration
        self.cache_enabled = settings.cache_enabled if enable_cache is None else enable_cache
        self.redis_cache = (cache or RedisCache()) if self.cache_enabled else None

        if self.cache_enabled:
            logger.info("Redis cache enabled for league API client")
        else:
            logger.info("Redis cache disabled for league API client")

    async def __aenter__(self):
        """Async context manager entry."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"

        connector = aiohttp.TCPConnector(limit=10, limit_per_host=5)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        self.session = aiohttp.ClientSession(
            headers=headers,
            connector=connector,
            timeout=timeout
        )

        if self.redis_cache:
            await self.redis_cache.connect()

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

        if self.redis_cache:
            await self.redis_cache.disconnect()

    @with_api_error_handling(max_retries=settings.max_retries)
    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Send one HTTP request and map failures onto the API exception types."""
        if self.session is None:
            raise ConfigurationError("session", "LeagueAPIClient must be used as an async context manager")

        url = f"{self.base_url}{path}"
        context = ErrorContext(
            operation=f"{method} {path}",
            entity=path.strip('/').split('/')[1] if path.count('/') > 1 else None,
            endpoint=path,
            parameters=params,
        )

        try:
            logger.debug(f"{method} {url} params={params}")
            async with self.session.request(method, url, params=params, json=payload) as response:
                if response.status == 404:
                    raise APINotFoundError(resource=path, context=context)

                if response.status >= 400:
                    response_data = None
                    try:
                        response_data = await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError):
                        response_data = await response.text()
                    raise APIServerError(
                        status_code=response.status,
                        response_data=response_data,
                        context=context
                    )

                try:
                    data = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise APIResponseError(
                        expected_format="json",
                        actual_content=await response.text(),
                        context=context
                    ) from e

                return APIResponse(data=data, success=True, status=response.status, meta={"cached": False})

        except asyncio.TimeoutError as e:
            raise APITimeoutError(timeout=self.timeout, context=context) from e
        except aiohttp.ClientError as e:
            raise APIConnectionError(url=url, context=context, original_error=e) from e

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, use_cache: bool = True) -> Any:
        """GET a payload, served from cache when possible."""
        if use_cache and self.redis_cache:
            cached = await self.redis_cache.get(path, params)
            if cached is not None:
                logger.debug(f"Cache HIT for {path}")
                return cached

        response = await self._request("GET", path, params=params)

        if use_cache and self.redis_cache:
            await self.redis_cache.set(path, response.data, params)
        return response.data

    async def _write(self, method: str, path: str, resource: str, payload: Optional[Dict] = None) -> Any:
        response = await self._request(method, path, payload=payload)
        await self._invalidate(resource)
        return response.data

    async def _invalidate(self, resource: str):
        if not self.redis_cache:
            return
        for endpoint in INVALIDATES.get(resource, ()):
            await self.redis_cache.invalidate_endpoint(endpoint)

    async def _get_one(self, path: str, entity_id: str, not_found: type) -> Dict[str, Any]:
        try:
            data = await self._get(path, {"id": entity_id})
        except APINotFoundError as e:
            raise not_found(entity_id) from e
        return APIResponseProcessor.extract_object(data)

    @staticmethod
    def _payload(entity, *exclude: str) -> Dict[str, Any]:
        payload = entity.to_dict()
        for key in ('createdAt', 'updatedAt') + exclude:
            payload.pop(key, None)
        return payload

    @staticmethod
    def _changes(changes: Dict[str, Any]) -> Dict[str, Any]:
        return {to_camel_case(name): serialize_value(value) for name, value in changes.items()}

    # Teams

    async def list_teams(self) -> List[Team]:
        data = await self._get('/api/team/list')
        return [Team.from_api_response(item) for item in APIResponseProcessor.extract_list(data)]

    async def get_team(self, team_id: str) -> Team:
        return Team.from_api_response(await self._get_one('/api/team', team_id, TeamNotFoundError))

    async def create_team(self, team: Team) -> Team:
        data = await self._write("POST", '/api/team', 'team', self._payload(team))
        return Team.from_api_response(APIResponseProcessor.extract_object(data))

    async def update_team(self, team_id: str, **changes) -> Team:
        payload = {'id': team_id, **self._changes(changes)}
        data = await self._write("PUT", '/api/team', 'team', payload)
        return Team.from_api_response(APIResponseProcessor.extract_object(data))

    async def delete_team(self, team_id: str) -> bool:
        data = await self._write("DELETE", f'/api/team/{team_id}', 'team')
        return bool(APIResponseProcessor.extract_object(data).get('success', True))

    # Games

    async def list_games(self) -> List[Game]:
        data = await self._get('/api/game/list')
        return [Game.from_api_response(item) for item in APIResponseProcessor.extract_list(data)]

    async def get_game(self, game_id: str) -> Game:
        return Game.from_api_response(await self._get_one('/api/game', game_id, GameNotFoundError))

    async def create_game(self, game: Game) -> Game:
        payload = self._payload(game, 'homeScore', 'awayScore', 'details')
        data = await self._write("POST", '/api/game', 'game', payload)
        return Game.from_api_response(APIResponseProcessor.extract_object(data))

    async def update_game(self, game_id: str, game_time: Optional[datetime] = None, **changes) -> Game:
        if game_time is not None and not changes:
            payload = {'id': game_id, 'gameTime': format_datetime(game_time)}
            data = await self._write("PATCH", '/api/game/time', 'game', payload)
        else:
            if game_time is not None:
                changes['game_time'] = game_time
            data = await self._write("PUT", '/api/game', 'game', {'id': game_id, **self._changes(changes)})
        return Game.from_api_response(APIResponseProcessor.extract_object(data))

    async def delete_game(self, game_id: str) -> bool:
        data = await self._write("DELETE", f'/api/game/{game_id}', 'game')
        return bool(APIResponseProcessor.extract_object(data).get('success', True))

    async def submit_game_result(
        self,
        game_id: str,
        home_score: int,
        away_score: int,
        details: Optional[GameDetails] = None
    ) -> Game:
        """Validate locally, then let the service record the result and update records."""
        payload = {
            'id': game_id,
            'homeScore': home_score,
            'awayScore': away_score,
            'status': GameStatus.COMPLETED.value
        }
        if details is not None:
            details.validate_against(home_score, away_score)
            payload['details'] = details.to_dict()

        data = await self._write("PUT", '/api/game/status', 'game', payload)
        return Game.from_api_response(APIResponseProcessor.extract_object(data))

    # Players and users

    async def list_players(self) -> List[Player]:
        data = await self._get('/api/player/list')
        return [Player.from_api_response(item) for item in APIResponseProcessor.extract_list(data)]

    async def list_free_agents(self) -> List[Player]:
        data = await self._get('/api/player/free-agents')
        return [Player.from_api_response(item) for item in APIResponseProcessor.extract_list(data)]

    async def get_player(self, player_id: str) -> Player:
        return Player.from_api_response(await self._get_one('/api/player', player_id, PlayerNotFoundError))

    async def create_player(self, player: Player) -> Player:
        data = await self._write("POST", '/api/player', 'player', self._payload(player))
        return Player.from_api_response(APIResponseProcessor.extract_object(data))

    async def assign_player_to_team(
        self,
        player_id: str,
        team_id: Optional[str],
        jersey_number: Optional[int] = None
    ) -> Player:
        payload = {'playerId': player_id, 'teamId': team_id}
        if jersey_number is not None:
            payload['jerseyNumber'] = jersey_number
        data = await self._write("PATCH", '/api/player/team', 'player', payload)
        return Player.from_api_response(APIResponseProcessor.extract_object(data))

    async def update_player_registration(
        self,
        player_id: str,
        is_fully_registered: bool,
        registration_fee_due: Optional[float] = None
    ) -> Player:
        payload = {'playerId': player_id, 'isFullyRegistered': is_fully_registered}
        if registration_fee_due is not None:
            payload['registrationFeeDue'] = registration_fee_due
        data = await self._write("PATCH", '/api/player/registration', 'player', payload)
        return Player.from_api_response(APIResponseProcessor.extract_object(data))

    async def delete_player(self, player_id: str) -> bool:
        data = await self._write("DELETE", f'/api/player/{player_id}', 'player')
        return bool(APIResponseProcessor.extract_object(data).get('success', True))

    async def list_users(self) -> List[User]:
        data = await self._get('/api/user/list')
        return [User.from_api_response(item) for item in APIResponseProcessor.extract_list(data)]

    async def get_user(self, user_id: str) -> User:
        return User.from_api_response(await self._get_one('/api/user', user_id, UserNotFoundError))

    async def create_user(self, user: User) -> User:
        data = await self._write("POST", '/api/user', 'user', self._payload(user))
        return User.from_api_response(APIResponseProcessor.extract_object(data))

    async def update_user(self, user_id: str, **changes) -> User:
        data = await self._write("PUT", '/api/user', 'user', {'id': user_id, **self._changes(changes)})
        return User.from_api_response(APIResponseProcessor.extract_object(data))

    async def delete_user(self, user_id: str) -> bool:
        data = await self._write("DELETE", f'/api/user/{user_id}', 'user')
        return bool(APIResponseProcessor.extract_object(data).get('success', True))

    # Payments

    async def list_payments(self) -> List[Payment]:
        data = await self._get('/api/payment/list')
        return [Payment.from_api_response(item) for item in APIResponseProcessor.extract_list(data)]

    async def create_payment(self, payment: Payment) -> Payment:
        data = await self._write("POST", '/api/payment', 'payment', self._payload(payment))
        return Payment.from_api_response(APIResponseProcessor.extract_object(data))

    async def update_payment_status(self, payment_id: str, status: str) -> Payment:
        try:
            data = await self._write("PATCH", '/api/payment/status', 'payment', {'id': payment_id, 'status': status})
        except APINotFoundError as e:
            raise PaymentNotFoundError(payment_id) from e
        return Payment.from_api_response(APIResponseProcessor.extract_object(data))

    async def delete_payment(self, payment_id: str) -> bool:
        data = await self._write("DELETE", f'/api/payment/{payment_id}', 'payment')
        return bool(APIResponseProcessor.extract_object(data).get('success', True))

    # Cache management methods

    async def clear_cache(self):
        """Clear every cached league response."""
        if self.redis_cache:
            await self.redis_cache.clear_all()

    async def get_cache_stats(self) -> Dict[str, Any]:
        if self.redis_cache:
            return await self.redis_cache.get_cache_stats()
        return {}
