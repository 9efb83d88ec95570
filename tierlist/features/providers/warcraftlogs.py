"""Warcraft Logs providers for raid and Mythic+ character rankings.

Live mode authenticates with an OAuth client-credentials grant, lists the
encounters of a zone, then pages through ``characterRankings`` for every
encounter with bounded concurrency.
"""

import asyncio
import base64
import json
from abc import abstractmethod
from typing import Any, Dict, List, Optional

import structlog

from tierlist.core.config import Settings
from tierlist.core.enums import Mode
from tierlist.core.errors import UpstreamError
from tierlist.core.http import CachedHttpClient, require_credentials
from tierlist.features.app_config.schemas import AppConfig
from .base import PerformanceProvider, gather_limited
from .schemas import PerformanceEntry
from .transformers import transform_ranking_rows

logger = structlog.get_logger(__name__)

OAUTH_TOKEN_TTL_SECONDS = 300

ZONE_QUERY = """
query ZoneEncounters($zoneID: Int!) {
  worldData {
    zone(id: $zoneID) {
      encounters {
        id
        name
      }
    }
  }
}
"""

RAID_RANKINGS_QUERY = """
query EncounterRankings($encounterID: Int!, $difficulty: Int!, $page: Int!) {
  worldData {
    encounter(id: $encounterID) {
      characterRankings(difficulty: $difficulty, partition: 1, page: $page, includeCombatantInfo: true)
    }
  }
}
"""

MPLUS_RANKINGS_QUERY = """
query EncounterMPlusRankings($encounterID: Int!, $difficulty: Int!, $page: Int!, $bracket: Int!) {
  worldData {
    encounter(id: $encounterID) {
      characterRankings(
        difficulty: $difficulty,
        bracket: $bracket,
        partition: 1,
        page: $page,
        includeCombatantInfo: true
      )
    }
  }
}
"""


def _dig(payload: Any, *path: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing."""
    for key in path:
        if not isinstance(payload, dict):
            return None
        payload = payload.get(key)
    return payload


class WarcraftLogsClient:
    """Thin GraphQL client for the Warcraft Logs v2 API."""

    def __init__(self, http: CachedHttpClient, settings: Settings):
        """Initialize the client with the shared HTTP client and settings."""
        self.http = http
        self.settings = settings
        self.base_url = settings.warcraftlogs_base_url.rstrip("/")

    async def get_access_token(self, config: AppConfig) -> str:
        """Exchange client credentials for a bearer token (cached briefly)."""
        client_id = self.settings.warcraftlogs_client_id
        client_secret = self.settings.warcraftlogs_client_secret
        require_credentials(client_id, client_secret, mock_mode=self.settings.mock_mode)

        creds = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
        response = await self.http.fetch_with_cache(
            f"{self.base_url}/oauth/token",
            method="POST",
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Authorization": f"Basic {creds}",
            },
            body="grant_type=client_credentials",
            cache_namespace="wcl-oauth",
            cache_ttl_seconds=OAUTH_TOKEN_TTL_SECONDS,
            retry_count=config.fetch.retry_count,
            retry_base_delay_ms=config.fetch.retry_base_delay_ms,
        )

        token = response.get("access_token") if isinstance(response, dict) else None
        if not token:
            raise UpstreamError("OAuth token response did not include an access token")
        return token

    async def graphql(
        self,
        token: str,
        query: str,
        variables: Dict[str, Any],
        namespace: str,
        config: AppConfig,
    ) -> Any:
        """Run a GraphQL query through the caching client."""
        return await self.http.fetch_with_cache(
            f"{self.base_url}/api/v2/client",
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
            },
            body=json.dumps({"query": query, "variables": variables}),
            cache_namespace=namespace,
            cache_ttl_seconds=config.fetch.cache_ttl_seconds,
            retry_count=config.fetch.retry_count,
            retry_base_delay_ms=config.fetch.retry_base_delay_ms,
        )

    async def get_zone_encounters(
        self, token: str, zone_id: int, namespace: str, config: AppConfig
    ) -> List[Dict[str, Any]]:
        """List the encounters of a zone."""
        zone = await self.graphql(token, ZONE_QUERY, {"zoneID": zone_id}, namespace, config)
        encounters = _dig(zone, "data", "worldData", "zone", "encounters") or []
        return [
            encounter
            for encounter in encounters
            if isinstance(encounter, dict) and "id" in encounter
        ]

    async def get_ranking_rows(
        self,
        token: str,
        query: str,
        variables: Dict[str, Any],
        namespace: str,
        config: AppConfig,
    ) -> List[Any]:
        """Fetch one page of character rankings for one encounter."""
        response = await self.graphql(token, query, variables, namespace, config)
        rankings = _dig(
            response, "data", "worldData", "encounter", "characterRankings", "rankings"
        )
        return rankings if isinstance(rankings, list) else []


class _WarcraftLogsRankingsProvider(PerformanceProvider):
    """Shared zone -> encounters -> ranking pages fan-out."""

    rankings_query: str
    namespace_prefix: str

    def __init__(self, http: CachedHttpClient, settings: Optional[Settings] = None):
        super().__init__(http, settings)
        self.client = WarcraftLogsClient(http, self.settings)

    @abstractmethod
    def _zone_id(self) -> int:
        pass

    @abstractmethod
    def _pages(self) -> List[int]:
        pass

    @abstractmethod
    def _ranking_variables(self, encounter_id: int, page: int) -> Dict[str, Any]:
        pass

    async def _fetch_live(self, config: AppConfig) -> list[PerformanceEntry]:
        token = await self.client.get_access_token(config)
        zone_id = self._zone_id()
        encounters = await self.client.get_zone_encounters(
            token, zone_id, f"{self.namespace_prefix}-zone", config
        )
        if not encounters:
            logger.warning(
                "No encounters returned from Warcraft Logs zone query",
                zone_id=zone_id,
                mode=self.mode.value,
            )
            return []

        semaphore = asyncio.Semaphore(config.fetch.api_concurrency)
        pages = self._pages()
        requests = [
            self.client.get_ranking_rows(
                token,
                self.rankings_query,
                self._ranking_variables(encounter["id"], page),
                f"{self.namespace_prefix}-rankings-{encounter['id']}-{page}",
                config,
            )
            for encounter in encounters
            for page in pages
        ]
        pages_of_rows = await gather_limited(semaphore, requests)

        base_url = self.client.base_url
        entries = [
            entry
            for rows in pages_of_rows
            for entry in transform_ranking_rows(rows, self.mode, base_url)
        ]

        logger.info(
            "Fetched Warcraft Logs rankings",
            mode=self.mode.value,
            zone_id=zone_id,
            encounter_count=len(encounters),
            pages=len(pages),
            row_count=len(entries),
        )
        return entries


class WarcraftLogsRaidProvider(_WarcraftLogsRankingsProvider):
    """Raid parses from Warcraft Logs."""

    mode = Mode.RAID
    source_name = "warcraftlogs"
    fixture_name = "raid.json"
    rankings_query = RAID_RANKINGS_QUERY
    namespace_prefix = "wcl"

    def _zone_id(self) -> int:
        return self.settings.warcraftlogs_zone_id

    def _pages(self) -> List[int]:
        return [1, 2]

    def _ranking_variables(self, encounter_id: int, page: int) -> Dict[str, Any]:
        return {
            "encounterID": encounter_id,
            "difficulty": self.settings.warcraftlogs_difficulty,
            "page": page,
        }


class WarcraftLogsMythicPlusProvider(_WarcraftLogsRankingsProvider):
    """Mythic+ dungeon rankings from Warcraft Logs."""

    mode = Mode.MYTHIC_PLUS
    source_name = "warcraftlogs_mythic_plus"
    fixture_name = "mythic-plus.json"
    rankings_query = MPLUS_RANKINGS_QUERY
    namespace_prefix = "wcl-mplus"

    def _zone_id(self) -> int:
        return self.settings.warcraftlogs_mplus_zone_id

    def _pages(self) -> List[int]:
        return list(range(1, self.settings.warcraftlogs_mplus_pages + 1))

    def _ranking_variables(self, encounter_id: int, page: int) -> Dict[str, Any]:
        return {
            "encounterID": encounter_id,
            "difficulty": self.settings.warcraftlogs_mplus_difficulty,
            "bracket": self.settings.warcraftlogs_mplus_bracket,
            "page": page,
        }
