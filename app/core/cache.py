"""Sistema de cache Redis async"""
import json
from typing import Optional, Any, Iterable
import logging
from redis.asyncio import Redis, ConnectionPool
from app.core.config import settings

logger = logging.getLogger(__name__)


class CacheManager:
    """Gerenciador de cache Redis async para relatórios de estatísticas"""

    def __init__(self, enabled: Optional[bool] = None):
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self.enabled = settings.CACHE_ENABLED if enabled is None else enabled

    async def _get_client(self) -> Optional[Redis]:
        """Obtém cliente Redis (lazy initialization)"""
        if not self.enabled:
            return None
        if self._client:
            return self._client

        try:
            self._pool = ConnectionPool(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
                health_check_interval=30,
                max_connections=50,
            )
            client = Redis(connection_pool=self._pool)
            await client.ping()
            self._client = client
            logger.info("Redis conectado com sucesso")
            return self._client
        except Exception as e:
            logger.error(f"Erro ao conectar Redis: {e}")
            return None

    async def get(self, key: str) -> Optional[Any]:
        client = await self._get_client()
        if not client:
            return None

        try:
            value = await client.get(key)
            return json.loads(value) if value else None
        except Exception as e:
            logger.warning(f"Erro ao ler cache {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        client = await self._get_client()
        if not client:
            return False

        try:
            serialized = json.dumps(value, default=str)
            return await client.setex(key, ttl or settings.CACHE_TTL, serialized)
        except Exception as e:
            logger.warning(f"Erro ao escrever cache {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Remove todas as chaves que correspondem ao padrão"""
        client = await self._get_client()
        if not client:
            return 0

        try:
            keys = [key async for key in client.scan_iter(match=pattern)]
            return await client.delete(*keys) if keys else 0
        except Exception as e:
            logger.warning(f"Erro ao deletar padrão {pattern}: {e}")
            return 0

    async def invalidate_statistics(self, match_id: int, player_ids: Iterable[int] = ()) -> None:
        """Invalida relatórios afetados por novas estatísticas da partida"""
        await self.delete_pattern(f"stats:match:{match_id}")
        await self.delete_pattern("stats:team:*")
        for player_id in set(player_ids):
            await self.delete_pattern(f"stats:player:{player_id}:*")

    async def close(self):
        """Fecha conexões Redis"""
        if self._client:
            await self._client.close()
        if self._pool:
            await self._pool.disconnect()


# Instância global do cache
cache = CacheManager()


def report_cache_key(kind: str, *parts) -> str:
    """Ex.: report_cache_key("player", 7, "2024-2025") -> "stats:player:7:2024-2025" """
    return ":".join(["stats", kind] + [str(part) for part in parts])
