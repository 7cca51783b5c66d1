from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...core.config import BaseConfig, config as default_config
from ...core.exceptions import ConfigurationError
from ...core.logging import get_logger
from .adapters.base import StorageAdapter
from .adapters.local_adapter import LocalStorageAdapter
from .adapters.remote_adapter import RemoteStorageAdapter
from .supabase_client import SupabaseClient

logger = get_logger(__name__)


class StorageAdapterFactory:
    """Factory for creating storage adapters based on the configured storage mode."""

    @staticmethod
    def get_adapter(
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        settings: Optional[BaseConfig] = None,
        client: Optional[SupabaseClient] = None,
    ) -> StorageAdapter:
        """
        Get the adapter that serves normal reads and writes.

        Args:
            session_factory: Local session factory (required in local mode)
            settings: Configuration; defaults to the global config
            client: Pre-built Supabase client (remote mode)

        Returns:
            LocalStorageAdapter in local mode, RemoteStorageAdapter in remote mode.
        """
        settings = settings or default_config
        if settings.STORAGE_MODE == "remote":
            return StorageAdapterFactory.get_remote_adapter(settings, client)

        if session_factory is None:
            raise ConfigurationError("Local storage mode needs a database session factory")
        return LocalStorageAdapter(session_factory, locale=settings.DISPLAY_LOCALE)

    @staticmethod
    def get_remote_adapter(
        settings: Optional[BaseConfig] = None,
        client: Optional[SupabaseClient] = None,
    ) -> RemoteStorageAdapter:
        settings = settings or default_config
        if client is None:
            if not settings.remote_configured:
                raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for remote storage")
            client = SupabaseClient(
                settings.SUPABASE_URL,
                settings.SUPABASE_ANON_KEY,
                timeout=settings.SUPABASE_TIMEOUT,
            )
        return RemoteStorageAdapter(
            client,
            locale=settings.DISPLAY_LOCALE,
            entries_table=settings.SUPABASE_TABLE_ENTRIES,
            tags_table=settings.SUPABASE_TABLE_TAGS,
        )

    @staticmethod
    def get_sync_target(
        settings: Optional[BaseConfig] = None,
        client: Optional[SupabaseClient] = None,
    ) -> Optional[RemoteStorageAdapter]:
        """Remote adapter for reconciliation, or None when no remote is configured."""
        settings = settings or default_config
        if settings.STORAGE_MODE != "local":
            return None
        if client is None and not settings.remote_configured:
            logger.debug("No remote store configured, reconciliation disabled")
            return None
        return StorageAdapterFactory.get_remote_adapter(settings, client)
