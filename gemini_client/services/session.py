"""HTTP session management."""

from curl_cffi.requests import AsyncSession
from loguru import logger


_session: AsyncSession | None = None


async def get_session() -> AsyncSession:
    """Get or create the async session shared by models and file managers."""
    global _session
    if _session is None:
        logger.debug("Creating shared HTTP session")
        _session = AsyncSession()
    return _session


async def close_session() -> None:
    """Close the shared async session."""
    global _session
    if _session is not None:
        await _session.close()
        _session = None
