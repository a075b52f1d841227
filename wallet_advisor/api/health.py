import asyncio
from typing import Any, Dict

from fastapi import APIRouter

from ..config import settings
from ..providers.base import Provider
from ..providers.defillama import DefiLlamaProvider
from ..providers.llm import get_available_providers
from ..services.balances import default_providers

router = APIRouter()

# A source without configuration is not a failure
_OK_STATUSES = ("healthy", "unavailable")


def _data_sources() -> Dict[str, Provider]:
    sources: Dict[str, Provider] = {p.name: p for p in default_providers(settings)}
    sources["defillama"] = DefiLlamaProvider(settings)
    return sources


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Report the status of every balance and price source plus LLM configuration"""

    sources = _data_sources()
    results = await asyncio.gather(*(p.health_check() for p in sources.values()))
    provider_status = dict(zip(sources.keys(), results))

    healthy = [name for name, status in provider_status.items() if status["status"] == "healthy"]
    all_ok = all(status["status"] in _OK_STATUSES for status in provider_status.values())

    return {
        "status": "healthy" if all_ok and healthy else "degraded",
        "version": settings.agent_version,
        "providers": provider_status,
        "llm": get_available_providers(),
        "available_providers": len(healthy),
        "total_providers": len(provider_status),
    }
