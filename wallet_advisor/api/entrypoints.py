import logging

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..errors import InvalidAddressError, PortfolioUnavailableError, UnsupportedChainError
from ..tools.portfolio import analyze_wallet
from ..types import AnalyzeWalletRequest, AnalyzeWalletResponse, HealthOutput, HealthResponse

router = APIRouter(prefix="/entrypoints")
_logger = logging.getLogger(__name__)


@router.post("/analyze-wallet/invoke", response_model=AnalyzeWalletResponse)
async def analyze_wallet_endpoint(request: AnalyzeWalletRequest) -> AnalyzeWalletResponse:
    """Analyze a wallet's token exposure and return rebalancing advice"""

    address = request.input.address
    chain = request.input.chain
    _logger.info("[analyze-wallet] Analyzing %s on %s...", address, chain)

    try:
        output = await analyze_wallet(address, chain)
    except (UnsupportedChainError, InvalidAddressError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PortfolioUnavailableError as e:
        _logger.error("[analyze-wallet] %s", e)
        raise HTTPException(status_code=502, detail=f"Failed to analyze wallet: {e}")
    except Exception as e:
        _logger.exception("[analyze-wallet] Unexpected error")
        raise HTTPException(status_code=500, detail=f"Failed to analyze wallet: {e}")

    _logger.info("[analyze-wallet] Analysis complete. Total: $%.2f", output.total_value_usd)
    return AnalyzeWalletResponse(output=output)


@router.post("/health/invoke", response_model=HealthResponse)
async def health_entrypoint() -> HealthResponse:
    """Free liveness entrypoint"""
    return HealthResponse(output=HealthOutput(status="healthy", version=settings.agent_version))
