from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import entrypoints, health
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .types import AgentManifest, EntrypointInfo

setup_logging()

app = FastAPI(
    title="Wallet Exposure Advisor",
    description=settings.agent_description,
    version=settings.agent_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(entrypoints.router, tags=["Entrypoints"])


@app.get("/", response_model=AgentManifest)
async def root() -> AgentManifest:
    """Agent manifest: identity, entrypoints and pricing"""
    return AgentManifest(
        name=settings.agent_name,
        version=settings.agent_version,
        description=settings.agent_description,
        payments_receivable_address=settings.payments_receivable_address or None,
        entrypoints=[
            EntrypointInfo(
                key="analyze-wallet",
                description=(
                    "Analyze a wallet's token exposure and get AI-powered rebalancing advice. "
                    "Supports Ethereum, Base, Arbitrum, Hyperliquid and Starknet, or all chains at once."
                ),
                price=settings.default_price,
                network=settings.payments_network,
            ),
            EntrypointInfo(key="health", description="Health check endpoint"),
        ],
        links={"docs": "/docs", "health": "/healthz"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "wallet_advisor.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
