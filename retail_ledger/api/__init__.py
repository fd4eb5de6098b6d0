"""
Retail Ledger API Application Factory
"""

from fastapi import FastAPI

from .. import __version__
from .transactions import router as transactions_router
from .interest_rules import router as interest_rules_router
from .statements import router as statements_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Retail Ledger API",
        description="Deposits, withdrawals, interest rules and monthly statements",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])
    app.include_router(interest_rules_router, prefix="/interest-rules", tags=["Interest Rules"])
    app.include_router(statements_router, prefix="/statements", tags=["Statements"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "retail_ledger_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Retail Ledger API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "transactions": "/transactions",
                "interest_rules": "/interest-rules",
                "statements": "/statements/{account_id}?month=YYYYMM",
            }
        }

    return app


def run_server(host: str = "0.0.0.0", port: int = 8090) -> None:
    """Serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port, access_log=False)
