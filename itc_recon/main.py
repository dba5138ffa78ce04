import logging
from typing import Optional
from fastapi import FastAPI
from itc_recon.core.config import settings
from itc_recon.db.memory import Stores
from itc_recon.api import health, invoices, returns, reconciliation, compliance, reports, explanation

def create_app(stores: Optional[Stores] = None) -> FastAPI:
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME)
    # Storage collaborators live on the app, never at module level
    app.state.stores = stores or Stores()

    # Include routers
    app.include_router(health.router)
    app.include_router(invoices.router)
    app.include_router(returns.router)
    app.include_router(reconciliation.router)
    app.include_router(compliance.router)
    app.include_router(reports.router)
    app.include_router(explanation.router)
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
