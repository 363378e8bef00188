"""
main.py — FastAPI Entry Point for the Rewards Service

This module provides the REST API of the Kyron HR rewards storefront.
It serves the static gift card catalog, records gift card orders in the
in-memory ledger and lets the portal look them up again.

Responsibilities:
    • Serve the catalog and storefront search
    • Accept and validate order submissions
    • Look up recorded orders by reference and list them newest first
    • Expose the employee directory used to pick gift recipients
    • Provide system health information
"""

from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .catalog import CatalogStore
from .employees import EmployeeDirectory
from .errors import RewardsError, UnexpectedError
from .intake import OrderIntake
from .ledger import OrderLedger
from .logging_config import get_logger, setup_logging
from .models import OrderSubmission

log = get_logger(__name__)


def create_app(ledger=None, catalog_path=None, directory=None):
    """
    Builds the FastAPI application with its own state.

    Args:
        ledger (OrderLedger, optional): Order store; a fresh one by default.
        catalog_path (str | Path, optional): Catalog file; `CATALOG_PATH` by default.
        directory (EmployeeDirectory, optional): Recipient directory; mock employees by default.

    Returns:
        FastAPI: The configured application. Its `state` carries `ledger`,
        `intake` and `directory`; the catalog is loaded on first use and cached.
    """
    app = FastAPI(title="Kyron HR Rewards Service")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    app.state.ledger = ledger if ledger is not None else OrderLedger()
    app.state.intake = OrderIntake(app.state.ledger)
    app.state.directory = directory if directory is not None else EmployeeDirectory()
    app.state.catalog_path = catalog_path or config.CATALOG_PATH
    app.state.catalog = None

    def get_catalog():
        if app.state.catalog is None:
            app.state.catalog = CatalogStore.from_path(app.state.catalog_path)
        return app.state.catalog

    @app.exception_handler(RewardsError)
    async def rewards_error_handler(request: Request, exc: RewardsError):
        if exc.status_code >= 500:
            log.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(".".join(str(p) for p in err["loc"] if p != "body") or "body" for err in exc.errors())
        return JSONResponse(status_code=400, content={"error": f"Invalid request fields: {fields}"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        log.critical(f"{request.method} {request.url.path} crashed: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.on_event("startup")
    def on_startup():
        """Loads the catalog eagerly so a broken catalog file shows up in the log at boot."""
        log.info("Rewards service starting...")
        try:
            get_catalog()
        except UnexpectedError:
            log.warning("Catalog could not be loaded at startup; /api/catalog will report errors.")

    # Health Check Endpoint
    @app.get("/api/health")
    def health_check():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    # --- Catalog ---
    @app.get("/api/catalog")
    def read_catalog():
        """Returns the full static catalog, or 500 if the file cannot be read."""
        return get_catalog().to_dict()

    @app.get("/api/catalog/brands")
    def search_brands(search: str = "", category: str = ""):
        brands = get_catalog().search(search, category)
        return {"brands": [brand.model_dump(mode="json") for brand in brands], "total": len(brands)}

    # --- Orders ---
    @app.post("/api/orders")
    def create_order(submission: OrderSubmission):
        """
        Records a gift card order.

        Returns:
            dict: The created order with status COMPLETE.

        Raises:
            MissingFieldError / ValidationError (400): If the submission is incomplete.
            UnexpectedError (500): On any other failure while recording the order.
        """
        try:
            order = app.state.intake.submit(submission)
        except RewardsError:
            raise
        except Exception as e:
            log.critical(f"Unexpected error while creating order: {e}", exc_info=True)
            raise UnexpectedError("Failed to create order") from e
        return order.model_dump(mode="json")

    @app.get("/api/orders/{referenceOrderId}")
    def read_order(referenceOrderId: str):
        return app.state.ledger.get(referenceOrderId).model_dump(mode="json")

    @app.get("/api/orders")
    def list_orders():
        orders = app.state.ledger.list()
        return {"orders": [order.model_dump(mode="json") for order in orders], "total": len(orders)}

    # --- Employees ---
    @app.get("/api/employees")
    def list_employees(search: str = "", department: str = ""):
        employees = app.state.directory.search(search, department)
        return {"employees": [e.model_dump(mode="json") for e in employees], "total": len(employees)}

    @app.get("/api/employees/birthdays")
    def upcoming_birthdays(window: str = "week"):
        employees = app.state.directory.upcoming_birthdays(window)
        return {"employees": [e.model_dump(mode="json") for e in employees], "total": len(employees)}

    @app.get("/api/employees/{employee_id}")
    def read_employee(employee_id: str):
        return app.state.directory.get(employee_id).model_dump(mode="json")

    return app


# Initialization
# Configure logging and initialize the FastAPI app
setup_logging()
app = create_app()


if __name__ == "__main__":
    log.info(f"Rewards API listening on http://{config.HOST}:{config.PORT}/api")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
