"""
Back Office — FastAPI application.

Entry point for the API. All routers are registered here.
"""

from fastapi import FastAPI

from back_office.config import get_settings, configure_logging
from back_office.api.health import router as health_router
from back_office.api.customers import router as customers_router
from back_office.api.products import router as products_router
from back_office.api.sales import router as sales_router
from back_office.api.payments import router as payments_router
from back_office.api.productions import router as productions_router
from back_office.api.sales_returns import router as sales_returns_router
from back_office.api.expenses import router as expenses_router
from back_office.api.users import router as users_router
from back_office.api.reports import router as reports_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Sales, payments, production and returns with consistent dues and stock",
    debug=settings.DEBUG,
)

# Register routers
app.include_router(health_router)
app.include_router(customers_router)
app.include_router(products_router)
app.include_router(sales_router)
app.include_router(payments_router)
app.include_router(productions_router)
app.include_router(sales_returns_router)
app.include_router(expenses_router)
app.include_router(users_router)
app.include_router(reports_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
