import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import run_startup_checks, configure_startup_logging

# ========== Restaurants, Floor Plans & Hours ==========
from modules.core.routes.core_routes import (
    restaurant_router,
    floor_plan_router,
    operating_hours_router,
)

# ========== Table Layout ==========
from modules.tables.routers.table_layout_router import router as table_layout_router

# ========== Menu ==========
from modules.menu.routes.menu_routes import router as menu_router

# ========== Orders Management ==========
from modules.orders.routes.order_routes import (
    router as order_router,
    table_router as order_table_router,
    admin_router as order_admin_router,
)

configure_startup_logging()

app = FastAPI(
    title="TableFlow - Restaurant Floor & Ordering API",
    description="""
    Floor layout and order lifecycle API for restaurants.

    ## Features

    * **Floor Plans** - Sized grids for each physical level of the restaurant
    * **Table Layout** - Automatic grid placement, numbering and QR codes
    * **Menu Management** - Menu items with prices captured at order time
    * **Order Management** - One active order per table, linear status lifecycle
    * **Payments** - Pending payment on completion, settled when paid
    * **Dashboard** - Live occupancy and today's revenue
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========== Include all routers ==========
app.include_router(restaurant_router)
app.include_router(floor_plan_router)
app.include_router(operating_hours_router)
app.include_router(table_layout_router)
app.include_router(menu_router)
app.include_router(order_router)
app.include_router(order_table_router)
app.include_router(order_admin_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
async def startup_event():
    """Validate configuration and database on application startup"""
    run_startup_checks()


def run():
    """Serve the API with uvicorn on the configured host and port"""
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
