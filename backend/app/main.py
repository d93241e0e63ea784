from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# ========== Menu ==========
from modules.menu.routes.menu_routes import router as menu_router

# ========== Orders ==========
from modules.orders.routes.order_routes import router as order_router

# ========== Kitchen Display System (KDS) ==========
from modules.kds.routes.kds_routes import router as kds_router

configure_startup_logging()

app = FastAPI(
    title="Restaurant Order Lifecycle API",
    description="""
    Order lifecycle backend for a restaurant point of sale.

    ## Features

    * **Orders** - Create orders from a cart, track order and item status
    * **Kitchen Display** - Kitchen queue with wait times, kitchen actions
      and sound cues
    * **Menu** - Menu items with prices, preparation times and availability
    """,
    version="1.0.0",
    debug=settings.debug,
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(menu_router)
app.include_router(order_router)
app.include_router(kds_router)


@app.on_event("startup")
async def startup_event():
    """Initialize the database on application startup"""
    run_startup_checks()


@app.get("/")
def read_root():
    return {"message": "Restaurant order lifecycle backend is running"}
