from typing import Optional

from fastapi import FastAPI

from shared.config.resources import ServiceResources, install_resources
from shared.config.settings import Settings
from shared.errors import register_error_handlers
from shared.observability import setup_observability

from .models import Order, OrderItem  # Import to register with Base
from .router import router, public_router


def create_order_app(settings: Optional[Settings] = None, resources: Optional[ServiceResources] = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Order Service", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "order_service", settings)
    register_error_handlers(app)

    app.include_router(public_router)
    app.include_router(router)

    install_resources(app, settings, resources, tables=[Order.__table__, OrderItem.__table__])
    return app


order_app = create_order_app()
