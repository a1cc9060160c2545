from typing import Optional

from fastapi import FastAPI

from shared.config.resources import ServiceResources, install_resources
from shared.config.settings import Settings
from shared.errors import register_error_handlers
from shared.observability import setup_observability

from .models import Merchant  # Import to register with Base
from .router import router, public_router


def create_merchant_app(settings: Optional[Settings] = None, resources: Optional[ServiceResources] = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Merchant Service", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "merchant_service", settings)
    register_error_handlers(app)

    app.include_router(public_router)
    app.include_router(router)

    install_resources(app, settings, resources, tables=[Merchant.__table__])
    return app


merchant_app = create_merchant_app()
