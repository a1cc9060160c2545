"""
Single-process cluster: every service mounted under its gateway prefix.

Mounted apps do not receive startup/shutdown events, so the cluster opens one
set of resources for all of them and hands it to each service app.
"""
from typing import Optional

from fastapi import FastAPI

from shared.config.resources import ServiceResources
from shared.config.settings import Settings
from shared.errors import register_error_handlers

from services.user_service.main import create_user_app
from services.merchant_service.main import create_merchant_app
from services.product_service.main import create_product_app
from services.order_service.main import create_order_app

SERVICE_PREFIXES = {
    "users": "/api/users",
    "merchants": "/api/merchants",
    "products": "/api/products",
    "orders": "/api/orders",
}


def create_cluster_app(settings: Optional[Settings] = None, resources: Optional[ServiceResources] = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Ecommerce Cluster")
    register_error_handlers(app)

    service_apps = {
        "users": create_user_app(settings, resources),
        "merchants": create_merchant_app(settings, resources),
        "products": create_product_app(settings, resources),
        "orders": create_order_app(settings, resources),
    }
    app.state.resources = resources
    app.state.owns_resources = False

    @app.get("/health")
    async def health_check():
        return {"status": "API Gateway is running"}

    @app.get("/api")
    async def service_index():
        return {"message": "Welcome to Microservices API Gateway", "services": SERVICE_PREFIXES}

    @app.on_event("startup")
    async def startup_event():
        if app.state.resources is None:
            app.state.resources = ServiceResources.open(settings)
            app.state.owns_resources = True
            await app.state.resources.database.create_all()
            for service_app in service_apps.values():
                service_app.state.resources = app.state.resources

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.owns_resources:
            await app.state.resources.close()

    for name, service_app in service_apps.items():
        app.mount(SERVICE_PREFIXES[name], service_app)

    return app


app = create_cluster_app()
