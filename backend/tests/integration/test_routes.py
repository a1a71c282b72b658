"""
Tests for how routes are registered on the application.
"""
import inspect

import pytest
from fastapi.routing import APIRoute

from storefront.main import app

# Liveness touches neither the database nor Redis
NON_BLOCKING = {"/health/live"}


def blocking_routes() -> list[APIRoute]:
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path not in NON_BLOCKING
    ]


def test_expected_routes_are_registered():
    paths = {route.path for route in blocking_routes()}
    assert {
        "/api/catalogue",
        "/api/catalogue/filters",
        "/api/products/{product_id}",
        "/api/products/{product_id}/publish",
        "/api/products/{product_id}/price",
        "/health/ready",
    } <= paths


@pytest.mark.parametrize("route", blocking_routes(), ids=lambda r: f"{r.methods} {r.path}")
def test_database_routes_run_in_threadpool(route):
    # Plain functions are dispatched to the threadpool instead of the event loop
    assert not inspect.iscoroutinefunction(route.endpoint)
