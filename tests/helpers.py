"""Builders for collaborator errors and catalog items used across the test suite."""
from decimal import Decimal

import httpx

from order_console.models import CatalogItem


def http_status_error(status_code, method="PUT", url="http://backend/api"):
    request = httpx.Request(method, url)
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


def read_timeout(url="http://backend/api"):
    return httpx.ReadTimeout("timed out", request=httpx.Request("PUT", url))


def connect_error(url="http://backend/api"):
    return httpx.ConnectError("connection refused", request=httpx.Request("PUT", url))


def make_item(item_id="itm-1", name="Paneer Tikka", category="Restaurant", price="100", stock=10):
    return CatalogItem(item_id=item_id, name=name, category=category, unit_price=Decimal(price), stock=stock)
