"""Hosted backend adapter: row-level REST API, RPC and object storage.

Talks to a PostgREST-style endpoint (``/rest/v1``) and its storage service
(``/storage/v1``) with the project's API key. Every request carries a
timeout; transport errors, timeouts and non-2xx answers are all raised as
BackendError so callers have a single failure path.

The realtime notification feed is served by polling the notification table
for rows newer than the last one seen.
"""

import threading
from collections.abc import Callable
from uuid import uuid4

import requests
import structlog

from shared.backend.port import BackendError, BackendTimeout, StoreBackend, Subscription
from shared.backend.records import (
    AdminNotification,
    Brand,
    Category,
    OrderHeader,
    OrderLine,
    PlacedOrder,
    Product,
)

logger = structlog.get_logger(__name__)

PRODUCT_SELECT = "*,category:category(*),brand:brand(*)"


class PollingSubscription(Subscription):
    """Background poller that forwards new notification rows to a callback."""

    def __init__(
        self,
        backend: "RestBackend",
        callback: Callable[[AdminNotification], None],
        interval: float,
        since: str | None,
    ) -> None:
        self._backend = backend
        self._callback = callback
        self._interval = interval
        self._since = since
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="notification-feed", daemon=True)
        self._thread.start()

    @property
    def active(self) -> bool:
        return not self._stop.is_set()

    def close(self) -> None:
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self._interval + 1)

    def poll_once(self) -> list[AdminNotification]:
        fresh = self._backend.fetch_notifications_since(self._since)
        for notification in fresh:
            self._since = notification.created_at or self._since
            self._callback(notification)
        return fresh

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.poll_once()
            except Exception as exc:
                logger.warning("Notification poll failed", error=str(exc))


class RestBackend(StoreBackend):
    """Production backend adapter over HTTP."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        poll_interval: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    # -------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------
    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            raise BackendTimeout(f"{method} {path} timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise BackendError(f"{method} {path} failed: {exc}") from exc

        if not response.ok:
            raise BackendError(f"{method} {path} returned {response.status_code}: {response.text[:200]}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(f"{method} {path} returned invalid JSON") from exc

    def _rows(self, table: str, **params) -> list[dict]:
        return self._request("GET", f"/rest/v1/{table}", params=params) or []

    @staticmethod
    def _single(rows) -> dict:
        if isinstance(rows, list):
            if not rows:
                raise BackendError("Expected one row, got none")
            return rows[0]
        return rows or {}

    # -------------------------------------------------------------------
    # Catalogue reads
    # -------------------------------------------------------------------
    def fetch_products(self) -> list[Product]:
        rows = self._rows("product", select=PRODUCT_SELECT, order="created_at.desc")
        return [Product.from_record(row) for row in rows]

    def fetch_categories(self) -> list[Category]:
        rows = self._rows("category", select="*", order="created_at.desc")
        return [Category.from_record(row) for row in rows]

    def fetch_brands(self) -> list[Brand]:
        rows = self._rows("brand", select="*", order="created_at.desc")
        return [Brand.from_record(row) for row in rows]

    # -------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------
    def place_order(self, header: OrderHeader, lines: list[OrderLine]) -> PlacedOrder:
        payload = {
            "p_customer_name": header.customer_name,
            "p_customer_email": header.customer_email,
            "p_customer_phone": header.customer_phone,
            "p_shipping_address": header.shipping_address,
            "p_total": header.total,
            "p_shipping_fee": header.shipping_fee,
            "p_items": [line.to_payload() for line in lines],
        }
        result = self._request("POST", "/rest/v1/rpc/place_order", json=payload)
        return PlacedOrder.from_record(self._single(result))

    def fetch_shipping_fee(self) -> float | None:
        rows = self._rows("store_settings", select="value", key="eq.shipping_fee", limit=1)
        if not rows or rows[0].get("value") in (None, ""):
            return None
        try:
            return float(rows[0]["value"])
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric shipping fee", value=rows[0]["value"])
            return None

    # -------------------------------------------------------------------
    # Back-office
    # -------------------------------------------------------------------
    def save_shipping_fee(self, fee: float) -> None:
        self._request(
            "POST",
            "/rest/v1/store_settings",
            params={"on_conflict": "key"},
            json={"key": "shipping_fee", "value": fee},
            headers={"Prefer": "resolution=merge-duplicates"},
        )

    def save_brand(self, payload: dict, brand_id: str | None = None) -> Brand:
        headers = {"Prefer": "return=representation"}
        if brand_id:
            rows = self._request(
                "PATCH", "/rest/v1/brand", params={"id": f"eq.{brand_id}"}, json=payload, headers=headers
            )
        else:
            rows = self._request("POST", "/rest/v1/brand", json=payload, headers=headers)
        return Brand.from_record(self._single(rows))

    def upload_image(self, filename: str, content: bytes, bucket: str) -> str:
        ext = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
        path = f"{uuid4().hex[:12]}.{ext}"
        self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{path}",
            data=content,
            headers={"Content-Type": "application/octet-stream"},
        )
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    def fetch_notifications(self) -> list[AdminNotification]:
        rows = self._rows("admin_notification", select="*", order="created_at.desc")
        return [AdminNotification.from_record(row) for row in rows]

    def fetch_notifications_since(self, since: str | None) -> list[AdminNotification]:
        params = {"select": "*", "order": "created_at.asc"}
        if since:
            params["created_at"] = f"gt.{since}"
        return [AdminNotification.from_record(row) for row in self._rows("admin_notification", **params)]

    def mark_notification_read(self, notification_id: str) -> None:
        self._request(
            "PATCH", "/rest/v1/admin_notification", params={"id": f"eq.{notification_id}"}, json={"isRead": True}
        )

    def mark_all_notifications_read(self) -> None:
        self._request("PATCH", "/rest/v1/admin_notification", params={"isRead": "eq.false"}, json={"isRead": True})

    def delete_notification(self, notification_id: str) -> None:
        self._request("DELETE", "/rest/v1/admin_notification", params={"id": f"eq.{notification_id}"})

    def subscribe_notifications(self, callback: Callable[[AdminNotification], None]) -> Subscription:
        latest = self._rows("admin_notification", select="created_at", order="created_at.desc", limit=1)
        since = latest[0].get("created_at") if latest else None
        return PollingSubscription(self, callback, self.poll_interval, since)
