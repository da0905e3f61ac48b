"""
Web Push: subscription registry and announcement fan-out.

Every announcement is delivered to every registered browser, one asyncio task
per subscription, and the results are joined. Delivery is best effort:

- 404/410 from the push service means the endpoint is gone for good. The
  subscription is deleted so dead endpoints do not pile up.
- Anything else (5xx, 429, network errors) is logged and the subscription is
  kept. There is no retry; the notification is simply missed.

No outcome is reported back to the admin who created the announcement.
"""
import asyncio
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from pywebpush import WebPushException, webpush
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.config import Settings
from app.models import Announcement, PushSubscription

log = logging.getLogger("storefront.push")

GONE_STATUS_CODES = frozenset({404, 410})


class DeliveryError(Exception):
    """A push service refused a message. status_code is None when no HTTP response came back."""

    def __init__(self, status_code: int | None, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"push delivery failed status={status_code} {reason}".strip())


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    GONE = "gone"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryResult:
    subscription_id: int
    endpoint: str
    outcome: DeliveryOutcome
    status_code: int | None = None


class PushSender(Protocol):
    async def send(self, subscription_info: dict, payload: str) -> None:
        """Delivers one encrypted message or raises DeliveryError."""


class WebPushSender:
    """pywebpush is blocking (requests); each send runs in a worker thread."""

    def __init__(self, vapid_private_key: str, vapid_subject: str, timeout: float | None = None):
        self.vapid_private_key = vapid_private_key
        self.vapid_subject = vapid_subject
        self.timeout = timeout

    async def send(self, subscription_info: dict, payload: str) -> None:
        await asyncio.to_thread(self._send_blocking, subscription_info, payload)

    def _send_blocking(self, subscription_info: dict, payload: str) -> None:
        try:
            webpush(
                subscription_info=subscription_info,
                data=payload,
                vapid_private_key=self.vapid_private_key,
                # pywebpush adds aud/exp to the claims dict, so a fresh one per call
                vapid_claims={"sub": self.vapid_subject},
                timeout=self.timeout,
            )
        except WebPushException as e:
            # requests.Response is falsy for 4xx/5xx, compare against None
            status_code = e.response.status_code if e.response is not None else None
            raise DeliveryError(status_code, e.message) from e


def build_push_sender(settings: Settings) -> WebPushSender | None:
    if not settings.push_configured:
        return None
    return WebPushSender(
        vapid_private_key=settings.vapid_private_key,
        vapid_subject=settings.vapid_subject,
        timeout=settings.push_timeout_seconds,
    )


# --- registry ---


def get_by_endpoint(db: Session, endpoint: str) -> PushSubscription | None:
    return db.exec(select(PushSubscription).where(PushSubscription.endpoint == endpoint)).first()


def register_subscription(db: Session, endpoint: str, p256dh: str, auth: str) -> tuple[PushSubscription, bool]:
    """Idempotent on endpoint. Returns (record, created)."""
    existing = get_by_endpoint(db, endpoint)
    if existing:
        return existing, False
    sub = PushSubscription(endpoint=endpoint, p256dh=p256dh, auth=auth)
    db.add(sub)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent register of the same endpoint
        db.rollback()
        existing = get_by_endpoint(db, endpoint)
        if existing is None:
            raise
        return existing, False
    db.refresh(sub)
    return sub, True


def list_subscriptions(db: Session) -> list[PushSubscription]:
    return list(db.exec(select(PushSubscription).order_by(PushSubscription.id)).all())


def remove_subscriptions(db: Session, subscription_ids: Iterable[int]) -> int:
    ids = list(subscription_ids)
    if not ids:
        return 0
    subs = db.exec(select(PushSubscription).where(PushSubscription.id.in_(ids))).all()
    for sub in subs:
        db.delete(sub)
    db.commit()
    return len(subs)


# --- dispatcher ---


def build_payload(announcement: Announcement, icon: str) -> str:
    return json.dumps({"title": announcement.title, "body": announcement.message, "icon": icon})


def classify(status_code: int | None) -> DeliveryOutcome:
    if status_code in GONE_STATUS_CODES:
        return DeliveryOutcome.GONE
    return DeliveryOutcome.FAILED


async def deliver(sender: PushSender, subscription_id: int, subscription_info: dict, payload: str) -> DeliveryResult:
    endpoint = subscription_info["endpoint"]
    try:
        await sender.send(subscription_info, payload)
    except DeliveryError as e:
        outcome = classify(e.status_code)
        if outcome is DeliveryOutcome.FAILED:
            log.warning("push failed subscription_id=%s status=%s: %s", subscription_id, e.status_code, e.reason)
        return DeliveryResult(subscription_id, endpoint, outcome, e.status_code)
    except Exception:
        # One broken endpoint must not take the rest of the fan-out down
        log.exception("push failed subscription_id=%s endpoint=%s", subscription_id, endpoint)
        return DeliveryResult(subscription_id, endpoint, DeliveryOutcome.FAILED)
    return DeliveryResult(subscription_id, endpoint, DeliveryOutcome.DELIVERED)


def _load_targets(engine: Engine) -> list[tuple[int, dict]]:
    with Session(engine) as db:
        return [(sub.id, sub.to_subscription_info()) for sub in list_subscriptions(db)]


def _prune(engine: Engine, subscription_ids: list[int]) -> int:
    with Session(engine) as db:
        return remove_subscriptions(db, subscription_ids)


async def dispatch_announcement(engine: Engine, sender: PushSender, payload: str) -> list[DeliveryResult]:
    """Sends payload to every subscription concurrently and prunes the gone ones."""
    # Sessions are blocking; keep them off the event loop like the sends
    targets = await asyncio.to_thread(_load_targets, engine)
    if not targets:
        return []

    tasks = [asyncio.create_task(deliver(sender, sub_id, info, payload)) for sub_id, info in targets]
    results = list(await asyncio.gather(*tasks))

    gone = [r.subscription_id for r in results if r.outcome is DeliveryOutcome.GONE]
    if gone:
        removed = await asyncio.to_thread(_prune, engine, gone)
        log.info("removed %s expired push subscriptions: %s", removed, gone)
    log.info(
        "push fan-out done total=%s delivered=%s gone=%s failed=%s",
        len(results),
        sum(r.outcome is DeliveryOutcome.DELIVERED for r in results),
        len(gone),
        sum(r.outcome is DeliveryOutcome.FAILED for r in results),
    )
    return results


async def notify_announcement(engine: Engine, sender: PushSender | None, payload: str) -> None:
    """Background entry point run after the create response has been sent."""
    if sender is None:
        log.warning("VAPID keys not configured, skipping announcement push.")
        return
    await dispatch_announcement(engine, sender, payload)
