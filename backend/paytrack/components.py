# Overview: Per-app wiring of the storage gateway, subscriber registry, emitter and scanner.

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app

from .extensions import db
from .services.notification_service import NotificationEmitter
from .services.overdue_scanner import OverdueScanner
from .services.realtime import SubscriberRegistry
from .services.storage import Storage


EXTENSION_KEY = "paytrack"


@dataclass
class Components:
    storage: Storage
    registry: SubscriberRegistry
    emitter: NotificationEmitter
    scanner: OverdueScanner


def build_components(app: Flask) -> Components:
    storage = Storage(db)
    registry = SubscriberRegistry()
    emitter = NotificationEmitter(storage, registry)
    scanner = OverdueScanner(
        app,
        storage,
        emitter,
        interval_seconds=app.config["OVERDUE_SCAN_INTERVAL_SECONDS"],
    )
    components = Components(storage=storage, registry=registry, emitter=emitter, scanner=scanner)
    app.extensions[EXTENSION_KEY] = components
    return components


def get_components(app: Flask | None = None) -> Components:
    return (app or current_app).extensions[EXTENSION_KEY]
