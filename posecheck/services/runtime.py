from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from posecheck.core.events import EventBus
from posecheck.core.session import PoseCheckSession
from posecheck.core.styling import StylePalette
from posecheck.logging_setup import setup_logging
from posecheck.services.config_store import ConfigStore
from posecheck.services.reference_store import ReferenceStore

logger = logging.getLogger(__name__)


@dataclass
class RuntimeContext:
    config_store: ConfigStore
    event_bus: EventBus
    session: PoseCheckSession
    reference_store: ReferenceStore
    palette: StylePalette

    def apply_config(self) -> None:
        cfg = self.config_store.config
        self.session.cfg = cfg
        self.palette = StylePalette.from_config(cfg.styles)
        if cfg.reference_path() == self.reference_store.path:
            return
        self.reference_store = ReferenceStore(cfg.reference_path())
        self.sync_reference()

    def sync_reference(self) -> None:
        """Make the session reference match what the store holds on disk."""
        doc = None
        if self.config_store.config.reference.load_on_start:
            doc = self.reference_store.load()
        if doc is None:
            self.session.clear_reference()
            return
        self.session.set_reference_angles(doc.angles)
        logger.info("Loaded reference pose from %s", self.reference_store.path)


def build_runtime(config_path: Path, configure_logging: bool = True) -> RuntimeContext:
    config_store = ConfigStore(config_path)
    cfg = config_store.config
    if configure_logging:
        setup_logging(cfg.logging)
    event_bus = EventBus()
    session = PoseCheckSession(cfg, event_bus)
    runtime = RuntimeContext(
        config_store=config_store,
        event_bus=event_bus,
        session=session,
        reference_store=ReferenceStore(cfg.reference_path()),
        palette=StylePalette.from_config(cfg.styles),
    )
    if cfg.reference.load_on_start:
        runtime.sync_reference()
    return runtime
