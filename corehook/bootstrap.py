from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from corehook.core.config.yaml_config import AppConfig, load_app_config
from corehook.core.directory import InMemoryDirectory
from corehook.hooks.mme import MmeWebhookHooks
from corehook.hooks.smf import SmfWebhookHooks
from corehook.notification.base import Dispatcher
from corehook.notification.notification_thread import NotificationWorkerThread
from corehook.notification.webhook_notifier import send


@dataclass(frozen=True)
class HookWiring:
    """Everything a network-element process needs to emit notifications."""
    config: AppConfig
    directory: InMemoryDirectory
    mme: MmeWebhookHooks
    smf: SmfWebhookHooks
    worker: Optional[NotificationWorkerThread] = None

    def stop(self) -> None:
        if self.worker is not None:
            self.worker.stop()


def build_hooks(
    config_path: Optional[str] = None,
    directory: Optional[InMemoryDirectory] = None,
    background: bool = False,
) -> HookWiring:
    """
    Load configuration and wire the MME and SMF hooks.

    Parameters
    ----------
    config_path
        Path to config.yaml; default resolution when None.
    directory
        Entity directory shared by the hooks; a fresh one when None.
    background
        Send from a worker thread instead of the calling thread.

    Raises
    ------
    ConfigError
        Invalid webhook configuration; startup should abort.
    """
    cfg = load_app_config(config_path)
    directory = directory if directory is not None else InMemoryDirectory()

    worker: Optional[NotificationWorkerThread] = None
    dispatcher: Dispatcher = send
    if background:
        worker = NotificationWorkerThread()
        worker.start()
        dispatcher = worker

    return HookWiring(
        config=cfg,
        directory=directory,
        mme=MmeWebhookHooks(cfg.mme, directory, dispatcher),
        smf=SmfWebhookHooks(cfg.smf, directory, dispatcher),
        worker=worker,
    )
