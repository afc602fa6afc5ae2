"""Ordered plan of optional backend extras derived from bot settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from packages.botmanager_shared.config import BotSettings
from packages.botmanager_shared.logging import get_logger
from resources.adapters.telegram.adapter import BotBackend

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ExtraStep:
    """One optional backend call applied when its setting is present."""

    name: str
    applies: bool
    effect: Callable[[BotBackend], None]


def build_extras_plan(settings: BotSettings) -> list[ExtraStep]:
    """Return extras steps in application order; values pass through verbatim."""
    steps = [
        ExtraStep(
            name="admins",
            applies=settings.admins is not None,
            effect=lambda backend: backend.enable_admins(settings.admins or []),
        ),
        ExtraStep(
            name="storage",
            applies=settings.storage is not None,
            effect=lambda backend: backend.enable_storage(settings.storage or {}),
        ),
        ExtraStep(
            name="commands.paths",
            applies=settings.commands.paths is not None,
            effect=lambda backend: backend.add_commands_paths(
                settings.commands.paths or []
            ),
        ),
        ExtraStep(
            name="custom_input",
            applies=settings.custom_input is not None,
            effect=lambda backend: backend.set_custom_input(settings.custom_input or ""),
        ),
        ExtraStep(
            name="paths.download",
            applies=settings.paths.download is not None,
            effect=lambda backend: backend.set_download_path(
                settings.paths.download or ""
            ),
        ),
        ExtraStep(
            name="paths.upload",
            applies=settings.paths.upload is not None,
            effect=lambda backend: backend.set_upload_path(settings.paths.upload or ""),
        ),
    ]

    for command, config in settings.commands.configs.items():
        steps.append(
            ExtraStep(
                name=f"commands.configs.{command}",
                applies=True,
                effect=lambda backend, command=command, config=config: (
                    backend.set_command_config(command, config)
                ),
            )
        )

    steps.append(
        ExtraStep(
            name="analytics",
            applies=bool(settings.analytics.token),
            effect=lambda backend: backend.enable_analytics(
                settings.analytics.token or "", settings.analytics.options
            ),
        )
    )
    steps.append(
        ExtraStep(
            name="limiter",
            applies=settings.limiter.enabled is not None,
            effect=lambda backend: backend.set_limiter(
                bool(settings.limiter.enabled), settings.limiter.options
            ),
        )
    )
    return steps


def apply_bot_extras(backend: BotBackend, settings: BotSettings) -> list[str]:
    """Apply every step whose setting is present; return the applied names."""
    applied: list[str] = []
    for step in build_extras_plan(settings):
        if not step.applies:
            continue
        step.effect(backend)
        applied.append(step.name)
    if applied:
        _LOGGER.debug("applied backend extras: %s", ", ".join(applied))
    return applied
