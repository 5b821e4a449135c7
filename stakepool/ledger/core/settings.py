# MIT License
# Copyright (c) 2025 Hashborn

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ...protocol.types.common import InvalidInput
from ...protocol.types.settings import PlatformSettings
from .store import LedgerStore

logger = logging.getLogger(__name__)


def update_settings(store: LedgerStore, patch: Dict[str, Any]) -> PlatformSettings:
    """
    Merges a partial update over the current settings.

    The merged record is validated as a whole; on failure the current
    settings stay in place.
    """
    if not isinstance(patch, dict):
        raise InvalidInput("Settings update must be an object")

    merged = {**store.settings.model_dump(), **patch}
    try:
        settings = PlatformSettings.model_validate(merged)
    except ValidationError as e:
        raise InvalidInput(f"Invalid settings: {e.errors(include_url=False)}")

    if settings.min_stake > settings.max_stake:
        raise InvalidInput("min_stake must not exceed max_stake")

    store.settings = settings
    logger.info(f"Settings updated: {settings.model_dump(mode='json')}")
    return settings
