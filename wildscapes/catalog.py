"""Animal card catalog loading.

The bundled catalog lives in ``wildscapes/data/animal_cards.yaml``; a
different file can be supplied through ``WILDSCAPES_CATALOG_PATH`` or by
passing a path explicitly.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml
from pydantic import ValidationError

from .errors import CatalogError
from .models import AnimalCard

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "animal_cards.yaml"


def parse_catalog(data: Any, source: str = "<memory>") -> Tuple[AnimalCard, ...]:
    """Validate raw YAML data into animal cards."""
    if not isinstance(data, dict) or not isinstance(data.get("animals"), list):
        raise CatalogError("Catalog must contain an 'animals' list", path=source)

    cards = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(data["animals"]):
        try:
            card = AnimalCard.model_validate(entry)
        except ValidationError as exc:
            raise CatalogError(
                f"Invalid animal card at index {index}",
                path=source,
                context={"errors": exc.error_count()},
            ) from exc
        if not card.habitat:
            raise CatalogError(
                f"Animal card '{card.id}' has no habitat cells", path=source
            )
        if card.id in seen_ids:
            raise CatalogError(f"Duplicate animal card id '{card.id}'", path=source)
        seen_ids.add(card.id)
        cards.append(card)
    return tuple(cards)


def load_catalog(path: Optional[str | Path] = None) -> Tuple[AnimalCard, ...]:
    """Load a catalog from ``path`` or the bundled default."""
    if path is None:
        return default_catalog()
    try:
        text = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        raise CatalogError(f"Could not read catalog: {exc}", path=str(path)) from exc
    cards = parse_catalog(data, source=str(path))
    logger.info("Loaded %d animal cards from %s", len(cards), path)
    return cards


@lru_cache(maxsize=1)
def default_catalog() -> Tuple[AnimalCard, ...]:
    """The bundled catalog, parsed once per process."""
    text = (
        resources.files("wildscapes.data")
        .joinpath(DEFAULT_CATALOG_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return parse_catalog(yaml.safe_load(text), source=DEFAULT_CATALOG_RESOURCE)


__all__ = ["default_catalog", "load_catalog", "parse_catalog"]
