"""
catalog.py — Read-only Catalog Store

Loads the static rewards catalog once and answers lookups against it.
The store is never mutated after loading.
"""

import json

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, UnexpectedError
from .models import Catalog
from .logging_config import get_logger

log = get_logger(__name__)


class CatalogStore:
    """
    In-memory view over a loaded `Catalog`.

    Provides brand and utid lookups, storefront search and the flat list of
    digitally fulfilled rewards used by the portal's gift card picker.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._brands = {brand.brandKey: brand for brand in catalog.brands}
        self._items = {}
        for brand in catalog.brands:
            for item in brand.items:
                self._items[item.utid] = (brand, item)

    @classmethod
    def from_path(cls, path):
        """
        Reads and validates a catalog JSON file.

        Args:
            path (str | Path): Location of the catalog file.

        Returns:
            CatalogStore: A store over the parsed catalog.

        Raises:
            UnexpectedError: If the file cannot be read, is not valid JSON, or
                does not match the catalog format.
        """
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
            catalog = Catalog.model_validate(data)
        except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
            log.error(f"Error reading catalog from {path}: {e}")
            raise UnexpectedError("Failed to load catalog") from e

        log.info(f"Catalog '{catalog.catalogName}' loaded with {len(catalog.brands)} brands.")
        return cls(catalog)

    @property
    def brands(self):
        return list(self.catalog.brands)

    @property
    def categories(self):
        return list(self.catalog.categories)

    def get_brand(self, brand_key):
        try:
            return self._brands[brand_key]
        except KeyError:
            raise NotFoundError(f"Brand not found: {brand_key}") from None

    def find_item(self, utid):
        """
        Resolves a utid to its brand and catalog item.

        Returns:
            tuple[Brand, CatalogItem]: The owning brand and the item.

        Raises:
            NotFoundError: If no brand offers the utid.
        """
        try:
            return self._items[utid]
        except KeyError:
            raise NotFoundError(f"Reward not found: {utid}") from None

    def search(self, term="", category=""):
        """
        Filters brands the way the storefront does.

        A brand matches when `term` occurs (case-insensitively) in its name or
        description and, if `category` is given, its category equals it.
        Empty filters match every brand.
        """
        needle = (term or "").strip().lower()
        matches = []
        for brand in self.catalog.brands:
            if needle and needle not in brand.brandName.lower() and needle not in brand.description.lower():
                continue
            if category and brand.category != category:
                continue
            matches.append(brand)
        return matches

    def digital_items(self):
        """Returns `(brand, item)` pairs for every DIGITAL reward."""
        return [
            (brand, item)
            for brand in self.catalog.brands
            for item in brand.items
            if item.fulfillmentType == "DIGITAL"
        ]

    def to_dict(self):
        return self.catalog.model_dump(mode="json")
