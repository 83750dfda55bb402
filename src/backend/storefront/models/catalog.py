"""
Catalog Data Models

Parts and accessories as they come back from the storefront database,
plus the filter specification and page envelope used by the browsing
pages. Items are immutable snapshots; nothing in the browsing engine
mutates them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field


class ItemKind(str, Enum):
    """Which catalog an item belongs to"""
    PART = "part"
    ACCESSORY = "accessory"


class DeviceType(str, Enum):
    """Top-level device families shown in the navigation bar"""
    SMARTPHONE = "SMARTPHONE"
    TABLET = "TABLET"
    LAPTOP = "LAPTOP"
    SMARTWATCH = "SMARTWATCH"
    DESKTOP = "DESKTOP"
    GAMING_CONSOLE = "GAMING_CONSOLE"
    OTHER = "OTHER"


class AccessoryCategory(str, Enum):
    """Accessory category tags"""
    CASE = "CASE"
    CHARGER = "CHARGER"
    CABLE = "CABLE"
    HEADPHONES = "HEADPHONES"
    STAND = "STAND"
    SCREEN_PROTECTOR = "SCREEN_PROTECTOR"
    KEYBOARD = "KEYBOARD"
    MOUSE = "MOUSE"
    STYLUS = "STYLUS"
    MOUNT = "MOUNT"
    OTHER = "OTHER"


class CatalogItem(BaseModel):
    """
    Single part or accessory.

    Attributes:
        id: Opaque unique identifier
        name: Display name
        kind: part or accessory
        price: Unit price
        stock: Units on hand (never negative)
        min_stock: Reorder threshold; 0 < stock <= min_stock is "low stock"
        compatibility: Comma-separated list of compatible devices
        device_model: Device model a part fits (e.g. "Apple iPhone 15")
        device_type: Device family (SMARTPHONE, TABLET, ...)
        category: Accessory category tag
        brand: Explicit brand, when the record has one
        quality: Part quality tag (OEM, Original, ...)
    """
    id: str
    name: str
    kind: ItemKind = ItemKind.ACCESSORY
    price: float = 0.0
    stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    description: Optional[str] = None
    compatibility: Optional[str] = None
    device_model: Optional[str] = None
    device_type: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    quality: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        frozen = True

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.stock <= self.min_stock


class PriceRange(BaseModel):
    """Inclusive price bounds; a missing bound is unbounded"""
    min: Optional[float] = None
    max: Optional[float] = None

    def is_inverted(self) -> bool:
        return self.min is not None and self.max is not None and self.min > self.max

    def normalized(self) -> "PriceRange":
        """Return a range with min <= max, swapping inverted bounds"""
        if self.is_inverted():
            return PriceRange(min=self.max, max=self.min)
        return self

    def contains(self, price: float) -> bool:
        if self.min is not None and price < self.min:
            return False
        if self.max is not None and price > self.max:
            return False
        return True


class FilterSpec(BaseModel):
    """
    Active facets of a listing page.

    An empty set on any facet means "no constraint on that facet".
    Facets combine with AND; values within one facet combine with OR.
    """
    categories: Set[str] = Field(default_factory=set)
    brands: Set[str] = Field(default_factory=set)
    compatibility: Set[str] = Field(default_factory=set)
    device_types: Set[str] = Field(default_factory=set)
    device_models: Set[str] = Field(default_factory=set)
    price_range: PriceRange = Field(default_factory=PriceRange)
    in_stock_only: bool = False
    search_term: str = ""

    def is_empty(self) -> bool:
        """True when the spec constrains nothing (identity filter)"""
        return (
            not self.categories
            and not self.brands
            and not self.compatibility
            and not self.device_types
            and not self.device_models
            and self.price_range.min is None
            and self.price_range.max is None
            and not self.in_stock_only
            and not self.search_term.strip()
        )


class PaginationInfo(BaseModel):
    """Pagination metadata rendered under a listing"""
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_previous_page: bool
    start_index: int
    end_index: int
    # Page-number strip; None marks a collapsed gap
    visible_pages: List[Optional[int]] = Field(default_factory=list)


class CatalogPage(BaseModel):
    """One page of a filtered listing"""
    data: List[CatalogItem] = Field(default_factory=list)
    pagination: PaginationInfo
    filters_applied: Dict[str, Any] = Field(default_factory=dict)
