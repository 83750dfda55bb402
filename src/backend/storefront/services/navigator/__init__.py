"""
Device navigator: type -> brand -> series -> model -> parts mega-menu
"""

from .grouping import ModelEntry, SeriesGroup, group_models_by_series, series_of
from .navigator import CatalogNavigator, to_model_entry
from .state import (
    BrandsFailed,
    BrandsLoaded,
    FetchBrands,
    FetchModels,
    FetchParts,
    GoBack,
    HoverDeviceType,
    HoverSettled,
    LeaveElapsed,
    ModelsFailed,
    ModelsLoaded,
    NavigatorPanel,
    NavigatorSettings,
    NavigatorState,
    NavLevel,
    PanelStatus,
    PartsFailed,
    PartsLoaded,
    PointerLeft,
    PointerReentered,
    Retry,
    SelectBrand,
    SelectDeviceType,
    SelectModel,
    SelectSeries,
    TornDown,
    current_panel,
    initial_navigator_state,
    reduce_navigator,
)

__all__ = [
    "CatalogNavigator",
    "NavigatorSettings",
    "NavigatorState",
    "NavigatorPanel",
    "NavLevel",
    "PanelStatus",
    "ModelEntry",
    "SeriesGroup",
    "group_models_by_series",
    "series_of",
    "to_model_entry",
    "current_panel",
    "initial_navigator_state",
    "reduce_navigator",
    "SelectDeviceType",
    "SelectBrand",
    "SelectSeries",
    "SelectModel",
    "GoBack",
    "Retry",
    "HoverDeviceType",
    "HoverSettled",
    "PointerLeft",
    "PointerReentered",
    "LeaveElapsed",
    "BrandsLoaded",
    "BrandsFailed",
    "ModelsLoaded",
    "ModelsFailed",
    "PartsLoaded",
    "PartsFailed",
    "TornDown",
    "FetchBrands",
    "FetchModels",
    "FetchParts",
]
