"""
Hierarchical Device Navigator - state machine

Drives the device mega-menu: device type -> brand -> series -> model -> parts.

    reduce_navigator(state, event, settings) -> Transition(state, effects)

Selecting a value at one level clears every deeper selection and moves
one level down. Going back nulls the deepest selection. Fetched data is
cached per selection key, so walking back and forth never refetches
data that already loaded.

Fetch results are keyed by the selection that requested them and only
applied while that selection is still active. A result for a selection
the user already moved away from is dropped.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from storefront.models.catalog import CatalogItem, DeviceType
from storefront.services.config.configuration_service import get_config_service
from storefront.services.scheduling.effects import CancelTimer, ScheduleTimer, Transition
from .grouping import ModelEntry, SeriesGroup, group_models_by_series, series_of

logger = logging.getLogger(__name__)

HOVER_TIMER = "nav_hover"
LEAVE_TIMER = "nav_leave"

ModelsKey = Tuple[str, str]
PartsKey = Tuple[str, str, str]


class NavLevel(str, Enum):
    TYPES = "types"
    BRANDS = "brands"
    SERIES = "series"
    MODELS = "models"
    PARTS = "parts"


class PanelStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


LOADED = (PanelStatus.READY, PanelStatus.EMPTY)

# Keys in these states already have data or a fetch in flight
NO_FETCH = LOADED + (PanelStatus.LOADING,)


@dataclass(frozen=True)
class NavigatorSettings:
    hover_debounce_seconds: float = 0.05
    leave_reset_seconds: float = 0.3
    other_series_label: str = "Other"
    browse_all_url: str = "/parts"

    @classmethod
    def from_config(cls) -> "NavigatorSettings":
        nav = get_config_service().get_navigator_settings()
        return cls(
            hover_debounce_seconds=nav["hover_debounce_ms"] / 1000.0,
            leave_reset_seconds=nav["leave_reset_ms"] / 1000.0,
            other_series_label=nav["other_series_label"],
            browse_all_url=nav["browse_all_url"],
        )


@dataclass(frozen=True)
class NavigatorState:
    """
    Attributes:
        level: Panel currently shown
        fixed_device_type: Set for single-type menus; BRANDS is then the top level
        hovered_type: Device type under the pointer (mega-menu only)
        brands/models/parts: Fetched data per selection key
        *_status: Fetch status per selection key
    """
    level: NavLevel = NavLevel.TYPES
    device_type: Optional[str] = None
    brand: Optional[str] = None
    series: Optional[str] = None
    model: Optional[str] = None
    fixed_device_type: Optional[str] = None
    hovered_type: Optional[str] = None
    brands: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    models: Dict[ModelsKey, Tuple[ModelEntry, ...]] = field(default_factory=dict)
    parts: Dict[PartsKey, Tuple[CatalogItem, ...]] = field(default_factory=dict)
    brand_status: Dict[str, PanelStatus] = field(default_factory=dict)
    model_status: Dict[ModelsKey, PanelStatus] = field(default_factory=dict)
    part_status: Dict[PartsKey, PanelStatus] = field(default_factory=dict)

    @property
    def models_key(self) -> Optional[ModelsKey]:
        if self.device_type and self.brand:
            return (self.device_type, self.brand)
        return None

    @property
    def parts_key(self) -> Optional[PartsKey]:
        if self.device_type and self.brand and self.model:
            return (self.device_type, self.brand, self.model)
        return None


def initial_navigator_state(device_type: Optional[str] = None) -> NavigatorState:
    """Fresh menu; with device_type the menu is pinned to that type"""
    if device_type:
        return NavigatorState(
            level=NavLevel.BRANDS,
            device_type=device_type,
            fixed_device_type=device_type,
        )
    return NavigatorState()


# Events

@dataclass(frozen=True)
class SelectDeviceType:
    device_type: str


@dataclass(frozen=True)
class SelectBrand:
    brand: str


@dataclass(frozen=True)
class SelectSeries:
    series: str


@dataclass(frozen=True)
class SelectModel:
    model: str


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class HoverDeviceType:
    device_type: str


@dataclass(frozen=True)
class HoverSettled:
    device_type: str


@dataclass(frozen=True)
class PointerLeft:
    pass


@dataclass(frozen=True)
class PointerReentered:
    """Pointer is back over the menu or one of its portal submenus"""
    pass


@dataclass(frozen=True)
class LeaveElapsed:
    pass


@dataclass(frozen=True)
class BrandsLoaded:
    device_type: str
    brands: Tuple[str, ...]


@dataclass(frozen=True)
class BrandsFailed:
    device_type: str
    error: str = ""


@dataclass(frozen=True)
class ModelsLoaded:
    device_type: str
    brand: str
    models: Tuple[ModelEntry, ...]


@dataclass(frozen=True)
class ModelsFailed:
    device_type: str
    brand: str
    error: str = ""


@dataclass(frozen=True)
class PartsLoaded:
    device_type: str
    brand: str
    model: str
    parts: Tuple[CatalogItem, ...]


@dataclass(frozen=True)
class PartsFailed:
    device_type: str
    brand: str
    model: str
    error: str = ""


@dataclass(frozen=True)
class TornDown:
    pass


# Effects

@dataclass(frozen=True)
class FetchBrands:
    device_type: str


@dataclass(frozen=True)
class FetchModels:
    device_type: str
    brand: str


@dataclass(frozen=True)
class FetchParts:
    device_type: str
    brand: str
    model: str


DEFAULT_SETTINGS = NavigatorSettings()


def _with(mapping: dict, key, value) -> dict:
    updated = dict(mapping)
    updated[key] = value
    return updated


def _without(mapping: dict, key) -> dict:
    updated = dict(mapping)
    updated.pop(key, None)
    return updated


def _load_brands(state: NavigatorState) -> Transition:
    key = state.device_type
    if key is None or state.brand_status.get(key) in NO_FETCH:
        return Transition(state)
    return Transition(
        replace(state, brand_status=_with(state.brand_status, key, PanelStatus.LOADING)),
        (FetchBrands(key),),
    )


def _load_models(state: NavigatorState) -> Transition:
    key = state.models_key
    if key is None or state.model_status.get(key) in NO_FETCH:
        return Transition(state)
    return Transition(
        replace(state, model_status=_with(state.model_status, key, PanelStatus.LOADING)),
        (FetchModels(*key),),
    )


def _load_parts(state: NavigatorState) -> Transition:
    key = state.parts_key
    if key is None or state.part_status.get(key) in NO_FETCH:
        return Transition(state)
    return Transition(
        replace(state, part_status=_with(state.part_status, key, PanelStatus.LOADING)),
        (FetchParts(*key),),
    )


def _load_for_level(state: NavigatorState) -> Transition:
    if state.level == NavLevel.BRANDS:
        return _load_brands(state)
    if state.level in (NavLevel.SERIES, NavLevel.MODELS):
        return _load_models(state)
    if state.level == NavLevel.PARTS:
        return _load_parts(state)
    return Transition(state)


def _enter_device_type(state: NavigatorState, device_type: str) -> Transition:
    entered = replace(
        state,
        level=NavLevel.BRANDS,
        device_type=device_type,
        brand=None,
        series=None,
        model=None,
    )
    return _load_brands(entered)


def _reset(state: NavigatorState) -> NavigatorState:
    """Back to the top of the menu, keeping the caches"""
    if state.fixed_device_type:
        return replace(
            state,
            level=NavLevel.BRANDS,
            device_type=state.fixed_device_type,
            brand=None,
            series=None,
            model=None,
            hovered_type=None,
        )
    return replace(
        state,
        level=NavLevel.TYPES,
        device_type=None,
        brand=None,
        series=None,
        model=None,
        hovered_type=None,
    )


def _forget_loading(statuses: dict, key) -> dict:
    # A dropped result must not leave its key stuck in LOADING, or the
    # next visit would never fetch it.
    if statuses.get(key) == PanelStatus.LOADING:
        return _without(statuses, key)
    return statuses


def reduce_navigator(
    state: NavigatorState,
    event: object,
    settings: NavigatorSettings = DEFAULT_SETTINGS,
) -> Transition:
    """Apply one event to the navigator state"""

    if isinstance(event, SelectDeviceType):
        if state.fixed_device_type and event.device_type != state.fixed_device_type:
            logger.warning(
                f"Ignoring device type {event.device_type}: menu is pinned to {state.fixed_device_type}"
            )
            return Transition(state)
        return _enter_device_type(state, event.device_type)

    if isinstance(event, SelectBrand):
        if state.device_type is None:
            logger.warning(f"Cannot select brand {event.brand} before a device type")
            return Transition(state)
        selected = replace(state, level=NavLevel.SERIES, brand=event.brand, series=None, model=None)
        return _load_models(selected)

    if isinstance(event, SelectSeries):
        if state.models_key is None:
            logger.warning(f"Cannot select series {event.series} before a brand")
            return Transition(state)
        selected = replace(state, level=NavLevel.MODELS, series=event.series, model=None)
        return _load_models(selected)

    if isinstance(event, SelectModel):
        if state.models_key is None or state.level not in (NavLevel.SERIES, NavLevel.MODELS):
            logger.warning(f"Cannot select model {event.model} from level {state.level.value}")
            return Transition(state)
        series = state.series
        if series is None:
            entries = state.models.get(state.models_key, ())
            series = series_of(entries, event.model, settings.other_series_label)
        selected = replace(state, level=NavLevel.PARTS, model=event.model, series=series)
        return _load_parts(selected)

    if isinstance(event, GoBack):
        return _go_back(state)

    if isinstance(event, Retry):
        return _retry(state)

    if isinstance(event, HoverDeviceType):
        hovered = replace(state, hovered_type=event.device_type)
        if state.fixed_device_type or event.device_type == state.device_type:
            return Transition(hovered, (CancelTimer(LEAVE_TIMER), CancelTimer(HOVER_TIMER)))
        # Different type: clear now, load once the pointer settles
        cleared = replace(
            hovered,
            level=NavLevel.TYPES,
            device_type=None,
            brand=None,
            series=None,
            model=None,
        )
        return Transition(
            cleared,
            (
                CancelTimer(LEAVE_TIMER),
                ScheduleTimer(HOVER_TIMER, settings.hover_debounce_seconds, HoverSettled(event.device_type)),
            ),
        )

    if isinstance(event, HoverSettled):
        if state.hovered_type != event.device_type:
            return Transition(state)
        return _enter_device_type(state, event.device_type)

    if isinstance(event, PointerLeft):
        return Transition(
            state,
            (
                CancelTimer(HOVER_TIMER),
                ScheduleTimer(LEAVE_TIMER, settings.leave_reset_seconds, LeaveElapsed()),
            ),
        )

    if isinstance(event, PointerReentered):
        return Transition(state, (CancelTimer(LEAVE_TIMER),))

    if isinstance(event, LeaveElapsed):
        return Transition(_reset(state))

    if isinstance(event, BrandsLoaded):
        key = event.device_type
        if key != state.device_type:
            logger.debug(f"Dropping late brands for {key}")
            return Transition(replace(state, brand_status=_forget_loading(state.brand_status, key)))
        status = PanelStatus.READY if event.brands else PanelStatus.EMPTY
        return Transition(replace(
            state,
            brands=_with(state.brands, key, tuple(event.brands)),
            brand_status=_with(state.brand_status, key, status),
        ))

    if isinstance(event, BrandsFailed):
        key = event.device_type
        if key != state.device_type:
            return Transition(replace(state, brand_status=_forget_loading(state.brand_status, key)))
        return Transition(replace(state, brand_status=_with(state.brand_status, key, PanelStatus.ERROR)))

    if isinstance(event, ModelsLoaded):
        key = (event.device_type, event.brand)
        if key != state.models_key:
            logger.debug(f"Dropping late models for {key}")
            return Transition(replace(state, model_status=_forget_loading(state.model_status, key)))
        status = PanelStatus.READY if event.models else PanelStatus.EMPTY
        return Transition(replace(
            state,
            models=_with(state.models, key, tuple(event.models)),
            model_status=_with(state.model_status, key, status),
        ))

    if isinstance(event, ModelsFailed):
        key = (event.device_type, event.brand)
        if key != state.models_key:
            return Transition(replace(state, model_status=_forget_loading(state.model_status, key)))
        return Transition(replace(state, model_status=_with(state.model_status, key, PanelStatus.ERROR)))

    if isinstance(event, PartsLoaded):
        key = (event.device_type, event.brand, event.model)
        if key != state.parts_key:
            logger.debug(f"Dropping late parts for {key}")
            return Transition(replace(state, part_status=_forget_loading(state.part_status, key)))
        status = PanelStatus.READY if event.parts else PanelStatus.EMPTY
        return Transition(replace(
            state,
            parts=_with(state.parts, key, tuple(event.parts)),
            part_status=_with(state.part_status, key, status),
        ))

    if isinstance(event, PartsFailed):
        key = (event.device_type, event.brand, event.model)
        if key != state.parts_key:
            return Transition(replace(state, part_status=_forget_loading(state.part_status, key)))
        return Transition(replace(state, part_status=_with(state.part_status, key, PanelStatus.ERROR)))

    if isinstance(event, TornDown):
        return Transition(state, (CancelTimer(HOVER_TIMER), CancelTimer(LEAVE_TIMER)))

    logger.warning(f"Unknown navigator event: {event!r}")
    return Transition(state)


def _go_back(state: NavigatorState) -> Transition:
    if state.level == NavLevel.PARTS:
        level = NavLevel.MODELS if state.series else NavLevel.SERIES
        back = replace(state, level=level, model=None)
    elif state.level == NavLevel.MODELS:
        back = replace(state, level=NavLevel.SERIES, series=None, model=None)
    elif state.level == NavLevel.SERIES:
        back = replace(state, level=NavLevel.BRANDS, brand=None, series=None, model=None)
    elif state.level == NavLevel.BRANDS and not state.fixed_device_type:
        back = replace(state, level=NavLevel.TYPES, device_type=None)
    else:
        return Transition(state)
    return _load_for_level(back)


def _retry(state: NavigatorState) -> Transition:
    """Refetch the current panel, whatever its cached status"""
    if state.level == NavLevel.BRANDS and state.device_type:
        cleared = replace(state, brand_status=_without(state.brand_status, state.device_type))
    elif state.level in (NavLevel.SERIES, NavLevel.MODELS) and state.models_key:
        cleared = replace(state, model_status=_without(state.model_status, state.models_key))
    elif state.level == NavLevel.PARTS and state.parts_key:
        cleared = replace(state, part_status=_without(state.part_status, state.parts_key))
    else:
        return Transition(state)
    return _load_for_level(cleared)


@dataclass(frozen=True)
class NavigatorPanel:
    """
    What the mega-menu renders for the current level.

    Empty and error panels carry a retry affordance and a browse-all link
    so they are never mistaken for a blank or loading panel.
    """
    level: NavLevel
    status: PanelStatus
    options: Tuple[str, ...] = ()
    groups: Tuple[SeriesGroup, ...] = ()
    parts: Tuple[CatalogItem, ...] = ()
    can_go_back: bool = False
    can_retry: bool = False
    browse_all_url: Optional[str] = None

    @property
    def not_found(self) -> bool:
        return self.status == PanelStatus.EMPTY


def current_panel(state: NavigatorState, settings: NavigatorSettings = DEFAULT_SETTINGS) -> NavigatorPanel:
    """Derive the panel for the current level from state and caches"""
    can_go_back = state.level != NavLevel.TYPES and not (
        state.level == NavLevel.BRANDS and state.fixed_device_type
    )

    if state.level == NavLevel.TYPES:
        return NavigatorPanel(
            level=state.level,
            status=PanelStatus.READY,
            options=tuple(t.value for t in DeviceType),
        )

    groups: List[SeriesGroup] = []
    options: Tuple[str, ...] = ()
    parts: Tuple[CatalogItem, ...] = ()

    if state.level == NavLevel.BRANDS:
        status = state.brand_status.get(state.device_type, PanelStatus.LOADING)
        options = state.brands.get(state.device_type, ())
    elif state.level in (NavLevel.SERIES, NavLevel.MODELS):
        status = state.model_status.get(state.models_key, PanelStatus.LOADING)
        groups = group_models_by_series(state.models.get(state.models_key, ()), settings.other_series_label)
        if state.level == NavLevel.SERIES:
            options = tuple(group.name for group in groups)
        else:
            matching = [group for group in groups if group.name == state.series]
            options = matching[0].models if matching else ()
            if status == PanelStatus.READY and not options:
                status = PanelStatus.EMPTY
    else:
        status = state.part_status.get(state.parts_key, PanelStatus.LOADING)
        parts = state.parts.get(state.parts_key, ())

    failed = status in (PanelStatus.EMPTY, PanelStatus.ERROR)
    return NavigatorPanel(
        level=state.level,
        status=status,
        options=tuple(options),
        groups=tuple(groups),
        parts=parts,
        can_go_back=can_go_back,
        can_retry=failed,
        browse_all_url=settings.browse_all_url if failed else None,
    )
