"""
Hierarchical Device Navigator - asyncio runtime

CatalogNavigator runs reduce_navigator() against three lookup
collaborators (brands by type, models by brand, parts by model). Each
fetch runs as a task and reports back as a Loaded or Failed event; the
reducer decides whether the result still applies.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence, Set

from storefront.models.catalog import CatalogItem
from storefront.services.scheduling import AsyncioScheduler, CancelTimer, ScheduleTimer, Scheduler
from storefront.utils.logging_context import log_context
from .grouping import ModelEntry
from .state import (
    BrandsFailed,
    BrandsLoaded,
    FetchBrands,
    FetchModels,
    FetchParts,
    GoBack,
    HoverDeviceType,
    ModelsFailed,
    ModelsLoaded,
    NavigatorPanel,
    NavigatorSettings,
    NavigatorState,
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

logger = logging.getLogger(__name__)

BrandsFn = Callable[[str], Awaitable[Sequence[str]]]
ModelsFn = Callable[[str, str], Awaitable[Iterable[Any]]]
PartsFn = Callable[[str, str, str], Awaitable[Sequence[CatalogItem]]]


def to_model_entry(record: Any) -> ModelEntry:
    """Accept ModelEntry, {"model", "series"} dicts or bare model names"""
    if isinstance(record, ModelEntry):
        return record
    if isinstance(record, str):
        return ModelEntry(model=record)
    if isinstance(record, dict):
        return ModelEntry(model=str(record["model"]), series=record.get("series"))
    raise TypeError(f"Unsupported model record: {record!r}")


class CatalogNavigator:
    """
    Stateful device mega-menu.

    Args:
        get_brands: async (device_type) -> brand names
        get_models: async (device_type, brand) -> model records
        get_parts: async (device_type, brand, model) -> parts
        device_type: Pin the menu to one device type
        scheduler: Timer slots (AsyncioScheduler by default)
        settings: Timings and labels (from config by default)
    """

    def __init__(
        self,
        get_brands: BrandsFn,
        get_models: ModelsFn,
        get_parts: PartsFn,
        device_type: Optional[str] = None,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[NavigatorSettings] = None,
    ):
        self._get_brands = get_brands
        self._get_models = get_models
        self._get_parts = get_parts
        self._scheduler = scheduler or AsyncioScheduler()
        self._settings = settings or NavigatorSettings.from_config()
        self._state = initial_navigator_state(device_type)
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def state(self) -> NavigatorState:
        return self._state

    @property
    def panel(self) -> NavigatorPanel:
        return current_panel(self._state, self._settings)

    def dispatch(self, event: object) -> NavigatorState:
        if self._closed:
            logger.debug(f"Ignoring {type(event).__name__} after teardown")
            return self._state

        transition = reduce_navigator(self._state, event, self._settings)
        self._state = transition.state
        for effect in transition.effects:
            self._run_effect(effect)
        return self._state

    def start(self) -> NavigatorState:
        """Load the brand panel of a pinned menu; no-op for the mega-menu"""
        if self._state.fixed_device_type:
            return self.dispatch(SelectDeviceType(self._state.fixed_device_type))
        return self._state

    def select_device_type(self, device_type: str) -> NavigatorState:
        return self.dispatch(SelectDeviceType(device_type))

    def select_brand(self, brand: str) -> NavigatorState:
        return self.dispatch(SelectBrand(brand))

    def select_series(self, series: str) -> NavigatorState:
        return self.dispatch(SelectSeries(series))

    def select_model(self, model: str) -> NavigatorState:
        return self.dispatch(SelectModel(model))

    def go_back(self) -> NavigatorState:
        return self.dispatch(GoBack())

    def retry(self) -> NavigatorState:
        return self.dispatch(Retry())

    def hover(self, device_type: str) -> NavigatorState:
        return self.dispatch(HoverDeviceType(device_type))

    def pointer_left(self) -> NavigatorState:
        return self.dispatch(PointerLeft())

    def pointer_reentered(self) -> NavigatorState:
        return self.dispatch(PointerReentered())

    def _run_effect(self, effect: object) -> None:
        if isinstance(effect, ScheduleTimer):
            event = effect.event
            self._scheduler.schedule(effect.key, effect.delay, lambda: self.dispatch(event))
        elif isinstance(effect, CancelTimer):
            self._scheduler.cancel(effect.key)
        elif isinstance(effect, FetchBrands):
            self._spawn(self._fetch_brands(effect))
        elif isinstance(effect, FetchModels):
            self._spawn(self._fetch_models(effect))
        elif isinstance(effect, FetchParts):
            self._spawn(self._fetch_parts(effect))
        else:
            logger.warning(f"Unhandled navigator effect: {effect!r}")

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch_brands(self, effect: FetchBrands) -> None:
        with log_context(device_type=effect.device_type, nav_level="brands"):
            try:
                brands = await self._get_brands(effect.device_type)
            except Exception as e:
                logger.warning(f"Loading brands for {effect.device_type} failed: {e}")
                self.dispatch(BrandsFailed(effect.device_type, str(e)))
                return
        self.dispatch(BrandsLoaded(effect.device_type, tuple(brands)))

    async def _fetch_models(self, effect: FetchModels) -> None:
        with log_context(device_type=effect.device_type, brand=effect.brand, nav_level="models"):
            try:
                records = await self._get_models(effect.device_type, effect.brand)
                models = tuple(to_model_entry(record) for record in records)
            except Exception as e:
                logger.warning(f"Loading models for {effect.brand} failed: {e}")
                self.dispatch(ModelsFailed(effect.device_type, effect.brand, str(e)))
                return
        self.dispatch(ModelsLoaded(effect.device_type, effect.brand, models))

    async def _fetch_parts(self, effect: FetchParts) -> None:
        with log_context(device_type=effect.device_type, brand=effect.brand, model=effect.model, nav_level="parts"):
            try:
                parts = await self._get_parts(effect.device_type, effect.brand, effect.model)
            except Exception as e:
                logger.warning(f"Loading parts for {effect.model} failed: {e}")
                self.dispatch(PartsFailed(effect.device_type, effect.brand, effect.model, str(e)))
                return
        self.dispatch(PartsLoaded(effect.device_type, effect.brand, effect.model, tuple(parts)))

    async def join(self) -> None:
        """Wait until every in-flight lookup has answered"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Tear down: cancel both timers and ignore late lookups"""
        if self._closed:
            return
        self.dispatch(TornDown())
        self._scheduler.cancel_all()
        self._closed = True
