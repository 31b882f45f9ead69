# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fetch prerendered fragments and their stylesheets on demand."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Final

import httpx

from ..errors import (
    FragmentNotFoundError,
    ManifestFailure,
    NetworkFailure,
    PrerenderError,
    StylesheetLoadError,
    TargetNotFoundError,
)
from .config import LoaderConfig
from .dom import Document
from .stats import LoadRecord, LoadStats, SecondaryAsset, StatsTracker
from .viewport import Observation, ResourceEntry, ResourceTimingSource, Viewport

_LOGGER = logging.getLogger(__name__)

RESOURCE_START_TOLERANCE: Final[float] = 0.05
HTTP_NOT_FOUND: Final[int] = 404


class LazyFragmentLoader:
    """Load prerendered component fragments with caching and retries.

    HTML is cached per component name; stylesheets are fetched at most once
    per session, and concurrent loads share one fetch per stylesheet URL so a
    load only waits on the stylesheets it needs. A failed manifest fetch switches CSS-modules mode off for the
    rest of the session and the shared legacy stylesheet is used instead.
    """

    def __init__(
        self,
        config: LoaderConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        origin: str | None = None,
        document: Document | None = None,
        viewport: Viewport | None = None,
        resources: ResourceTimingSource | None = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config or LoaderConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=origin or "")
        self._document = document
        self._viewport = viewport
        self._resources = resources
        self._clock = clock
        self._sleep = sleep

        self._html_cache: dict[str, str] = {}
        self._observers: dict[str, Observation] = {}
        self._inflight: dict[str, asyncio.Task[str]] = {}
        self._pending: set[asyncio.Task[None]] = set()
        self._resource_watches: list[tuple[Observation, asyncio.TimerHandle]] = []
        self._css_modules = self._config.css_modules
        self._manifest: dict[str, str] | None = None
        self._css_tasks: dict[str, asyncio.Task[bool]] = {}
        self._stats = StatsTracker()
        self._log("LazyFragmentLoader initialised base_url=%s css_modules=%s", self._config.base_url, self._css_modules)

    @property
    def config(self) -> LoaderConfig:
        return self._config

    @property
    def css_modules(self) -> bool:
        """Return whether per-component stylesheets are currently in use."""

        return self._css_modules

    def _log(self, message: str, *args: Any) -> None:
        if self._config.debug:
            _LOGGER.debug(message, *args)

    # ------------------------------------------------------------------
    # Fetching

    async def fetch_with_retry(self, url: str) -> httpx.Response:
        """GET ``url`` retrying transient failures with linear backoff.

        Raises:
            FragmentNotFoundError: On HTTP 404; never retried.
            NetworkFailure: When every attempt failed.
        """

        attempts = max(1, self._config.max_retries if self._config.enable_retry else 1)
        attempt = 1
        while True:
            self._log("Fetching %s (attempt %d/%d)", url, attempt, attempts)
            try:
                response = await self._client.get(url)
            except httpx.RequestError as exc:
                failure = NetworkFailure(url, f"Request to {url} failed: {exc}")
            else:
                if response.is_success:
                    return response
                if response.status_code == HTTP_NOT_FOUND:
                    raise FragmentNotFoundError(url, f"Not found: {url}", status_code=HTTP_NOT_FOUND)
                failure = NetworkFailure(
                    url,
                    f"HTTP {response.status_code}: {response.reason_phrase}",
                    status_code=response.status_code,
                )
            if attempt >= attempts:
                raise failure
            self._log("Fetch of %s failed (%s), retrying", url, failure)
            await self._sleep(self._config.retry_delay * attempt)
            attempt += 1

    async def load(self, name: str) -> str:
        """Return the HTML fragment for ``name``.

        Raises:
            NetworkFailure: If the fragment cannot be fetched.
        """

        if self._config.cache_html and name in self._html_cache:
            return self._load_cached(name)

        task = self._inflight.get(name)
        if task is None:
            task = asyncio.ensure_future(self._load_remote(name))
            self._inflight[name] = task
            task.add_done_callback(lambda done: self._forget_inflight(name, done))
        return await asyncio.shield(task)

    def _forget_inflight(self, name: str, task: asyncio.Task[str]) -> None:
        if self._inflight.get(name) is task:
            del self._inflight[name]

    def _load_cached(self, name: str) -> str:
        start = self._clock()
        html = self._html_cache[name]
        self._stats.cache_hits += 1
        record = LoadRecord(
            component_name=name,
            duration=(self._clock() - start) * 1000,
            bytes=len(html.encode("utf-8")),
            from_cache=True,
            timestamp=time.time(),
        )
        self._stats.record(record)
        self._log("Cache hit: %s", name)
        if self._config.on_load is not None:
            self._config.on_load(name, record)
        return html

    async def _load_remote(self, name: str) -> str:
        start = self._clock()
        self._stats.cache_misses += 1
        try:
            await self._ensure_stylesheets(name)
            response = await self.fetch_with_retry(self._config.fragment_url(name))
        except NetworkFailure as exc:
            self._stats.errors += 1
            self._log("Error loading %s: %s", name, exc)
            self._notify_error(name, exc)
            raise

        html = response.text
        if self._config.cache_html:
            self._html_cache[name] = html
        record = LoadRecord(
            component_name=name,
            duration=(self._clock() - start) * 1000,
            bytes=len(html.encode("utf-8")),
            from_cache=False,
            timestamp=time.time(),
        )
        self._stats.record(record)
        self._log("Loaded %s in %.2fms (%d bytes)", name, record.duration, record.bytes)
        self._observe_resources(start, record)
        if self._config.on_load is not None:
            self._config.on_load(name, record)
        return html

    def _notify_error(self, name: str, error: Exception) -> None:
        if self._config.on_error is not None:
            self._config.on_error(name, error)

    # ------------------------------------------------------------------
    # Stylesheets

    async def _ensure_stylesheets(self, name: str) -> None:
        if self._css_modules:
            await self._shared(self._config.manifest_url or "", self._load_manifest)
        if self._css_modules and self._manifest is not None:
            await self._load_modules_css(name)
        else:
            legacy = self._config.legacy_css_url or ""
            await self._shared(legacy, lambda: self._try_stylesheet(legacy, "legacy CSS"))

    async def _shared(self, key: str, factory: Callable[[], Awaitable[bool]]) -> bool:
        """Run ``factory`` once per ``key``; concurrent callers await the same task.

        A task that fails or reports ``False`` is forgotten so a later load
        retries it.
        """

        task = self._css_tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._css_tasks[key] = task
            task.add_done_callback(lambda done: self._settle_css_task(key, done))
        return await asyncio.shield(task)

    def _settle_css_task(self, key: str, task: asyncio.Task[bool]) -> None:
        if task.cancelled() or task.exception() is not None or not task.result():
            if self._css_tasks.get(key) is task:
                del self._css_tasks[key]

    async def _load_manifest(self) -> bool:
        start = self._clock()
        url = self._config.manifest_url or ""
        try:
            self._manifest = await self._fetch_manifest(url)
        except ManifestFailure as exc:
            _LOGGER.error("Failed to load CSS manifest: %s", exc)
            self._css_modules = False
            return True
        duration = (self._clock() - start) * 1000
        self._log("Manifest loaded in %.2fms", duration)
        if self._config.on_css_load is not None:
            self._config.on_css_load(url, duration)
        return True

    async def _fetch_manifest(self, url: str) -> dict[str, str]:
        try:
            response = await self.fetch_with_retry(url)
            payload = response.json()
        except NetworkFailure as exc:
            raise ManifestFailure(url, str(exc), status_code=exc.status_code) from exc
        except ValueError as exc:
            raise ManifestFailure(url, f"Invalid manifest JSON: {exc}") from exc
        components = payload.get("components") if isinstance(payload, dict) else None
        if not isinstance(components, dict):
            raise ManifestFailure(url, "Manifest has no 'components' mapping")
        return {str(key): str(value) for key, value in components.items()}

    async def _load_modules_css(self, name: str) -> None:
        base = self._config.base_css_url or ""
        await self._shared(base, lambda: self._try_stylesheet(base, "base CSS"))

        css_file = (self._manifest or {}).get(name)
        if not css_file:
            self._log("No CSS file for component: %s", name)
            return
        url = self._config.asset_url(css_file)
        await self._shared(url, lambda: self._try_stylesheet(url, f"CSS for {name}"))

    async def _try_stylesheet(self, url: str, label: str) -> bool:
        try:
            await self._load_stylesheet(url)
        except StylesheetLoadError as exc:
            _LOGGER.warning("Failed to load %s: %s", label, exc)
            return False
        return True

    async def _load_stylesheet(self, url: str) -> None:
        start = self._clock()
        try:
            await self.fetch_with_retry(url)
        except NetworkFailure as exc:
            raise StylesheetLoadError(url, str(exc), status_code=exc.status_code) from exc
        if self._document is not None:
            if self._config.preload_css:
                self._document.add_stylesheet(url, rel="preload")
            self._document.add_stylesheet(url)
        duration = (self._clock() - start) * 1000
        self._log("Stylesheet %s loaded in %.2fms", url, duration)
        if self._config.on_css_load is not None:
            self._config.on_css_load(url, duration)

    # ------------------------------------------------------------------
    # Secondary resources

    def _observe_resources(self, start: float, record: LoadRecord) -> None:
        if self._resources is None:
            return

        def _collect(entry: ResourceEntry) -> None:
            if entry.start_time < start - RESOURCE_START_TOLERANCE:
                return
            asset = SecondaryAsset(
                url=entry.name,
                bytes=entry.size,
                duration=entry.duration,
                type=entry.initiator_type,
            )
            record.secondary_assets.append(asset)
            self._stats.total_bytes += asset.bytes

        try:
            observation = self._resources.subscribe(_collect)
        except (NotImplementedError, RuntimeError) as exc:
            self._log("Resource timing unavailable: %s", exc)
            return
        handle = asyncio.get_running_loop().call_later(
            self._config.resource_window,
            self._end_resource_watch,
            observation,
        )
        self._resource_watches.append((observation, handle))

    def _end_resource_watch(self, observation: Observation) -> None:
        observation.disconnect()
        self._resource_watches = [entry for entry in self._resource_watches if entry[0] is not observation]

    # ------------------------------------------------------------------
    # DOM

    async def inject(self, name: str, selector: str) -> None:
        """Load ``name`` and write it into the element matching ``selector``.

        Raises:
            NetworkFailure: If the fragment cannot be fetched.
            TargetNotFoundError: If ``selector`` matches nothing.
        """

        html = await self.load(name)
        target = self._document.query(selector) if self._document is not None else None
        if target is None:
            error = TargetNotFoundError(selector)
            self._notify_error(name, error)
            raise error
        self._document.set_inner_html(target, html)
        self._log("Injected %s into %s", name, selector)

    async def observe_and_load(self, name: str, selector: str, *, root_margin: str | None = None) -> None:
        """Inject ``name`` once ``selector`` enters the viewport.

        Without a viewport capability the fragment is injected immediately.
        Failures are logged and reported through ``on_error`` only.
        """

        target = self._document.query(selector) if self._document is not None else None
        if target is None:
            _LOGGER.warning("Target element not found: %s", selector)
            return
        if self._viewport is None:
            await self._inject_quietly(name, selector)
            return

        previous = self._observers.pop(name, None)
        if previous is not None:
            previous.disconnect()

        def _on_visible() -> None:
            observation = self._observers.pop(name, None)
            if observation is not None:
                observation.disconnect()
            self._log("Component %s entered viewport", name)
            task = asyncio.get_running_loop().create_task(self._inject_quietly(name, selector))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        self._observers[name] = self._viewport.observe(
            target,
            _on_visible,
            root_margin=root_margin or self._config.root_margin,
        )
        self._log("Observing %s at %s", name, selector)

    async def _inject_quietly(self, name: str, selector: str) -> None:
        try:
            await self.inject(name, selector)
        except PrerenderError as exc:
            _LOGGER.error("Failed to inject %s: %s", name, exc)

    async def settle(self) -> None:
        """Wait for injections triggered by the viewport to finish."""

        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ------------------------------------------------------------------
    # Preloading, stats and housekeeping

    async def preload(self, name: str) -> None:
        await self.load(name)

    async def preload_batch(self, names: Iterable[str]) -> None:
        """Load every name in ``names`` concurrently."""

        names = list(names)
        self._log("Preloading %d components", len(names))
        await asyncio.gather(*(self.preload(name) for name in names))

    def get_stats(self) -> LoadStats:
        return self._stats.snapshot()

    def get_detailed_history(self) -> list[LoadRecord]:
        """Return the latest load record per component, newest first."""

        return self._stats.detailed_history()

    def clear_cache(self) -> None:
        self._html_cache.clear()
        self._log("HTML cache cleared")

    def clear_css_cache(self) -> None:
        """Forget loaded stylesheets and the manifest so they are fetched again."""

        self._css_tasks.clear()
        self._manifest = None
        self._log("CSS cache cleared")

    def disconnect_all(self) -> None:
        """Disconnect every pending viewport observation."""

        for observation in self._observers.values():
            observation.disconnect()
        self._observers.clear()
        self._log("All observers disconnected")

    def reset(self) -> None:
        """Clear caches, observers and statistics."""

        self.clear_cache()
        self.clear_css_cache()
        self.disconnect_all()
        for observation, handle in self._resource_watches:
            handle.cancel()
            observation.disconnect()
        self._resource_watches.clear()
        self._stats.reset()
        self._log("LazyFragmentLoader reset")

    async def aclose(self) -> None:
        """Cancel pending work and close the HTTP client when owned."""

        for task in [*self._pending, *self._css_tasks.values()]:
            task.cancel()
        self._pending.clear()
        self.reset()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> LazyFragmentLoader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_lazy_loader(
    config: LoaderConfig | None = None,
    *,
    origin: str | None = None,
    client: httpx.AsyncClient | None = None,
    document: Document | None = None,
    viewport: Viewport | None = None,
    resources: ResourceTimingSource | None = None,
) -> LazyFragmentLoader:
    """Return a :class:`LazyFragmentLoader`.

    Args:
        config: Loader options; defaults are used when omitted.
        origin: Base URL for a client created on the caller's behalf.
        client: Existing HTTP client; takes precedence over ``origin``.
        document: Document fragments are injected into.
        viewport: Viewport capability used by ``observe_and_load``.
        resources: Resource-timing feed for secondary asset statistics.
    """

    return LazyFragmentLoader(
        config,
        client=client,
        origin=origin,
        document=document,
        viewport=viewport,
        resources=resources,
    )


__all__ = ["LazyFragmentLoader", "create_lazy_loader"]
