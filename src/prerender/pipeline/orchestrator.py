# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Drive discovery, caching, rendering and output for component fragments."""

from __future__ import annotations

from pathlib import Path

from ..cache import ContentCache
from ..compiler import ComponentCompiler, ModuleContext
from ..config import PrerenderConfig, RendererKind
from ..discovery import ComponentDiscovery
from ..errors import PrerenderError, UtilityCompilerError, WriteFailure
from ..extract import clean_html, extract_classes, extract_fragment, minify_html
from ..filesystem import display_relative_path, remove_file, write_text_atomic
from ..logging import ConsoleLogger
from ..models import (
    ComponentOutcome,
    ComponentState,
    PassReport,
    SourceComponent,
    logical_name,
)
from ..rendering import FullRenderer, Renderer, build_renderers
from ..stylesheet import (
    StylesheetGenerator,
    UtilityCompiler,
    build_compiler,
    ledger_path,
    read_ledger,
    write_ledger,
)
from .watch import WatchEvent, WatchEventKind, WatchEventQueue


class PipelineOrchestrator:
    """Own the cache and stylesheet generator for one project root.

    Each component moves through :class:`ComponentState` independently; any
    error raised while processing it is logged and recorded on its outcome
    without affecting the remaining components.
    """

    def __init__(
        self,
        config: PrerenderConfig,
        root: Path,
        logger: ConsoleLogger,
        *,
        renderers: tuple[Renderer, ...] | None = None,
        context: ModuleContext | None = None,
        compiler: ComponentCompiler | None = None,
        utility_compiler: UtilityCompiler | None = None,
    ) -> None:
        """Create an orchestrator for ``root``.

        Args:
            config: Resolved pipeline configuration.
            root: Project root that relative config paths resolve against.
            logger: Logger shared with every collaborator.
            renderers: Explicit fallback chain; built from ``config.renderer``
                when omitted.
            context: Module context handed to the full renderer.
            compiler: Component compiler for the structural renderer.
            utility_compiler: Utility CSS compiler; selected from
                ``config.utility`` when omitted.
        """

        self._config = config
        self._root = root.resolve()
        self._logger = logger
        self._components_dir = config.components_path(self._root)
        self._output_dir = config.output_path(self._root)
        self._renderers = renderers or build_renderers(
            config.renderer,
            logger=logger,
            context=context,
            compiler=compiler,
        )
        self._cache = ContentCache(config.cache_file(self._root))
        self._discovery = ComponentDiscovery(
            self._root,
            extensions=config.extensions,
            exclude=config.exclude,
        )
        self._stylesheet = StylesheetGenerator(
            utility_compiler or build_compiler(config.utility, root=self._root),
            config.utility,
            logger,
            generate_utility_css=config.generate_utility_css,
        )
        self._events = WatchEventQueue()

    @property
    def config(self) -> PrerenderConfig:
        return self._config

    @property
    def cache(self) -> ContentCache:
        return self._cache

    @property
    def stylesheet(self) -> StylesheetGenerator:
        return self._stylesheet

    @property
    def events(self) -> WatchEventQueue:
        return self._events

    @property
    def discovery(self) -> ComponentDiscovery:
        return self._discovery

    @property
    def components_dir(self) -> Path:
        return self._components_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def stylesheet_path(self) -> Path:
        return self._output_dir / self._config.stylesheet_name

    def fragment_path(self, name: str) -> Path:
        """Return the fragment location for component ``name``."""

        return self._output_dir / f"{name}.html"

    def attach_context(self, context: ModuleContext | None) -> None:
        """Attach a module context to every full renderer in the chain."""

        for renderer in self._renderers:
            if isinstance(renderer, FullRenderer):
                renderer.attach(context)

    # ------------------------------------------------------------------
    # Full pass

    def run_pass(self) -> PassReport:
        """Process every discovered component, then emit CSS and save the cache.

        Returns:
            PassReport: Per-component outcomes and the stylesheet location.

        Raises:
            SourceNotFoundError: If the components directory is missing.
        """

        if self._config.cache:
            self._cache.load()
        self._stylesheet.clear()
        paths = self._discovery.discover(self._components_dir)
        self._logger.info(f"Found {len(paths)} component(s) in {self._relative(self._components_dir)}")

        report = PassReport()
        for path in paths:
            report.outcomes.append(self.process_component(path))

        report.stylesheet = self._emit_stylesheet()
        self._save_cache()
        self._logger.ok(
            f"Prerendered {len(report.rendered)} component(s), "
            f"{len(report.cached)} cached, {len(report.failed)} failed",
        )
        return report

    def process_component(self, path: Path) -> ComponentOutcome:
        """Move one component from discovery to a terminal state."""

        name = logical_name(path)
        outcome = ComponentOutcome(path=path, name=name)
        fragment = self.fragment_path(name)
        display = self._relative(path)

        try:
            source = SourceComponent.read(path)
        except OSError as exc:
            return self._fail(outcome, display, f"unable to read source: {exc}")

        key = self._cache_key(path)
        if self._config.cache and self._cache.is_cached(key, source.hash):
            if fragment.is_file():
                self._restore_contributions(name, fragment)
                outcome.state = ComponentState.CACHED
                outcome.output = fragment
                self._logger.debug(f"component={name} state=cached")
                return outcome
            self._logger.debug(f"component={name} state=stale reason=missing-fragment")

        outcome.state = ComponentState.RENDERING
        try:
            html, kind = self._render(path, name)
            if html is None:
                return self._fail(outcome, display, "no renderer produced output")
            outcome.state = ComponentState.RENDERED
            outcome.renderer = kind

            outcome.state = ComponentState.EXTRACTING
            rendered = extract_fragment(name, html)
            cleaned = clean_html(rendered.html)
            classes = extract_classes(cleaned)
            output = minify_html(cleaned) if self._config.minify else cleaned

            write_text_atomic(fragment, output)
            write_ledger(self._output_dir, name, "\n\n".join(block.css for block in rendered.styles))
        except PrerenderError as exc:
            return self._fail(outcome, display, str(exc))
        except Exception as exc:  # noqa: BLE001 - collaborators raise arbitrary types
            return self._fail(outcome, display, f"{type(exc).__name__}: {exc}")

        self._stylesheet.discard(name)
        self._stylesheet.add_classes(classes, owner=name)
        self._stylesheet.add_styles(rendered.styles)
        if self._config.cache:
            self._cache.set(key, source.hash)

        outcome.state = ComponentState.WRITTEN
        outcome.output = fragment
        self._logger.ok(f"Rendered {display} -> {self._relative(fragment)}")
        self._logger.debug(
            f"component={name} renderer={kind.value} classes={len(classes)} styles={len(rendered.styles)}",
        )
        return outcome

    # ------------------------------------------------------------------
    # Watch mode

    def handle_change(self, path: Path) -> None:
        self._events.put(WatchEvent(WatchEventKind.CHANGE, path))

    def handle_add(self, path: Path) -> None:
        self._events.put(WatchEvent(WatchEventKind.ADD, path))

    def handle_remove(self, path: Path) -> None:
        self._events.put(WatchEvent(WatchEventKind.REMOVE, path))

    def drain_events(self) -> list[ComponentOutcome]:
        """Process queued watch events, then regenerate CSS and save the cache.

        Returns:
            list[ComponentOutcome]: Outcomes for change/add events.
        """

        events = [event for event in self._events.drain() if self._discovery.matches(event.path)]
        if not events:
            return []
        if self._config.cache:
            self._cache.load()

        outcomes: list[ComponentOutcome] = []
        for event in events:
            if event.kind is WatchEventKind.REMOVE:
                self.remove_component(event.path)
                continue
            self._logger.info(f"Component {event.kind.value}: {self._relative(event.path)}")
            outcomes.append(self.process_component(event.path))

        self._emit_stylesheet()
        self._save_cache()
        return outcomes

    def remove_component(self, path: Path) -> None:
        """Forget a deleted source: cache entry, fragment and recorded styles."""

        name = logical_name(path)
        self._cache.delete(self._cache_key(path))
        remove_file(self.fragment_path(name))
        remove_file(ledger_path(self._output_dir, name))
        self._stylesheet.discard(name)
        self._logger.info(f"Component removed: {self._relative(path)}")

    def clear_cache(self) -> bool:
        """Delete the persisted cache file; return whether one existed."""

        self._cache.clear()
        return remove_file(self._cache.path)

    # ------------------------------------------------------------------
    # Internals

    def _render(self, path: Path, name: str) -> tuple[str | None, RendererKind | None]:
        for index, renderer in enumerate(self._renderers):
            self._logger.debug(f"component={name} renderer={renderer.kind.value}")
            html = renderer.render(path)
            if html is not None:
                return html, renderer.kind
            if index + 1 < len(self._renderers):
                self._logger.warn(f"{renderer.kind.value} renderer skipped {name}; falling back")
        return None, None

    def _restore_contributions(self, name: str, fragment: Path) -> None:
        try:
            html = fragment.read_text(encoding="utf-8")
        except OSError as exc:
            self._logger.warn(f"Unable to read {self._relative(fragment)}: {exc}")
            return
        self._stylesheet.discard(name)
        self._stylesheet.add_classes(extract_classes(html), owner=name)
        block = read_ledger(self._output_dir, name)
        if block is not None:
            self._stylesheet.add_styles([block])

    def _fail(self, outcome: ComponentOutcome, display: str, reason: str) -> ComponentOutcome:
        outcome.state = ComponentState.FAILED
        outcome.error = reason
        self._logger.fail(f"Failed to prerender {display}: {reason}")
        fragment = self.fragment_path(outcome.name)
        if fragment.is_file():
            self._restore_contributions(outcome.name, fragment)
        return outcome

    def _emit_stylesheet(self) -> Path | None:
        try:
            written = self._stylesheet.generate(self.stylesheet_path)
            if self._config.css_modules:
                self._stylesheet.generate_modules(self._output_dir)
        except (UtilityCompilerError, WriteFailure) as exc:
            self._logger.fail(f"Stylesheet generation failed: {exc}")
            return None
        return written

    def _save_cache(self) -> None:
        if not self._config.cache:
            return
        try:
            self._cache.save()
        except WriteFailure as exc:
            self._logger.fail(f"Unable to persist cache: {exc}")

    def _cache_key(self, path: Path) -> str:
        return display_relative_path(path, self._root)

    def _relative(self, path: Path) -> str:
        return display_relative_path(path, self._root)


__all__ = ["PipelineOrchestrator"]
