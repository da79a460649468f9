"""
Digest engine for codedigest.

This module contains the DigestEngine class that runs the whole pipeline:
resolve the source, build ignore rules, traverse, then format, count and
write every collected file, reporting progress as a stream of states.
"""

import logging
import queue
import threading
from typing import Dict, Iterator, List, Optional

from ..adapters import create_lister
from ..adapters.base import DirectoryLister
from ..utils.ignore_rules import IgnoreRuleSet, read_ignore_rules
from .classifier import ContentClassifier
from .file_analyzer import FileAnalyzer
from .formatter import OutputFormatter
from .models import Config, Error, Processing, ProcessingState, Scanning, Success
from .part_writer import PartWriter
from .tokenizer import TokenCounter
from .traverser import Traverser

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 10

ERR_NO_SOURCE = "No source folder selected."
ERR_NO_FILES = "No matching files found after filtering."
ERR_UNKNOWN = "An unknown error occurred."
ERR_BUSY = "A digest run is already in progress."

_DONE = object()


class DigestEngine:
    """
    Runs digest jobs.

    One engine runs one job at a time; a second ``process`` call while a
    run is active yields a single Error state and leaves the active run
    alone.
    """

    def __init__(self, counter: Optional[TokenCounter] = None,
                 classifier: Optional[ContentClassifier] = None):
        """
        Args:
            counter: Token counter to use for every run. When omitted, one is
                created per encoding name on first use.
            classifier: Content classifier; defaults to ContentClassifier().
        """
        self.counter = counter
        self.classifier = classifier or ContentClassifier()
        self._counters: Dict[str, TokenCounter] = {}
        self._run_lock = threading.Lock()

    def _counter_for(self, config: Config) -> TokenCounter:
        if self.counter is not None:
            return self.counter
        if config.token_encoder not in self._counters:
            self._counters[config.token_encoder] = TokenCounter(config.token_encoder)
        return self._counters[config.token_encoder]

    def process(self, config: Config) -> Iterator[ProcessingState]:
        """
        Run one digest job, yielding states as it goes.

        The stream starts with Scanning, carries a Processing state after
        every tenth processed file, and ends with exactly one Success or
        Error. Closing the generator early closes the open artifact.
        """
        if not self._run_lock.acquire(blocking=False):
            yield Error(ERR_BUSY)
            return
        try:
            yield from self._run(config)
        finally:
            self._run_lock.release()

    def _run(self, config: Config) -> Iterator[ProcessingState]:
        yield Scanning()

        try:
            if not config.source:
                yield Error(ERR_NO_SOURCE)
                return

            lister = create_lister(config)
            ignore_rules = IgnoreRuleSet(self._collect_ignore_patterns(config, lister))
            logger.debug(f"Using {len(ignore_rules)} ignore patterns")

            result = Traverser(self.classifier).walk(lister, config, ignore_rules)
            total_files = len(result.files)
            if total_files == 0:
                yield Error(ERR_NO_FILES)
                return

            counter = self._counter_for(config)
            formatter = OutputFormatter(config.output_format)
            analyzer = FileAnalyzer(config, counter, formatter)
            preamble = formatter.build_preamble(lister.root_name, total_files, result.tree_text)

            with PartWriter(config.output_dir, f"{lister.root_name}_Digest", config.token_limit,
                            preamble, counter) as writer:
                for processed, entry in enumerate(result.files, start=1):
                    section = analyzer.process(entry, lister)
                    if section is not None:
                        content, tokens = section
                        writer.write_content(entry.path, content, tokens)

                    if processed % PROGRESS_INTERVAL == 0:
                        yield Processing(
                            current_file=f"Processing: {entry.name}",
                            progress=processed / total_files,
                            total_files=total_files,
                            processed=processed,
                        )

            files = writer.files
            yield Success(
                files=files,
                total_source_files=total_files,
                total_tokens=writer.total_tokens,
                message=(f"Saved {len(files)} file(s) for {lister.root_name} "
                         f"(~{writer.total_tokens:,} tokens)"),
            )

        except Exception as e:
            logger.debug("Digest run failed", exc_info=True)
            yield Error(str(e) or ERR_UNKNOWN)

    def _collect_ignore_patterns(self, config: Config, lister: DirectoryLister) -> List[str]:
        """Config patterns, then root .gitignore lines, then custom ignore-file lines."""
        patterns = list(config.exclude_patterns)

        if config.use_gitignore:
            gitignore = lister.find_root_file('.gitignore')
            if gitignore is not None:
                try:
                    text = lister.read_bytes(gitignore).decode('utf-8', errors='replace')
                    patterns.extend(read_ignore_rules(text))
                except Exception as e:
                    logger.warning(f"Could not read .gitignore: {e}")

        if config.custom_ignore_file:
            try:
                with open(config.custom_ignore_file, 'r', encoding='utf-8', errors='replace') as f:
                    patterns.extend(read_ignore_rules(f.read()))
            except OSError as e:
                logger.warning(f"Could not read ignore file {config.custom_ignore_file}: {e}")

        return patterns

    def process_in_background(self, config: Config) -> Iterator[ProcessingState]:
        """
        Run ``process`` on a daemon worker thread.

        The worker starts immediately and hands states over an unbounded
        queue, so it never waits for the consumer. The returned iterator
        blocks only while no state is pending.
        """
        states: "queue.Queue[object]" = queue.Queue()

        def _worker() -> None:
            try:
                for state in self.process(config):
                    states.put(state)
            finally:
                states.put(_DONE)

        worker = threading.Thread(target=_worker, name="codedigest-run", daemon=True)
        worker.start()
        return self._drain(states)

    @staticmethod
    def _drain(states: "queue.Queue[object]") -> Iterator[ProcessingState]:
        while True:
            state = states.get()
            if state is _DONE:
                return
            yield state
