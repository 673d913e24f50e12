"""Search for the assignment that makes groups most similar.

The SearchController repeatedly asks a CandidateGenerator for an
assignment, rejects candidates that violate the nominal tolerances, scores
the rest with the SimilarityObjective and keeps the best one. The search
state is an immutable value that is replaced at every step, so a cancelled
search can be continued from the state it returned.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

import numpy as np
import pandas as pd
from pydantic import ValidationError

from mindiff.config.search import SearchConfig
from mindiff.errors import ConfigurationError, IncompatiblePriorError
from mindiff.grouping.balance import BalanceChecker
from mindiff.grouping.equalizers import EqualizerSpec
from mindiff.grouping.generator import CandidateGenerator, SearchMode
from mindiff.grouping.labels import Labels, count_permutations, group_sizes, make_labels
from mindiff.grouping.objective import SimilarityObjective
from mindiff.io import CsvSink, TableSink

logger = logging.getLogger(__name__)


class SearchStatus(StrEnum):
    """Reason a search terminated."""

    SUCCESS = "success"
    """Random mode evaluated the requested number of candidates."""
    EXHAUSTED = "exhausted"
    """Exact mode enumerated every distinct assignment."""
    NO_CRITERIA = "no_criteria"
    """Nominal-only search accepted the first balanced candidate."""
    CANCELLED = "cancelled"
    """Stopped by request or time limit."""
    ATTEMPTS_EXCEEDED = "attempts_exceeded"
    """Too many consecutive candidates violated the nominal tolerances."""


@dataclass(frozen=True, eq=False)
class SearchState:
    """Snapshot of a search between two iterations.

    Attributes
    ----------
    mode : {"random", "exact"}
        Search mode.
    best_assignment : Labels | None
        Best assignment found so far, None until one is accepted.
    best_score : float
        Score of ``best_assignment`` (``inf`` before the first one).
    iteration : int
        Evaluated candidates in random mode; sequence steps (including
        rejected candidates) in exact mode.
    attempts : int
        All generated candidates, rejected ones included.
    best_iteration : int | None
        Iteration at which the best assignment was found.
    cursor : Labels | None
        Exact mode: last emitted permutation.
    """

    mode: SearchMode
    best_assignment: Labels | None = None
    best_score: float = math.inf
    iteration: int = 0
    attempts: int = 0
    best_iteration: int | None = None
    cursor: Labels | None = None

    def attempt(self, cursor: Labels | None = None) -> SearchState:
        """Count a generated candidate."""
        return replace(
            self,
            attempts=self.attempts + 1,
            cursor=cursor if cursor is not None else self.cursor,
        )

    def advance(self) -> SearchState:
        """Count an iteration."""
        return replace(self, iteration=self.iteration + 1)

    def improve(self, assignment: Labels, score: float) -> SearchState:
        """Adopt ``assignment`` as the new best."""
        return replace(
            self,
            best_assignment=np.array(assignment, copy=True),
            best_score=score,
            best_iteration=self.iteration,
        )


@dataclass(frozen=True, eq=False)
class SearchResult:
    """Outcome of a search.

    Attributes
    ----------
    state : SearchState
        Final search state.
    status : SearchStatus
        Termination reason.
    table : pd.DataFrame
        Copy of the input with the group column; the column is missing
        (``<NA>``) for every row when no balanced assignment was found.
    elapsed : float
        Wall-clock seconds spent in the search.
    """

    state: SearchState
    status: SearchStatus
    table: pd.DataFrame
    elapsed: float

    @property
    def assignment(self) -> Labels | None:
        """Best assignment, or None."""
        return self.state.best_assignment

    @property
    def score(self) -> float:
        """Score of the best assignment."""
        return self.state.best_score

    @property
    def iterations(self) -> int:
        """Number of iterations performed."""
        return self.state.iteration

    @property
    def is_feasible(self) -> bool:
        """Whether an assignment satisfying the nominal tolerances was found."""
        return self.state.best_assignment is not None


class SearchController:
    """Runs the assignment search on a table.

    Parameters
    ----------
    data : pd.DataFrame
        Items (rows) and their attributes (columns). Never modified.
    config : SearchConfig
        Criteria, tolerances, equalizers and search mode.
    prior_assignment : array-like | None, default=None
        Group label per row from a previous run; scored as the initial best.
    sink : TableSink | None, default=None
        Receives the table with the best assignment whenever it improves.
    on_iteration : Callable[[SearchState], None] | None, default=None
        Called after every iteration, e.g. to drive a progress bar.

    Raises
    ------
    ConfigurationError
        If the input is not a DataFrame, a criterion is not a column, no
        criterion is given, a scale criterion is not numeric or ``sets_n``
        exceeds the number of rows.
    IncompatiblePriorError
        If the prior assignment does not match the table or ``sets_n``.

    Examples
    --------
    >>> import pandas as pd
    >>> data = pd.DataFrame({"score": [10, 10, 20, 20]})
    >>> config = SearchConfig(sets_n=2, criteria_scale=["score"], exact=True)
    >>> result = SearchController(data, config).run()
    >>> result.score
    0.0
    """

    def __init__(
        self,
        data: pd.DataFrame,
        config: SearchConfig,
        prior_assignment: Sequence[Any] | np.ndarray[Any, Any] | pd.Series | None = None,
        sink: TableSink | None = None,
        on_iteration: Callable[[SearchState], None] | None = None,
    ) -> None:
        self._validate_data(data, config)

        self.data = data
        self.config = config
        self.sink = sink
        self.on_iteration = on_iteration

        self.labels = make_labels(len(data), config.sets_n)
        self.objective = (
            SimilarityObjective(
                [self._numeric_column(data, name) for name in config.criteria_scale],
                config.equalize,
            )
            if config.criteria_scale
            else None
        )
        self.checker = (
            BalanceChecker(
                [data[name] for name in config.criteria_nominal],
                config.tolerance_nominal,
            )
            if config.criteria_nominal
            else None
        )
        self.prior = self._validate_prior(prior_assignment)

        # iterations to run; the permutation count can be astronomically large
        self.budget = (
            count_permutations(group_sizes(self.labels))
            if config.exact
            else config.repetitions
        )

        self._rng = np.random.default_rng(config.random_seed)
        self._stop = threading.Event()

    @staticmethod
    def _validate_data(data: pd.DataFrame, config: SearchConfig) -> None:
        if not isinstance(data, pd.DataFrame):
            raise ConfigurationError(
                f"data must be a pandas DataFrame, not {type(data).__name__}"
            )
        if len(data) == 0:
            raise ConfigurationError("data must contain at least one row")

        if not config.criteria_scale and not config.criteria_nominal:
            raise ConfigurationError(
                "no assignment criterion was passed; give scale and/or "
                "nominal criteria"
            )

        for name in [*config.criteria_scale, *config.criteria_nominal]:
            if name not in data.columns:
                raise ConfigurationError(f"`{name}` is not a column in the data")

        if config.sets_n > len(data):
            raise ConfigurationError(
                f"sets_n ({config.sets_n}) exceeds the number of items ({len(data)})"
            )

        if len(data) % config.sets_n != 0:
            logger.warning(
                f"Set number ({config.sets_n}) does not divide length of data "
                f"({len(data)}). New sets will have unequal sizes."
            )

        criteria = [*config.criteria_scale, *config.criteria_nominal]
        missing = [name for name in criteria if data[name].isna().any()]
        if missing:
            logger.warning(
                f"Missing values were found in assignment criteria: {', '.join(missing)}"
            )

    @staticmethod
    def _numeric_column(data: pd.DataFrame, name: str) -> np.ndarray[Any, Any]:
        try:
            return pd.to_numeric(data[name], errors="raise").to_numpy(dtype=np.float64)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"scale criterion `{name}` must be numeric: {e}"
            ) from e

    def _validate_prior(
        self, prior: Sequence[Any] | np.ndarray[Any, Any] | pd.Series | None
    ) -> np.ndarray[Any, Any] | None:
        if prior is None:
            return None

        values = pd.Series(prior)
        if len(values) != len(self.data):
            raise IncompatiblePriorError(
                f"prior assignment has {len(values)} labels, data has "
                f"{len(self.data)} rows"
            )
        if values.isna().any():
            raise IncompatiblePriorError("prior assignment contains missing labels")

        n_labels = values.nunique()
        if n_labels != self.config.sets_n:
            raise IncompatiblePriorError(
                f"number of different groups in the prior assignment ({n_labels}) "
                f"is not equal to sets_n ({self.config.sets_n})",
                n_labels=n_labels,
                sets_n=self.config.sets_n,
            )
        return values.to_numpy()

    def stop(self) -> None:
        """Ask a running search to stop after the current iteration."""
        self._stop.set()

    def initial_state(self) -> SearchState:
        """Build the state a fresh search starts from.

        A prior assignment becomes the initial best with its own score
        (0.0 for nominal-only searches).
        """
        state = SearchState(mode=self.config.mode)
        if self.prior is not None:
            logger.info("Prior assignment found, trying to improve it")
            score = self.objective.score(self.prior) if self.objective else 0.0
            state = replace(
                state, best_assignment=self.prior.copy(), best_score=score
            )
        return state

    def evaluate(self, assignment: Labels) -> float | None:
        """Check and score a single assignment.

        Returns
        -------
        float | None
            None if the assignment violates the nominal tolerances, else
            its score (0.0 without scale criteria).
        """
        if self.checker is not None and not self.checker.check(assignment):
            return None
        if self.objective is None:
            return 0.0
        return self.objective.score(assignment)

    def build_table(self, assignment: np.ndarray[Any, Any] | None) -> pd.DataFrame:
        """Return a copy of the data with ``assignment`` as group column."""
        table = self.data.copy()
        column = self.config.group_column
        if assignment is None:
            table[column] = pd.Series(pd.NA, index=table.index, dtype="Int64")
        elif np.issubdtype(np.asarray(assignment).dtype, np.integer):
            table[column] = pd.array(assignment, dtype="Int64")
        else:
            table[column] = np.asarray(assignment)
        return table

    def run(self, state: SearchState | None = None) -> SearchResult:
        """Run the search.

        Parameters
        ----------
        state : SearchState | None, default=None
            State returned by an earlier, interrupted run to continue from.
            A fresh state (see ``initial_state``) is used when None.

        Returns
        -------
        SearchResult
            Best assignment, its score and the termination reason.
        """
        self._stop.clear()
        state = state if state is not None else self.initial_state()
        started = time.perf_counter()
        deadline = (
            started + self.config.time_limit if self.config.time_limit else None
        )

        logger.info(
            f"Start search: {self.config.mode} mode, {self.config.sets_n} sets, "
            f"{self.budget} iterations"
        )

        generator = CandidateGenerator(
            self.labels, self.config.mode, rng=self._rng, start=state.cursor
        )
        if self.config.exact:
            state, status = self._run_exact(generator, state, deadline)
        elif self.objective is None:
            state, status = self._run_first_balanced(generator, state, deadline)
        elif self.config.n_workers > 1:
            state, status = self._run_random_parallel(generator, state, deadline)
        else:
            state, status = self._run_random(generator, state, deadline)

        elapsed = time.perf_counter() - started
        logger.info(
            f"End search ({status.value}) after {state.iteration} iterations, "
            f"best score {state.best_score:.6g}"
        )
        if state.best_assignment is None:
            logger.warning(
                "No assignment satisfied the nominal tolerances. Relax "
                "tolerance_nominal or increase the number of iterations."
            )

        return SearchResult(
            state=state,
            status=status,
            table=self.build_table(state.best_assignment),
            elapsed=elapsed,
        )

    def _interrupted(self, deadline: float | None) -> bool:
        if self._stop.is_set():
            return True
        return deadline is not None and time.perf_counter() >= deadline

    def _draw_accepted(
        self,
        generator: CandidateGenerator,
        state: SearchState,
        deadline: float | None,
    ) -> tuple[Labels | None, SearchState]:
        """Draw random candidates until one satisfies the nominal tolerances.

        Returns None instead of a candidate when ``max_attempts``
        consecutive candidates were rejected or the search was interrupted.
        """
        rejections = 0
        while True:
            candidate = generator.next()
            state = state.attempt()
            if self.checker is None or self.checker.check(candidate):
                return candidate, state

            rejections += 1
            max_attempts = self.config.max_attempts
            if max_attempts is not None and rejections >= max_attempts:
                logger.debug(f"Gave up after {rejections} rejected candidates")
                return None, state
            if self._interrupted(deadline):
                return None, state

    def _stopped_status(self, deadline: float | None) -> SearchStatus:
        if self._interrupted(deadline):
            return SearchStatus.CANCELLED
        return SearchStatus.ATTEMPTS_EXCEEDED

    def _consider(self, state: SearchState, candidate: Labels, score: float) -> SearchState:
        state = state.advance()
        if score < state.best_score:
            logger.info(f"Improved set similarity on iteration {state.iteration}")
            state = state.improve(candidate, score)
            self._notify(state)
        if self.on_iteration is not None:
            self.on_iteration(state)
        return state

    def _notify(self, state: SearchState) -> None:
        if self.sink is None:
            return
        try:
            self.sink.write(self.build_table(state.best_assignment))
        except Exception as e:
            logger.warning(f"Could not write assignment snapshot: {e}")

    def _run_random(
        self,
        generator: CandidateGenerator,
        state: SearchState,
        deadline: float | None,
    ) -> tuple[SearchState, SearchStatus]:
        assert self.objective is not None
        while state.iteration < self.budget:
            if self._interrupted(deadline):
                return state, SearchStatus.CANCELLED

            candidate, state = self._draw_accepted(generator, state, deadline)
            if candidate is None:
                return state, self._stopped_status(deadline)

            state = self._consider(state, candidate, self.objective.score(candidate))

        return state, SearchStatus.SUCCESS

    def _run_random_parallel(
        self,
        generator: CandidateGenerator,
        state: SearchState,
        deadline: float | None,
    ) -> tuple[SearchState, SearchStatus]:
        """Random search scoring batches of candidates on a thread pool.

        Candidates are drawn from the single random stream in order and
        reduced in iteration order, so the result equals the sequential
        search with the same seed.
        """
        assert self.objective is not None
        with ThreadPoolExecutor(max_workers=self.config.n_workers) as pool:
            while state.iteration < self.budget:
                if self._interrupted(deadline):
                    return state, SearchStatus.CANCELLED

                wanted = min(self.config.batch_size, self.budget - state.iteration)
                batch: list[Labels] = []
                for _ in range(wanted):
                    candidate, state = self._draw_accepted(generator, state, deadline)
                    if candidate is None:
                        break
                    batch.append(candidate)

                scores = list(pool.map(self.objective.score, batch))
                for candidate, score in zip(batch, scores, strict=True):
                    state = self._consider(state, candidate, score)

                if len(batch) < wanted:
                    return state, self._stopped_status(deadline)

        return state, SearchStatus.SUCCESS

    def _run_first_balanced(
        self,
        generator: CandidateGenerator,
        state: SearchState,
        deadline: float | None,
    ) -> tuple[SearchState, SearchStatus]:
        candidate, state = self._draw_accepted(generator, state, deadline)
        if candidate is None:
            return state, self._stopped_status(deadline)
        return self._accept_first(state, candidate), SearchStatus.NO_CRITERIA

    def _accept_first(self, state: SearchState, candidate: Labels) -> SearchState:
        state = state.advance().improve(candidate, 0.0)
        self._notify(state)
        if self.on_iteration is not None:
            self.on_iteration(state)
        return state

    def _run_exact(
        self,
        generator: CandidateGenerator,
        state: SearchState,
        deadline: float | None,
    ) -> tuple[SearchState, SearchStatus]:
        while state.iteration < self.budget:
            if self._interrupted(deadline):
                return state, SearchStatus.CANCELLED

            candidate = generator.next()
            state = state.attempt(cursor=generator.cursor)
            score = self.evaluate(candidate)

            if score is None:
                logger.debug(f"Rejected permutation {state.attempts}")
                state = state.advance()
                if self.on_iteration is not None:
                    self.on_iteration(state)
                continue

            if self.objective is None:
                return self._accept_first(state, candidate), SearchStatus.NO_CRITERIA

            state = self._consider(state, candidate, score)

        return state, SearchStatus.EXHAUSTED


def _as_list(value: str | Sequence[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def create_groups(
    data: pd.DataFrame,
    sets_n: int,
    criteria_scale: str | Sequence[str] | None = None,
    criteria_nominal: str | Sequence[str] | None = None,
    repetitions: int = 1,
    tolerance_nominal: Sequence[float] | None = None,
    equalize: Sequence[EqualizerSpec] | None = None,
    write_file: bool = False,
    *,
    exact: bool = False,
    random_seed: int | None = None,
    prior_assignment: Sequence[Any] | np.ndarray[Any, Any] | pd.Series | None = None,
    sink: TableSink | None = None,
    on_iteration: Callable[[SearchState], None] | None = None,
    **options: Any,
) -> SearchResult:
    """Assign items to ``sets_n`` groups and minimize differences between them.

    Parameters
    ----------
    data : pd.DataFrame
        Items to regroup; all criteria must be columns.
    sets_n : int
        Number of groups to create.
    criteria_scale : str | Sequence[str] | None
        Continuous columns whose equalizer values are matched.
    criteria_nominal : str | Sequence[str] | None
        Up to two categorical columns balanced by frequency.
    repetitions : int, default=1
        Random candidates to evaluate (ignored in exact mode).
    tolerance_nominal : Sequence[float] | None
        Tolerated frequency differences; defaults to ``inf`` everywhere.
    equalize : Sequence[str | Callable] | None
        Equalizers; defaults to ``["mean"]``.
    write_file : bool, default=False
        Write every improvement to ``newSet.csv`` when no ``sink`` is given.
    exact : bool, default=False
        Enumerate all distinct assignments.
    random_seed : int | None
        Random seed.
    prior_assignment : array-like | None
        Assignment from a previous run to improve on.
    sink : TableSink | None
        Receives improved tables.
    on_iteration : Callable[[SearchState], None] | None
        Progress callback.
    **options : Any
        Further ``SearchConfig`` fields (``max_attempts``, ``time_limit``,
        ``n_workers``, ``batch_size``, ``group_column``).

    Returns
    -------
    SearchResult
        Best assignment, score and the augmented table.

    Raises
    ------
    ConfigurationError
        If the configuration is invalid for the data.

    Examples
    --------
    >>> import pandas as pd
    >>> data = pd.DataFrame({"x": [1, 2, 3, 4, 5, 6]})
    >>> result = create_groups(data, 2, "x", repetitions=100, random_seed=1)
    >>> sorted(result.table["new_set"].value_counts().tolist())
    [3, 3]
    """
    fields: dict[str, Any] = {
        "sets_n": sets_n,
        "criteria_scale": _as_list(criteria_scale),
        "criteria_nominal": _as_list(criteria_nominal),
        "repetitions": repetitions,
        "exact": exact,
        "random_seed": random_seed,
        **options,
    }
    if tolerance_nominal is not None:
        fields["tolerance_nominal"] = list(tolerance_nominal)
    if equalize is not None:
        fields["equalize"] = list(equalize)

    try:
        config = SearchConfig(**fields)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e

    if write_file and sink is None:
        sink = CsvSink()

    controller = SearchController(
        data,
        config,
        prior_assignment=prior_assignment,
        sink=sink,
        on_iteration=on_iteration,
    )
    return controller.run()
