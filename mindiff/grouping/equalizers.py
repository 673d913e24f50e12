"""Summary statistics whose per-group values are matched across groups.

An equalizer maps a sequence of numbers to a single number. Equalizers are
referred to by name (looked up in a registry) or passed as callables.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np

from mindiff.errors import ConfigurationError

type Equalizer = Callable[[np.ndarray], float]
type EqualizerSpec = str | Equalizer


def _sd(values: np.ndarray) -> float:
    if len(values) < 2:
        return float("nan")
    return float(np.std(values, ddof=1))


def _var(values: np.ndarray) -> float:
    if len(values) < 2:
        return float("nan")
    return float(np.var(values, ddof=1))


def _guard(func: Callable[[np.ndarray], np.floating]) -> Equalizer:
    def equalizer(values: np.ndarray) -> float:
        if len(values) == 0:
            return float("nan")
        return float(func(values))

    equalizer.__name__ = func.__name__
    return equalizer


EQUALIZERS: dict[str, Equalizer] = {
    "mean": _guard(np.mean),
    "median": _guard(np.median),
    "sd": _sd,
    "var": _var,
    "min": _guard(np.min),
    "max": _guard(np.max),
    "range": _guard(np.ptp),
}
"""Registry of named equalizers.

Standard deviation and variance are sample statistics (``ddof=1``). Every
equalizer returns NaN for an empty input.
"""


def register_equalizer(name: str, func: Equalizer) -> None:
    """Add a named equalizer to the registry.

    Parameters
    ----------
    name : str
        Name used in configuration files and on the command line.
    func : Equalizer
        Function mapping an array of numbers to a single number.

    Raises
    ------
    ValueError
        If the name is empty or already registered.
    """
    if not name or not name.strip():
        raise ValueError("equalizer name must be non-empty")
    if name in EQUALIZERS:
        raise ValueError(f"equalizer '{name}' is already registered")
    EQUALIZERS[name] = func


def list_equalizers() -> list[str]:
    """Return the names of all registered equalizers."""
    return list(EQUALIZERS)


def resolve_equalizer(spec: EqualizerSpec) -> Equalizer:
    """Turn an equalizer name or callable into a callable.

    Parameters
    ----------
    spec : str | Equalizer
        Registry name or function.

    Returns
    -------
    Equalizer
        The equalizer function.

    Raises
    ------
    ConfigurationError
        If ``spec`` is an unknown name or neither a string nor callable.

    Examples
    --------
    >>> import numpy as np
    >>> resolve_equalizer("mean")(np.array([1.0, 2.0, 3.0]))
    2.0
    """
    if isinstance(spec, str):
        try:
            return EQUALIZERS[spec]
        except KeyError:
            raise ConfigurationError(
                f"Unknown equalizer '{spec}'. Available: {', '.join(EQUALIZERS)}"
            ) from None
    if callable(spec):
        return spec
    raise ConfigurationError(
        f"equalizer must be a name or a callable, not {type(spec).__name__}"
    )


def resolve_equalizers(specs: Sequence[EqualizerSpec]) -> list[Equalizer]:
    """Resolve a non-empty list of equalizer specs.

    Raises
    ------
    ConfigurationError
        If ``specs`` is empty or contains an unknown name.
    """
    if not specs:
        raise ConfigurationError("at least one equalizer must be given")
    return [resolve_equalizer(spec) for spec in specs]
