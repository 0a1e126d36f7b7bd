from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from survey_charts.errors import InvalidInput

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


@dataclass(frozen=True)
class Cluster:
    centroid: Point2D
    member_indices: frozenset[int]


@dataclass(frozen=True)
class KMeansResult:
    centroids: np.ndarray
    assignment: np.ndarray
    iterations: int
    converged: bool

    @property
    def k(self) -> int:
        return int(self.centroids.shape[0])

    def centroid_points(self) -> list[Point2D]:
        return [Point2D(x=float(cx), y=float(cy)) for cx, cy in self.centroids]

    def clusters(self) -> list[Cluster]:
        return [
            Cluster(
                centroid=centroid,
                member_indices=frozenset(int(i) for i in np.flatnonzero(self.assignment == idx)),
            )
            for idx, centroid in enumerate(self.centroid_points())
        ]


def _as_points(points: Sequence[Point2D] | np.ndarray) -> np.ndarray:
    if isinstance(points, np.ndarray):
        array = points.astype(float, copy=True)
    else:
        items = list(points)
        if items and all(isinstance(item, Point2D) for item in items):
            array = np.array([[item.x, item.y] for item in items], dtype=float)
        else:
            try:
                array = np.array(items, dtype=float)
            except (TypeError, ValueError) as exc:
                raise InvalidInput(f"Points must be numeric (x, y) pairs: {exc}") from exc

    if array.size == 0:
        raise InvalidInput("Cannot cluster an empty set of points")
    if array.ndim != 2 or array.shape[1] != 2:
        raise InvalidInput(f"Points must have shape (n, 2), got {array.shape}")
    if not np.all(np.isfinite(array)):
        raise InvalidInput("Points contain NaN or infinite coordinates")
    return array


def _assign(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    diffs = points[:, None, :] - centroids[None, :, :]
    squared = np.einsum("nkd,nkd->nk", diffs, diffs)
    # argmin keeps the first minimum, so ties go to the lowest cluster index.
    return np.argmin(squared, axis=1)


def _update(points: np.ndarray, assignment: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    updated = centroids.copy()
    for idx in range(centroids.shape[0]):
        members = assignment == idx
        if not members.any():
            LOGGER.debug("Cluster %d has no members; keeping previous centroid", idx)
            continue
        updated[idx] = points[members].mean(axis=0)
    return updated


def kmeans(
    points: Sequence[Point2D] | np.ndarray,
    k: int,
    max_iter: int,
    *,
    rng: np.random.Generator | None = None,
    initial_centroids: np.ndarray | Sequence[Sequence[float]] | None = None,
) -> KMeansResult:
    """Lloyd's k-means over 2-D points.

    Initial centroids are ``k`` distinct input points drawn without replacement
    from ``rng`` unless ``initial_centroids`` is given. Iteration stops once an
    update leaves every assignment unchanged or after ``max_iter`` updates.
    Clusters that lose all members keep their previous centroid.
    """
    data = _as_points(points)
    n_points = data.shape[0]
    if int(k) != k or k <= 0:
        raise InvalidInput(f"k must be a positive integer, got {k}")
    k = int(k)
    if k > n_points:
        raise InvalidInput(f"k={k} exceeds the number of points ({n_points})")
    if int(max_iter) < 1:
        raise InvalidInput(f"max_iter must be >= 1, got {max_iter}")

    if initial_centroids is not None:
        centroids = np.array(initial_centroids, dtype=float)
        if centroids.shape != (k, 2) or not np.all(np.isfinite(centroids)):
            raise InvalidInput(f"initial_centroids must be {k} finite (x, y) pairs")
    else:
        generator = rng if rng is not None else np.random.default_rng()
        chosen = generator.choice(n_points, size=k, replace=False)
        centroids = data[chosen].copy()

    assignment = _assign(data, centroids)
    iterations = 0
    converged = False
    while iterations < int(max_iter):
        centroids = _update(data, assignment, centroids)
        iterations += 1
        next_assignment = _assign(data, centroids)
        if np.array_equal(next_assignment, assignment):
            converged = True
            break
        assignment = next_assignment

    if converged:
        LOGGER.debug("k-means converged after %d iterations (k=%d)", iterations, k)
    else:
        LOGGER.debug("k-means stopped at max_iter=%d without converging (k=%d)", max_iter, k)

    return KMeansResult(
        centroids=centroids,
        assignment=assignment.astype(int),
        iterations=iterations,
        converged=converged,
    )
