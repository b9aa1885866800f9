"""
Spacetime metric interface.

The hit engine only needs the scalar product of two 4-vectors at a given
position, which every metric derives from its covariant components
g_{μν}. Geodesic integration (Christoffel symbols) is handled elsewhere.

Coordinates are ordered (t, x1, x2, x3): (t, x, y, z) for Cartesian
metrics and (t, r, θ, φ) for spherical metrics.
"""

import enum

import jax.numpy as jnp


class CoordKind(enum.Enum):
    """Coordinate system used by a metric."""
    CARTESIAN = "cartesian"
    SPHERICAL = "spherical"


class Metric:
    """
    Base class of spacetime metrics.

    Subclasses implement :meth:`gmunu`. :meth:`scalar_prod` contracts two
    4-vectors with it.

    Parameters
    ----------
    coord_kind : CoordKind
        Coordinate system of positions passed to this metric.
    """

    def __init__(self, coord_kind: CoordKind = CoordKind.CARTESIAN):
        self.coord_kind = coord_kind

    def gmunu(self, pos) -> jnp.ndarray:
        """
        Covariant metric components at ``pos``.

        Parameters
        ----------
        pos : array, shape (4,)
            4-position.

        Returns
        -------
        array, shape (4, 4)
        """
        raise NotImplementedError(f"{type(self).__name__} does not implement gmunu()")

    def scalar_prod(self, pos, u1, u2) -> float:
        """
        Scalar product g_{μν} u1^μ u2^ν at ``pos``.

        Parameters
        ----------
        pos : array, shape (4,)
            4-position at which the metric is evaluated.
        u1, u2 : array, shape (4,)
            Contravariant 4-vectors.

        Returns
        -------
        float
        """
        g = self.gmunu(jnp.asarray(pos, dtype=jnp.float64)[:4])
        u1 = jnp.asarray(u1, dtype=jnp.float64)[:4]
        u2 = jnp.asarray(u2, dtype=jnp.float64)[:4]
        return float(u1 @ g @ u2)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.coord_kind.value})"


class Minkowski(Metric):
    """
    Flat spacetime, signature (-, +, +, +), geometrical units (c = 1).

    Examples
    --------
    >>> gg = Minkowski()
    >>> gg.scalar_prod([0, 0, 0, 0], [1, 0, 0, 0], [1, 0, 0, 0])
    -1.0
    """

    def gmunu(self, pos) -> jnp.ndarray:
        if self.coord_kind == CoordKind.CARTESIAN:
            return jnp.diag(jnp.array([-1., 1., 1., 1.]))
        r = pos[1]
        sin_theta = jnp.sin(pos[2])
        return jnp.diag(jnp.array([-1., 1., r * r, (r * sin_theta)**2]))
