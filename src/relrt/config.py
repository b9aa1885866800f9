"""
Named configuration parameters.

Objects are normally configured through constructor keyword arguments.
Scenery descriptions instead provide named parameters with string values,
which :func:`apply_parameters` maps onto attributes. Boolean settings come
in pairs of names (e.g. ``OpticallyThin`` / ``OpticallyThick``) so that the
name alone states the value.

Environment variables
---------------------
RELRT_LOG_LEVEL
    Default level of the ``relrt`` loggers (see
    :func:`relrt.logging_config.setup_logging`).
"""

import os
from typing import Any, Dict, Mapping, NamedTuple, Optional

from .constants import DBL_MAX, DBL_MIN


class Parameter(NamedTuple):
    """
    Description of a named parameter.

    Attributes
    ----------
    attribute : str
        Attribute set on the configured object.
    kind : str
        "double", "bool" or "object".
    value : bool, optional
        For "bool" parameters, the value implied by the name.
    doc : str
        One-line description.
    """
    attribute: str
    kind: str
    value: Optional[bool] = None
    doc: str = ""


# Parameters understood by every Emitter
EMITTER_PARAMETERS: Dict[str, Parameter] = {
    "Metric": Parameter("metric", "object",
                        doc="The geometry of space-time at this end of the Universe."),
    "RMax": Parameter("r_max", "double",
                      doc="Maximum distance from the centre of mass (geometrical units)."),
    "DeltaMaxInsideRMax": Parameter("delta_max_inside_r_max", "double",
                                    doc="Maximum integration step inside RMax (geometrical units)."),
    "Redshift": Parameter("redshift", "bool", True,
                          doc="Whether to take redshift into account."),
    "NoRedshift": Parameter("redshift", "bool", False),
    "ShowShadow": Parameter("show_shadow", "bool", True,
                            doc="Whether to highlight the shadow region on the image."),
    "NoShowShadow": Parameter("show_shadow", "bool", False),
    "OpticallyThin": Parameter("optically_thin", "bool", True,
                               doc="Whether the object should be considered optically thin or thick."),
    "OpticallyThick": Parameter("optically_thin", "bool", False),
}


def parse_double(value) -> float:
    """
    Convert a scenery value to float.

    Besides ordinary numbers, accepts the C-style extremes ``DBL_MAX`` and
    ``DBL_MIN``, optionally signed and surrounded by whitespace.

    Parameters
    ----------
    value : str or number

    Returns
    -------
    float

    Raises
    ------
    ValueError
        If the string is neither a number nor a recognized extreme.
    """
    if not isinstance(value, str):
        return float(value)
    text = value.strip()
    sign = 1.0
    if text.startswith("-"):
        sign = -1.0
        text = text[1:]
    elif text.startswith("+"):
        text = text[1:]
    if text.startswith("DBL_M"):
        if text == "DBL_MAX":
            return sign * DBL_MAX
        if text == "DBL_MIN":
            return sign * DBL_MIN
        raise ValueError(f"Unrecognized double representation: {value!r}")
    return sign * float(text)


def parse_bool(value) -> bool:
    """Convert a scenery value to bool ("true"/"false", "1"/"0", "yes"/"no")."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes", ""):
            return True
        if text in ("false", "0", "no"):
            return False
        raise ValueError(f"Can't interpret {value!r} as a boolean")
    return bool(value)


def apply_parameters(obj, parameters: Mapping[str, Any],
                     table: Mapping[str, Parameter] = EMITTER_PARAMETERS):
    """
    Set attributes of ``obj`` from named parameters.

    Parameters
    ----------
    obj : object
        Object to configure.
    parameters : mapping
        Parameter name to value. For paired boolean names the value may be
        None (name alone) or a boolean that is combined with the name, so
        ``{"OpticallyThick": False}`` makes the object optically thin.
    table : mapping, optional
        Known parameters. Default: EMITTER_PARAMETERS

    Raises
    ------
    KeyError
        If a parameter name is unknown.
    """
    for name, value in parameters.items():
        if name not in table:
            raise KeyError(f"Unknown parameter: {name}. "
                           f"Available: {', '.join(table)}")
        param = table[name]
        if param.kind == "double":
            setattr(obj, param.attribute, parse_double(value))
        elif param.kind == "bool":
            flag = True if value is None else parse_bool(value)
            setattr(obj, param.attribute, param.value if flag else not param.value)
        else:
            setattr(obj, param.attribute, value)


def get_log_level(default: str = "WARNING") -> str:
    """Log level requested through RELRT_LOG_LEVEL, upper-cased."""
    return os.environ.get("RELRT_LOG_LEVEL", default).upper()
