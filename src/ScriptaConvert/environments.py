from __future__ import annotations

from enum import Enum

from .model import ListKind


class EnvKind(Enum):
    LIST = "list"
    VERBATIM = "verbatim"
    TIKZ = "tikz"
    TABLE = "table"
    ORDINARY = "ordinary"


LIST_KINDS = {
    "itemize": ListKind.ITEMIZE,
    "enumerate": ListKind.ENUMERATE,
    "description": ListKind.DESCRIPTION,
}

# Every \begin{name} is classified here; names not listed are ordinary.
ENVIRONMENT_KINDS = {
    **{name: EnvKind.LIST for name in LIST_KINDS},
    "verbatim": EnvKind.VERBATIM,
    "lstlisting": EnvKind.VERBATIM,
    "minted": EnvKind.VERBATIM,
    "code": EnvKind.VERBATIM,
    "equation": EnvKind.VERBATIM,
    "equation*": EnvKind.VERBATIM,
    "align": EnvKind.VERBATIM,
    "align*": EnvKind.VERBATIM,
    "aligned": EnvKind.VERBATIM,
    "gather": EnvKind.VERBATIM,
    "gather*": EnvKind.VERBATIM,
    "multline": EnvKind.VERBATIM,
    "multline*": EnvKind.VERBATIM,
    "eqnarray": EnvKind.VERBATIM,
    "displaymath": EnvKind.VERBATIM,
    "math": EnvKind.VERBATIM,
    "tikzpicture": EnvKind.TIKZ,
    "tikzcd": EnvKind.TIKZ,
    "figure": EnvKind.TIKZ,
    "figure*": EnvKind.TIKZ,
    "table": EnvKind.TABLE,
    "table*": EnvKind.TABLE,
    "tabular": EnvKind.TABLE,
    "longtable": EnvKind.TABLE,
}

FIGURE_ENVIRONMENTS = {"figure", "figure*"}

# Environments taking a mandatory {argument} after \begin{name}[...].
ARGUMENT_PROPERTIES = {
    "minted": "lang",
    "tabular": "format",
    "longtable": "format",
}


def environment_kind(name: str) -> EnvKind:
    return ENVIRONMENT_KINDS.get(name, EnvKind.ORDINARY)
