"""
Ringside
========

A lifecycle rule engine for a wrestling promotion's roster: wrestlers,
managers, referees, tag teams, stables and titles.

Given an immutable entity snapshot and an effective datetime, a guard
decides whether a transition (employ, release, suspend, injure, retire,
activate, split a stable, ...) is legal and returns either the period
changes to persist or a structured rejection.

Import structure
----------------
`import ringside` is intentionally cheap: sub-modules are imported on
demand.  *networkx* is only needed by :pymod:`ringside.relationships` and
:pymod:`ringside.roster`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`ringside.periods`        – ``Period``, ``Membership``, ``Championship`` value objects
- :pymod:`ringside.models`         – entity snapshots + status enums
- :pymod:`ringside.status`         – pure status predicates (``is_employed`` ...)
- :pymod:`ringside.rejections`     – ``Action``, ``Reason``, ``Rejection``
- :pymod:`ringside.changes`        – ``PeriodChange``, ``Outcome``, ``apply_to``
- :pymod:`ringside.lifecycle`      – transition guards + ``RULES`` dispatch
- :pymod:`ringside.composite`      – stable member rules (split, add, remove)
- :pymod:`ringside.relationships`  – current membership graph (NetworkX)
- :pymod:`ringside.roster`         – ``Roster`` in‑memory store
- :pymod:`ringside.builders`       – fluent snapshot factories
- :pymod:`ringside.settings`       – ``Settings`` (pydantic-settings), ``configure_logging``

Quick start
-----------
>>> from datetime import datetime
>>> from ringside.builders import wrestler
>>> from ringside.lifecycle import suspend
>>> jey = wrestler("Jey Uso").employed(datetime(2020, 1, 1)).build()
>>> suspend(jey, datetime(2024, 5, 1)).ok
True

"""

__all__ = [
    "periods",
    "models",
    "status",
    "rejections",
    "changes",
    "lifecycle",
    "composite",
    "relationships",
    "roster",
    "builders",
    "settings",
]

__version__ = "0.1.0"
