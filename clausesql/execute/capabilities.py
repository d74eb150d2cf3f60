"""Driver capability registry.

Generated-key retrieval differs between DB-API drivers: ``sqlite3`` and the
MySQL drivers report the new row id through ``cursor.lastrowid``, while the
PostgreSQL drivers expose an OID there (usually ``0`` or ``None``) and need
``RETURNING`` instead.  Rather than intercepting failures, the execution
engine asks this registry once per driver whether ``lastrowid`` is
meaningful.

Register capabilities for a new driver by its top-level module name::

    from clausesql.execute.capabilities import CapabilityRegistry, DriverCapabilities

    CapabilityRegistry.register("oracledb", DriverCapabilities(generated_keys=False))

Unregistered drivers are probed once: a driver whose cursors expose a
``lastrowid`` attribute is assumed to support generated keys.
"""
from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriverCapabilities:
    """What a DB-API driver supports.

    Attributes:
        generated_keys: ``cursor.lastrowid`` yields the generated key of the
            last single-row insert.
    """

    generated_keys: bool = False


def driver_name(connection: Any) -> str:
    """Return the top-level module name of ``connection``'s driver."""
    return type(connection).__module__.split(".")[0]


class CapabilityRegistry:
    """Registry mapping driver module names to :class:`DriverCapabilities`."""

    _capabilities: ClassVar[dict[str, DriverCapabilities]] = {}

    @classmethod
    def register(cls, driver: str, capabilities: DriverCapabilities) -> None:
        """Register ``capabilities`` for the driver module ``driver``.

        Args:
            driver: Top-level module name (e.g. ``"sqlite3"``).
            capabilities: The driver's capabilities.
        """
        cls._capabilities[driver] = capabilities

    @classmethod
    def unregister(cls, driver: str) -> None:
        """Forget ``driver`` so that it is probed again on next use."""
        cls._capabilities.pop(driver, None)

    @classmethod
    def for_connection(cls, connection: Any) -> DriverCapabilities:
        """Return the capabilities of ``connection``'s driver.

        Unknown drivers are probed once and the result is cached.
        """
        name = driver_name(connection)
        capabilities = cls._capabilities.get(name)
        if capabilities is None:
            capabilities = cls._probe(connection)
            logger.debug("Probed driver %r: %s", name, capabilities)
            cls._capabilities[name] = capabilities
        return capabilities

    @classmethod
    def registered_drivers(cls) -> list[str]:
        """Return the sorted list of registered driver names."""
        return sorted(cls._capabilities)

    @staticmethod
    def _probe(connection: Any) -> DriverCapabilities:
        with closing(connection.cursor()) as cursor:
            return DriverCapabilities(generated_keys=hasattr(cursor, "lastrowid"))

