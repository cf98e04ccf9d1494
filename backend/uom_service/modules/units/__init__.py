"""Units module: unit of measure registry."""

from uom_service.modules.units.service import UomService

__all__ = ["UomService"]
