"""Conversions module: directed ratios between units and quantity conversion."""

from uom_service.modules.conversions.service import UomConversionService

__all__ = ["UomConversionService"]
