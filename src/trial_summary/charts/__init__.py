"""Chart builders: ``static`` (matplotlib/seaborn) and ``interactive`` (plotly)."""

from . import interactive, static
from .common import POSITIONS, check_position

__all__ = ["interactive", "static", "POSITIONS", "check_position"]
