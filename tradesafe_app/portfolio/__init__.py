"""
Cosmetic portfolio simulation for the dashboard summary panel.
"""
from .simulator import PortfolioSimulator, PortfolioSnapshot

__all__ = ["PortfolioSimulator", "PortfolioSnapshot"]
