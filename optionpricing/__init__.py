"""Options pricing: Black-Scholes, barrier, tree and Monte Carlo models, Greeks and implied volatility."""

__version__ = "1.0.0"

__all__ = [
    "american",
    "black_scholes",
    "cli",
    "engine",
    "greeks",
    "implied_volatility",
    "models",
    "monte_carlo",
    "normal",
    "optimization",
    "stats",
]