"""
StrategicSolver: Solution concepts for normal-form games

Payoff tensors for finite n-player games together with maximin,
iterated strict dominance, pure and mixed Nash equilibria and
Stackelberg commitment, each reduced to linear programs.
"""

__version__ = "0.1.0"
