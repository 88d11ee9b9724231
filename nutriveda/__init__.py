"""
NutriVeda
Multi-system food and recipe recommendation engine.

Ayurveda, Unani, TCM and modern-nutrition evaluators scored against a
single user health profile, with a privileged safety layer that can veto
any item.

Modules:
- rules: per-system evaluators and the shared RuleResult
- nutrition: recipe nutrition aggregation
- config: weights, conflict policy and scoring bounds
- scoring: single-item score aggregation
- recommendation: filtering, ranking, meal and daily plans
- store: async persistence contracts (in-memory, PostgreSQL)
"""

__version__ = "1.0.0"
