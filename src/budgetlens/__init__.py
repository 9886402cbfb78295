"""BudgetLens financial analytics and insight engine.

Pure functions over in-memory transactions and budgets: aggregation,
insight classification, historical trends, forecasting and year-over-year
comparison.
"""

__version__ = "0.1.0"
