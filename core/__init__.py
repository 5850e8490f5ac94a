"""
Core Package

Contains the provider-agnostic logic of the market-data client:
- MarketDataClient: fallback orchestrator over ordered provider chains
- MarketDataProvider: abstract contract every upstream adapter implements
- Transport: single-request HTTP layer with error classification
- Schemas: canonical pydantic models (MarketSnapshot, HistoricalCandle, PredictionResult)
- Prediction: local momentum heuristic used when no forecast service answers
"""
