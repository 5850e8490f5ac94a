"""
Test Suite

Structure:
- tests/unit/: Tests for normalizers, adapters, transport, the fallback
  chains and the prediction heuristic. No test touches the real network.

Uses pytest with pytest-asyncio for testing async functionality.
"""
