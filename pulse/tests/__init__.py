'''
n8n Pulse Test Suite

Test Modules:
-------------
- test_statistics.py: regression, Pearson r, descriptive stats, histogram bins
- test_predictions.py: milestone forecasts and confidence levels
- test_formatters.py: number, forecast date and countdown labels
- test_transforms.py: date parsing/coarsening, overlap, range filters,
  percent/period change, dual axis, sentinel zeros
- test_registry.py: catalog invariants and lookups
- test_url_state.py: playground state codec and browser helpers
- test_data_store.py: single-flight file cache, retry after failure, HTTP reads
- test_loaders.py: time series, distribution, ranking and correlation loaders
- test_api.py: FastAPI endpoints against sample files (marked integration)

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v

Test Dependencies:
------------------
- pytest
- pytest-asyncio
- httpx

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
