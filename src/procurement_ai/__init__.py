"""LLM orchestration core for RFP structuring, proposal scoring and comparison."""

__version__ = "0.1.0"
