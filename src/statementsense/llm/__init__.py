"""LLM extraction and analytics module."""
from .models import Transaction, PageImage, PageResult, Summary, PieSlice, CashflowSplit
from .extractor import GeminiExtractor
from .aggregator import Aggregator

__all__ = [
    "Transaction",
    "PageImage",
    "PageResult",
    "Summary",
    "PieSlice",
    "CashflowSplit",
    "GeminiExtractor",
    "Aggregator"
]
