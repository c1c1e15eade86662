"""
REST API Module
===============

Order, market data, account and analyzer endpoints of the OpenAlgo
server, plus the strategy webhook client.
"""

from .base import BaseAPI
from .orders import OrderAPI
from .data import DataAPI
from .account import AccountAPI
from .analyzer import AnalyzerAPI
from .strategy import Strategy

__all__ = [
    'BaseAPI',
    'OrderAPI',
    'DataAPI',
    'AccountAPI',
    'AnalyzerAPI',
    'Strategy'
]
