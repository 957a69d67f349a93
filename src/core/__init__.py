"""
Módulo core - motor de varredura do PNCP

Janelas de datas, paginação, filtragem de registros, agregação por
fornecedor e orquestração (bloqueante ou em streaming).
"""

from .aggregation import SupplierAggregator, AggregateEntry, compute_score
from .cancellation import CancelToken, ScanRegistry
from .matching import ContractMatcher, NoticeMatcher, fold_text
from .pagination import PageResult, PageWalker, RecordBatch, WalkStatus
from .scanner import ScanOrchestrator, ScanProgress, ScanResult, ScanStatus
from .windows import DateWindow, MAX_WINDOW_DAYS, parse_date, split_into_windows

__all__ = [
    'SupplierAggregator', 'AggregateEntry', 'compute_score',
    'CancelToken', 'ScanRegistry',
    'ContractMatcher', 'NoticeMatcher', 'fold_text',
    'PageResult', 'PageWalker', 'RecordBatch', 'WalkStatus',
    'ScanOrchestrator', 'ScanProgress', 'ScanResult', 'ScanStatus',
    'DateWindow', 'MAX_WINDOW_DAYS', 'parse_date', 'split_into_windows',
]
