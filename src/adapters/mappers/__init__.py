"""
Mappers de dados das fontes externas
"""

from .pncp_data_mapper import PNCPDataMapper, ListingMatcher, ListedNotice

__all__ = ['PNCPDataMapper', 'ListingMatcher', 'ListedNotice']
