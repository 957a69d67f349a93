"""
Comex Service
Dimensionamento de mercado de importação por NCM (ComexStat).

O ComexStat é agregado: não lista empresas importadoras, apenas volumes por
UF e por país de origem.
"""
import logging
from typing import Any, Dict, List, Optional

from adapters.comexstat_adapter import ComexStatClient
from validators.query_validators import clamp_int, normalize_ncm, safe_month

logger = logging.getLogger(__name__)

FOB_KEYS = ('vlFob', 'vlfob', 'valorFOB', 'fob')
KG_KEYS = ('kgLiquido', 'kgLiq', 'kg', 'peso')

NOTES = [
    "Comex Stat é agregado: não lista empresas importadoras (nome/CNPJ).",
    "Use Top UF + Top País como 'hotspots' para prospecção fora do Comex.",
]

DETAIL_FIELDS = {
    'uf': 'noUf',
    'pais': 'noPaispt',
}


def build_filter(year_start: int, year_end: int, month_start: str, month_end: str,
                 ncm: str, detail: str) -> Dict[str, Any]:
    """Monta o objeto `filter` do endpoint /general (importação, FOB e KG)"""
    return {
        'yearStart': str(year_start),
        'yearEnd': str(year_end),
        'typeForm': 2,
        'typeOrder': 1,
        'filterList': [{'id': 'noNcmpt'}],
        'filterArray': [{'item': [ncm], 'idInput': 'noNcmpt'}],
        'detailDatabase': [{'id': DETAIL_FIELDS[detail], 'text': ''}],
        'monthDetail': False,
        'metricFOB': True,
        'metricKG': True,
        'metricStatistic': False,
        'monthStart': month_start,
        'monthEnd': month_end,
        'formQueue': 'general',
        'langDefault': 'pt',
    }


def _first_number(row: Dict[str, Any], keys) -> float:
    for key in keys:
        if row.get(key) is None:
            continue
        try:
            return float(row[key])
        except (TypeError, ValueError):
            return 0.0
    return 0.0


def group_and_top(rows: List[Dict[str, Any]], key: str, top: int) -> List[Dict[str, Any]]:
    """Soma FOB/KG por `key` e devolve os `top` maiores em FOB"""
    groups: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        label = row.get(key)
        label = str(label) if label is not None else '—'
        group = groups.setdefault(label, {'key': label, 'fob': 0.0, 'kg': 0.0, 'n': 0})
        group['fob'] += _first_number(row, FOB_KEYS)
        group['kg'] += _first_number(row, KG_KEYS)
        group['n'] += 1

    return sorted(groups.values(), key=lambda g: g['fob'], reverse=True)[:top]


class ComexService:

    def __init__(self, client: ComexStatClient):
        self.client = client

    def import_overview(self, ncm: str, year_start: Optional[str] = None, year_end: Optional[str] = None,
                        month_start: Optional[str] = None, month_end: Optional[str] = None,
                        top: int = 10) -> Dict[str, Any]:
        """
        Top UFs e top países de origem das importações de um NCM.

        O total é a soma dos países do top, não o total absoluto.
        """
        ncm = normalize_ncm(ncm)
        years = self.client.get_years_range()

        start_raw = clamp_int(year_start, years['max'], years['min'], years['max'])
        end_raw = clamp_int(year_end, years['max'], years['min'], years['max'])
        first_year, last_year = min(start_raw, end_raw), max(start_raw, end_raw)

        first_month = safe_month(month_start, '01')
        last_month = safe_month(month_end, '12')

        logger.info(f"🌎 ComexStat NCM {ncm} {first_year}/{first_month} a {last_year}/{last_month}")

        rows_uf = self.client.query_general(
            build_filter(first_year, last_year, first_month, last_month, ncm, 'uf'))
        rows_pais = self.client.query_general(
            build_filter(first_year, last_year, first_month, last_month, ncm, 'pais'))

        top_uf = group_and_top(rows_uf, DETAIL_FIELDS['uf'], top)
        top_pais = group_and_top(rows_pais, DETAIL_FIELDS['pais'], top)

        return {
            'ok': True,
            'ncm': ncm,
            'periodo': {
                'yearStart': first_year,
                'yearEnd': last_year,
                'monthStart': first_month,
                'monthEnd': last_month,
            },
            'yearsAvailable': years,
            'total': {
                'fob': sum(item['fob'] for item in top_pais),
                'kg': sum(item['kg'] for item in top_pais),
            },
            'topUF': top_uf,
            'topPais': top_pais,
            'notes': list(NOTES),
        }

    def ping(self) -> Dict[str, Any]:
        result = self.client.ping()
        return {'ok': 200 <= result['status'] < 300, **result}
