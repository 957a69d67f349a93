"""
Agregação de contratos por fornecedor e ranking.

O mapa é montado incrementalmente, página a página; o ranking é sempre
recalculado a partir do mapa completo.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from core.matching import MatchedContract, to_amount

logger = logging.getLogger(__name__)

MAX_SAMPLES = 3
SAMPLE_LENGTH = 140


def _date_key(value: str) -> Optional[datetime]:
    """Interpreta datas do PNCP ('2024-05-01', '2024-05-01T10:00:00', '20240501')"""
    text = value.strip()
    if len(text) == 8 and text.isdigit():
        text = f"{text[:4]}-{text[4:6]}-{text[6:]}"
    try:
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def is_later(candidate: Optional[str], current: Optional[str]) -> bool:
    """
    True se `candidate` é posterior a `current`.

    Compara como data quando as duas são interpretáveis; caso contrário,
    cai na comparação de strings (válida para o formato ISO do PNCP).
    """
    if not candidate:
        return False
    if not current:
        return True
    candidate_key, current_key = _date_key(candidate), _date_key(current)
    if candidate_key is not None and current_key is not None:
        return candidate_key > current_key
    return candidate > current


@dataclass
class AggregateEntry:
    supplier_id: str
    name: str
    occurrences: int = 0
    total_value: float = 0.0
    regions: Set[str] = field(default_factory=set)
    last_seen: Optional[str] = None
    samples: List[str] = field(default_factory=list)

    def add_sample(self, text: str) -> None:
        sample = text[:SAMPLE_LENGTH]
        if len(self.samples) < MAX_SAMPLES and sample not in self.samples:
            self.samples.append(sample)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ni': self.supplier_id,
            'nome': self.name,
            'score': compute_score(self),
            'ocorrencias': self.occurrences,
            'valorTotal': round(self.total_value, 2),
            'ufs': sorted(self.regions),
            'ultimaPublicacao': self.last_seen,
            'exemplos': list(self.samples),
        }


def compute_score(entry: AggregateEntry) -> float:
    """
    Pontuação do fornecedor: ocorrências dominam, volume entra atenuado por
    log10 e a diversidade de UFs desempata.
    """
    score = (entry.occurrences * 10
             + math.log10(1 + max(entry.total_value, 0.0)) * 5
             + len(entry.regions) * 2)
    return round(score, 1)


class SupplierAggregator:
    """Mapa fornecedor -> AggregateEntry de uma única varredura"""

    def __init__(self):
        self.entries: Dict[str, AggregateEntry] = {}

    def __len__(self) -> int:
        return len(self.entries)

    def _entry(self, key: str, supplier_id: str, name: str) -> AggregateEntry:
        entry = self.entries.get(key)
        if entry is None:
            entry = AggregateEntry(supplier_id=supplier_id, name=name)
            self.entries[key] = entry
        return entry

    def merge(self, matched: Iterable[MatchedContract]) -> None:
        for contract in matched:
            entry = self._entry(contract.key, contract.supplier_id, contract.supplier_name)
            entry.occurrences += 1
            entry.total_value += max(contract.amount, 0.0)
            if contract.region:
                entry.regions.add(contract.region)
            if is_later(contract.published_at, entry.last_seen):
                entry.last_seen = contract.published_at
            entry.add_sample(contract.description)

    def merge_partials(self, items: Iterable[Any]) -> int:
        """
        Incorpora agregados parciais já prontos (formato de `to_dict`), como os
        devolvidos pela varredura de página única.

        Returns:
            Quantidade de itens incorporados (itens malformados são ignorados)
        """
        merged = 0
        for item in items:
            if not isinstance(item, dict):
                continue
            supplier_id = str(item.get('ni') or '').strip()
            name = str(item.get('nome') or '').strip()
            if not supplier_id or not name:
                continue

            entry = self._entry(f"{supplier_id}__{name}", supplier_id, name)
            occurrences = to_amount(item.get('ocorrencias')) or 0
            entry.occurrences += int(occurrences)
            entry.total_value += max(to_amount(item.get('valorTotal')) or 0.0, 0.0)
            for uf in item.get('ufs') or []:
                if isinstance(uf, str) and uf:
                    entry.regions.add(uf)
            published = item.get('ultimaPublicacao')
            if isinstance(published, str) and is_later(published, entry.last_seen):
                entry.last_seen = published
            for sample in item.get('exemplos') or []:
                if isinstance(sample, str):
                    entry.add_sample(sample)
            merged += 1
        return merged

    def top(self, n: int) -> List[Dict[str, Any]]:
        """Ranking por score decrescente (ordenação estável), limitado a n"""
        if n <= 0:
            return []
        ranked = sorted(
            (entry.to_dict() for entry in self.entries.values()),
            key=lambda item: item['score'],
            reverse=True,
        )
        return ranked[:n]
