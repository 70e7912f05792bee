from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from staffing.domain.repositories import MemberRepository

# ===== Data Classes =====

@dataclass(frozen=True)
class SwapCandidate:
    """Membro livre numa data, apto a receber uma troca."""
    id: int
    first_name: str
    last_name: str
    email: str
    department: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# ===== Operações =====

def find_swap_candidates(exclude_member_id, d: date) -> List[SwapCandidate]:
    """Lista os intervenants disponíveis na data, exceto o membro informado.

    Somente papel USER (administradores nunca entram) e com ao menos uma
    disponibilidade `available` em `d`. Sem paginação.

    Args:
        exclude_member_id: ID do membro a excluir (o solicitante).
        d (date): Data da ocorrência a ser trocada.

    Returns:
        List[SwapCandidate]: Candidatos, ordenados por nome.
    """
    qs = MemberRepository.available_on(d, exclude_id=exclude_member_id)
    return [
        SwapCandidate(
            id=m.id,
            first_name=m.first_name,
            last_name=m.last_name,
            email=m.email,
            department=m.department,
        )
        for m in qs
    ]
