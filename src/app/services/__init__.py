"""Serviços de aplicação.

Unidades puras do pipeline de importação (sem IO direto, exceto o
committer, que fala com o repositório por protocolo).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.import_committer import ImportCommitter
from app.services.schedule_normalizer import ScheduleNormalizer, normalize
from app.services.schedule_reconciler import reconcile

__all__ = [
    "ImportCommitter",
    "ScheduleNormalizer",
    "normalize",
    "reconcile",
]
