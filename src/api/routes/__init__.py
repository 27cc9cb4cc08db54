"""Rotas HTTP da API.

Estrutura:
- routes/calendar/: vínculo OAuth e sincronização do Google Calendar
- routes/schedule/: importação de itens extraídos de imagem
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
- errors.py: mapeamento de exceções tipadas para HTTP
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
